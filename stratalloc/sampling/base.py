"""Base class for allocation strategies.

Defines the interface that all allocation strategies must implement.
"""

import logging
import math
import numbers
from abc import ABC, abstractmethod
from typing import List

import pandas as pd

from stratalloc.errors import AllocationError, InvalidParameterError
from stratalloc.sampling.types import (
    AllocationInputs,
    AllocationMethod,
    AllocationResult,
    StratumAllocation,
)
from stratalloc.scripts.precision import (
    calculate_achieved_margin_of_error,
    calculate_achieved_variance,
    calculate_total_cost,
)
from stratalloc.scripts.stratified import (
    build_strata_frame,
    round_allocation,
    validate_strata,
)

logger = logging.getLogger("stratalloc.sampling")


def _as_real(value):
    # Strings and booleans are rejected rather than coerced
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    return float(value) if math.isfinite(value) else None


class AllocationStrategy(ABC):
    """Abstract base class for allocation strategies.

    Each allocation method (proportional, Neyman, cost or time optimum)
    implements the two formulas below. Validation, rounding and diagnostics
    are shared, so every method reports its results the same way.
    """

    @property
    @abstractmethod
    def method(self) -> AllocationMethod:
        """Return the allocation method this strategy handles."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for this allocation method."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of when to use this allocation method."""
        pass

    @property
    def requires_unit_time(self) -> bool:
        """Whether this method needs a unit time for every stratum."""
        return False

    @abstractmethod
    def calculate_sample_size(
        self, strata_df: pd.DataFrame, target_variance: float, total_population: int
    ) -> float:
        """Continuous total sample size meeting the target variance.

        Args:
            strata_df: Stratum table
            target_variance: Target variance V
            total_population: Total population N

        Returns:
            Sample size n before rounding
        """
        pass

    @abstractmethod
    def allocation_weights(self, strata_df: pd.DataFrame) -> pd.Series:
        """Share of the total sample given to each stratum.

        Args:
            strata_df: Stratum table

        Returns:
            Series of weights indexed by stratum id, summing to 1
        """
        pass

    def validate_inputs(self, inputs: AllocationInputs) -> List[str]:
        """Validate inputs for this allocation method.

        Args:
            inputs: Allocation inputs to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = self._validate_common_inputs(inputs)
        errors.extend(
            validate_strata(inputs.strata, require_unit_time=self.requires_unit_time)
        )
        return errors

    def calculate(self, inputs: AllocationInputs) -> AllocationResult:
        """Calculate total sample size and per-stratum allocation.

        Args:
            inputs: Allocation inputs

        Returns:
            AllocationResult with calculated values

        Raises:
            InvalidParameterError: If the inputs are invalid
            DegenerateVarianceError: If the variance bound is not positive
        """
        errors = self.validate_inputs(inputs)
        if errors:
            message = "; ".join(errors)
            logger.error(f"Invalid inputs for {self.display_name}: {message}")
            raise InvalidParameterError(message)

        try:
            strata_df = build_strata_frame(
                inputs.strata, require_unit_time=self.requires_unit_time
            )
            parameters = inputs.parameters
            target_variance = parameters.target_variance

            n = self.calculate_sample_size(
                strata_df, target_variance, parameters.total_population
            )
            weights = self.allocation_weights(strata_df)
        except AllocationError as e:
            logger.error(f"Error in {self.display_name} calculation: {e}")
            raise

        allocation = round_allocation(n, weights)
        logger.debug(
            f"{self.display_name}: V={target_variance:.6f}, n={n:.4f}, "
            f"allocation={allocation}"
        )

        achieved_variance = calculate_achieved_variance(strata_df, allocation)

        allocations = [
            StratumAllocation(
                stratum_id=stratum,
                samples=allocation[stratum],
                weight=float(wh),
                allocation_weight=float(weights[stratum]),
            )
            for stratum, wh in zip(strata_df["stratum"].tolist(), strata_df["Wh"])
        ]

        return AllocationResult(
            method=self.method,
            total_sample_size=math.ceil(n),
            continuous_sample_size=n,
            target_variance=target_variance,
            allocations=allocations,
            achieved_variance=achieved_variance,
            achieved_margin_of_error=calculate_achieved_margin_of_error(
                achieved_variance, parameters.confidence_z
            ),
            total_cost=calculate_total_cost(strata_df, allocation, column="Ch"),
            total_time=calculate_total_cost(strata_df, allocation, column="Th"),
        )

    def is_ready(self, inputs: AllocationInputs) -> bool:
        """Check if inputs are ready for calculation.

        Args:
            inputs: Allocation inputs to check

        Returns:
            True if ready for calculation
        """
        errors = self.validate_inputs(inputs)
        return len(errors) == 0

    def _validate_common_inputs(self, inputs: AllocationInputs) -> List[str]:
        """Validate survey parameters common to all allocation methods.

        Args:
            inputs: Allocation inputs to validate

        Returns:
            List of validation error messages
        """
        errors = []

        margin = _as_real(inputs.margin_of_error)
        if margin is None or margin <= 0:
            errors.append("Margin of error must be greater than 0")

        if inputs.confidence_z is not None:
            z = _as_real(inputs.confidence_z)
            if z is None or z <= 0:
                errors.append("Confidence Z must be greater than 0")
        else:
            level = _as_real(inputs.confidence_level)
            if level is None or not (0 < level < 100):
                errors.append("Confidence level must be between 0% and 100%")

        return errors

"""Allocation service for orchestrating allocation calculations.

This module provides the main entry points for callers to interact
with the allocation strategies.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Type

import pandas as pd

from stratalloc.sampling.base import AllocationStrategy
from stratalloc.sampling.neyman import NeymanAllocationStrategy
from stratalloc.sampling.optimum import (
    CostOptimumAllocationStrategy,
    TimeOptimumAllocationStrategy,
)
from stratalloc.sampling.proportional import ProportionalAllocationStrategy
from stratalloc.sampling.types import (
    AllocationInputs,
    AllocationMethod,
    AllocationResult,
)

logger = logging.getLogger("stratalloc.sampling.service")

# Registry of available strategies
_STRATEGY_REGISTRY: Dict[AllocationMethod, Type[AllocationStrategy]] = {
    AllocationMethod.PROPORTIONAL: ProportionalAllocationStrategy,
    AllocationMethod.NEYMAN: NeymanAllocationStrategy,
    AllocationMethod.COST_OPTIMUM: CostOptimumAllocationStrategy,
    AllocationMethod.TIME_OPTIMUM: TimeOptimumAllocationStrategy,
}

# Methods run by calculate_all when none are requested
DEFAULT_METHODS: Tuple[AllocationMethod, ...] = (
    AllocationMethod.PROPORTIONAL,
    AllocationMethod.NEYMAN,
    AllocationMethod.COST_OPTIMUM,
)

# Cached strategy instances
_strategy_instances: Dict[AllocationMethod, AllocationStrategy] = {}


def get_allocation_strategy(method: AllocationMethod) -> AllocationStrategy:
    """Get the allocation strategy for a given method.

    Args:
        method: The allocation method

    Returns:
        The corresponding AllocationStrategy instance

    Raises:
        ValueError: If the method is not supported
    """
    if method not in _STRATEGY_REGISTRY:
        raise ValueError(f"Unsupported allocation method: {method}")

    # Use cached instance if available
    if method not in _strategy_instances:
        _strategy_instances[method] = _STRATEGY_REGISTRY[method]()

    return _strategy_instances[method]


def get_strategy_from_string(method_str: str) -> AllocationStrategy:
    """Get allocation strategy from string method name.

    Args:
        method_str: String name of allocation method (e.g., "neyman")

    Returns:
        The corresponding AllocationStrategy instance
    """
    method = AllocationMethod.from_string(method_str)
    return get_allocation_strategy(method)


class AllocationService:
    """High-level service for allocation calculations."""

    @staticmethod
    def calculate(inputs: AllocationInputs, method: AllocationMethod) -> AllocationResult:
        """Calculate an allocation using the appropriate strategy.

        Args:
            inputs: Allocation inputs
            method: Allocation method to apply

        Returns:
            AllocationResult from the calculation
        """
        strategy = get_allocation_strategy(method)
        return strategy.calculate(inputs)

    @staticmethod
    def calculate_all(
        inputs: AllocationInputs,
        methods: Optional[Iterable[AllocationMethod]] = None,
    ) -> Dict[AllocationMethod, AllocationResult]:
        """Calculate allocations for several methods on the same inputs.

        The methods are independent of each other; results keep the order
        in which the methods were requested.

        Args:
            inputs: Allocation inputs
            methods: Methods to run (defaults to proportional, Neyman and cost optimum)

        Returns:
            Dictionary mapping each method to its result
        """
        methods = DEFAULT_METHODS if methods is None else tuple(methods)
        logger.info(
            f"Calculating {len(methods)} allocations for {len(inputs.strata)} strata"
        )

        results = {}
        for method in methods:
            results[method] = AllocationService.calculate(inputs, method)
        return results

    @staticmethod
    def is_ready(inputs: AllocationInputs, method: AllocationMethod) -> bool:
        """Check if the inputs are ready for calculation.

        Args:
            inputs: Allocation inputs
            method: Allocation method to check against

        Returns:
            True if ready for calculation
        """
        return get_allocation_strategy(method).is_ready(inputs)

    @staticmethod
    def get_validation_errors(
        inputs: AllocationInputs, method: AllocationMethod
    ) -> List[str]:
        """Get validation errors for the inputs.

        Args:
            inputs: Allocation inputs
            method: Allocation method to validate against

        Returns:
            List of validation error messages
        """
        return get_allocation_strategy(method).validate_inputs(inputs)

    @staticmethod
    def get_available_methods() -> list:
        """Get list of available allocation methods.

        Returns:
            List of (method_value, display_name, description) tuples
        """
        methods = []
        for method in AllocationMethod:
            strategy = get_allocation_strategy(method)
            methods.append((method.value, strategy.display_name, strategy.description))
        return methods

    @staticmethod
    def allocation_summary(
        results: Mapping[AllocationMethod, AllocationResult],
    ) -> pd.DataFrame:
        """Create a summary DataFrame comparing allocation results.

        Args:
            results: Results keyed by method, as returned by calculate_all

        Returns:
            DataFrame with one row per method and stratum
        """
        results_data = []

        for method, result in results.items():
            for alloc in result.allocations:
                results_data.append(
                    {
                        "method": method.value,
                        "total_sample_size": result.total_sample_size,
                        "stratum": alloc.stratum_id,
                        "weight": alloc.weight,
                        "allocation_weight": alloc.allocation_weight,
                        "samples": alloc.samples,
                    }
                )

        return pd.DataFrame(
            results_data,
            columns=[
                "method",
                "total_sample_size",
                "stratum",
                "weight",
                "allocation_weight",
                "samples",
            ],
        )

"""Optimum allocation strategy implementations.

Optimum allocation minimizes the total survey budget for a fixed target
variance. The budget is either money (unit cost C_h) or field time
(unit time T_h); both use the same formula with a different unit column.
"""

import logging

import pandas as pd

from stratalloc.sampling.base import AllocationStrategy
from stratalloc.sampling.types import AllocationMethod
from stratalloc.scripts.stratified import (
    calculate_optimum_sample_size,
    optimum_allocation_weights,
)

logger = logging.getLogger("stratalloc.sampling.optimum")


class CostOptimumAllocationStrategy(AllocationStrategy):
    """Strategy for cost-optimum allocation (n_h proportional to N_h x S_h / √C_h)."""

    unit_column = "Ch"

    @property
    def method(self) -> AllocationMethod:
        return AllocationMethod.COST_OPTIMUM

    @property
    def display_name(self) -> str:
        return "Optimum Allocation (Cost)"

    @property
    def description(self) -> str:
        return (
            "Allocate more samples to strata that are variable and cheap to "
            "sample. Minimizes total cost for the target margin of error."
        )

    def calculate_sample_size(
        self, strata_df: pd.DataFrame, target_variance: float, total_population: int
    ) -> float:
        n = calculate_optimum_sample_size(
            strata_df, target_variance, total_population, column=self.unit_column
        )
        logger.debug(f"{self.display_name} sample size: {n:.4f}")
        return n

    def allocation_weights(self, strata_df: pd.DataFrame) -> pd.Series:
        return optimum_allocation_weights(strata_df, column=self.unit_column)


class TimeOptimumAllocationStrategy(CostOptimumAllocationStrategy):
    """Strategy for time-optimum allocation (n_h proportional to N_h x S_h / √T_h)."""

    unit_column = "Th"

    @property
    def method(self) -> AllocationMethod:
        return AllocationMethod.TIME_OPTIMUM

    @property
    def display_name(self) -> str:
        return "Optimum Allocation (Time)"

    @property
    def description(self) -> str:
        return (
            "Allocate more samples to strata that are variable and quick to "
            "sample. Minimizes total field time for the target margin of error."
        )

    @property
    def requires_unit_time(self) -> bool:
        return True

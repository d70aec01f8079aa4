"""Proportional allocation strategy implementation.

Each stratum receives a share of the sample equal to its share of the
population. This is the baseline allocation and needs no knowledge of
costs; only the stratum spreads enter the total sample size.
"""

import logging

import pandas as pd

from stratalloc.sampling.base import AllocationStrategy
from stratalloc.sampling.types import AllocationMethod
from stratalloc.scripts.stratified import (
    calculate_proportional_sample_size,
    proportional_allocation_weights,
)

logger = logging.getLogger("stratalloc.sampling.proportional")


class ProportionalAllocationStrategy(AllocationStrategy):
    """Strategy for proportional allocation (n_h = n x W_h)."""

    @property
    def method(self) -> AllocationMethod:
        return AllocationMethod.PROPORTIONAL

    @property
    def display_name(self) -> str:
        return "Proportional Allocation"

    @property
    def description(self) -> str:
        return (
            "Allocate samples in proportion to stratum population size. "
            "Self-weighting and robust when stratum spreads are similar."
        )

    def calculate_sample_size(
        self, strata_df: pd.DataFrame, target_variance: float, total_population: int
    ) -> float:
        n = calculate_proportional_sample_size(
            strata_df, target_variance, total_population
        )
        logger.debug(f"Proportional sample size: {n:.4f}")
        return n

    def allocation_weights(self, strata_df: pd.DataFrame) -> pd.Series:
        return proportional_allocation_weights(strata_df)

"""Neyman allocation strategy implementation.

Neyman allocation minimizes the variance of the stratified mean for a fixed
total sample size by putting more samples in larger and more variable strata.
"""

import logging

import pandas as pd

from stratalloc.sampling.base import AllocationStrategy
from stratalloc.sampling.types import AllocationMethod
from stratalloc.scripts.stratified import (
    calculate_neyman_sample_size,
    neyman_allocation_weights,
)

logger = logging.getLogger("stratalloc.sampling.neyman")


class NeymanAllocationStrategy(AllocationStrategy):
    """Strategy for Neyman allocation (n_h proportional to N_h x S_h).

    Neyman allocation is ideal when:
    - Stratum standard deviations differ noticeably
    - The cost of sampling a unit is about the same in every stratum
    """

    @property
    def method(self) -> AllocationMethod:
        return AllocationMethod.NEYMAN

    @property
    def display_name(self) -> str:
        return "Neyman Allocation"

    @property
    def description(self) -> str:
        return (
            "Allocate samples in proportion to stratum size times standard "
            "deviation. Minimizes variance for a fixed total sample size."
        )

    def calculate_sample_size(
        self, strata_df: pd.DataFrame, target_variance: float, total_population: int
    ) -> float:
        n = calculate_neyman_sample_size(strata_df, target_variance, total_population)
        logger.debug(f"Neyman sample size: {n:.4f}")
        return n

    def allocation_weights(self, strata_df: pd.DataFrame) -> pd.Series:
        return neyman_allocation_weights(strata_df)

"""Allocation strategies module.

This module provides an extensible architecture for the different ways of
allocating a stratified sample. Each allocation method is implemented as a
Strategy class that handles:
- Input validation
- Total sample size calculation
- Per-stratum allocation and rounding
- Precision and cost diagnostics

Usage:
    from stratalloc.sampling import get_allocation_strategy, AllocationMethod

    strategy = get_allocation_strategy(AllocationMethod.NEYMAN)
    if strategy.is_ready(inputs):
        result = strategy.calculate(inputs)
"""

from stratalloc.sampling.base import AllocationStrategy
from stratalloc.sampling.service import (
    AllocationService,
    get_allocation_strategy,
    get_strategy_from_string,
)
from stratalloc.sampling.types import (
    AllocationInputs,
    AllocationMethod,
    AllocationResult,
    StratumAllocation,
    StratumRecord,
    SurveyParameters,
)

__all__ = [
    "AllocationStrategy",
    "AllocationMethod",
    "AllocationInputs",
    "AllocationResult",
    "StratumAllocation",
    "StratumRecord",
    "SurveyParameters",
    "AllocationService",
    "get_allocation_strategy",
    "get_strategy_from_string",
]

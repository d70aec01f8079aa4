"""Stratalloc Scripts Package.

Contains the allocation formulas and precision diagnostics.
"""

from .calc_utils import (
    calculate_target_variance,
    get_z_score,
)
from .logger import setup_logging
from .precision import (
    calculate_achieved_margin_of_error,
    calculate_achieved_variance,
    calculate_total_cost,
)
from .stratified import (
    build_strata_frame,
    calculate_neyman_sample_size,
    calculate_optimum_sample_size,
    calculate_proportional_sample_size,
    finite_population_denominator,
    get_total_population,
    neyman_allocation_weights,
    optimum_allocation_weights,
    proportional_allocation_weights,
    round_allocation,
    validate_strata,
)

__all__ = [
    # Calculations
    "get_z_score",
    "calculate_target_variance",
    "build_strata_frame",
    "validate_strata",
    "get_total_population",
    "finite_population_denominator",
    "calculate_proportional_sample_size",
    "calculate_neyman_sample_size",
    "calculate_optimum_sample_size",
    "proportional_allocation_weights",
    "neyman_allocation_weights",
    "optimum_allocation_weights",
    "round_allocation",
    # Precision
    "calculate_achieved_variance",
    "calculate_achieved_margin_of_error",
    "calculate_total_cost",
    # Logging
    "setup_logging",
]

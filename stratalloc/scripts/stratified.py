"""Stratified allocation formulas.

Each allocation method is split into a total sample size formula and a
per-stratum weight formula. All functions take the stratum table built by
``build_strata_frame`` and never modify it.

References:
- Cochran, W.G. (1977). Sampling Techniques (3rd ed.), ch. 5. Wiley.
"""

import logging
import math
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from stratalloc.errors import DegenerateVarianceError, InvalidParameterError
from stratalloc.scripts.parameter import STRATUM_COLUMNS

logger = logging.getLogger("stratalloc.scripts.stratified")


def _is_positive_integer(value) -> bool:
    if isinstance(value, (bool, str, bytes)):
        return False
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(as_float) and as_float.is_integer() and as_float > 0


def _as_finite(value):
    if isinstance(value, (bool, str, bytes)):
        return None
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return None
    return as_float if math.isfinite(as_float) else None


def validate_strata(records: Iterable, require_unit_time: bool = False) -> List[str]:
    """Validate stratum records and return list of errors.

    Args:
        records: Objects with id, population_size, std_dev, unit_cost and
            unit_time attributes
        require_unit_time: Whether every stratum must carry a unit time

    Returns:
        List of validation error messages (empty if valid)
    """
    records = list(records)
    errors = []

    if not records:
        return ["At least one stratum is required"]

    seen = set()
    for record in records:
        if record.id in seen:
            errors.append(f"Duplicate stratum id: {record.id}")
        seen.add(record.id)

        if not _is_positive_integer(record.population_size):
            errors.append(
                f"Population size for stratum {record.id} must be a positive integer"
            )

        std_dev = _as_finite(record.std_dev)
        if std_dev is None or std_dev < 0:
            errors.append(
                f"Standard deviation for stratum {record.id} must be non-negative"
            )

        unit_cost = _as_finite(record.unit_cost)
        if unit_cost is None or unit_cost <= 0:
            errors.append(f"Unit cost for stratum {record.id} must be greater than 0")

        if record.unit_time is None:
            if require_unit_time:
                errors.append(f"Unit time for stratum {record.id} is required")
        else:
            unit_time = _as_finite(record.unit_time)
            if unit_time is None or unit_time <= 0:
                errors.append(
                    f"Unit time for stratum {record.id} must be greater than 0"
                )

    return errors


def build_strata_frame(
    records: Iterable, require_unit_time: bool = False
) -> pd.DataFrame:
    """Build the stratum table used by every allocation formula.

    Weights are derived here as Wh = Nh / N, so a table always carries
    weights consistent with its own strata.

    Args:
        records: Stratum records in display order
        require_unit_time: Whether every stratum must carry a unit time

    Returns:
        DataFrame with columns stratum, Nh, Sh, Ch, Th and Wh

    Raises:
        InvalidParameterError: If any record is invalid
    """
    records = list(records)
    errors = validate_strata(records, require_unit_time=require_unit_time)
    if errors:
        raise InvalidParameterError("; ".join(errors))

    strata_df = pd.DataFrame(
        {
            "stratum": [record.id for record in records],
            "Nh": [int(record.population_size) for record in records],
            "Sh": [float(record.std_dev) for record in records],
            "Ch": [float(record.unit_cost) for record in records],
            "Th": [
                np.nan if record.unit_time is None else float(record.unit_time)
                for record in records
            ],
        }
    )
    strata_df["Wh"] = strata_df["Nh"] / strata_df["Nh"].sum()

    logger.debug(
        f"Built stratum table with {len(strata_df)} strata, "
        f"N={int(strata_df['Nh'].sum())}"
    )
    return strata_df[list(STRATUM_COLUMNS)]


def get_total_population(strata_df: pd.DataFrame) -> int:
    """Total population N as the sum of stratum sizes."""
    return int(strata_df["Nh"].sum())


def _weighted_variance(strata_df: pd.DataFrame) -> float:
    # Σ(Wh x Sh²)
    return float((strata_df["Wh"] * strata_df["Sh"] ** 2).sum())


def finite_population_denominator(
    strata_df: pd.DataFrame, target_variance: float, total_population: int
) -> float:
    """Calculate the finite-population-corrected variance bound.

    Formula: D = V + (1/N) x Σ(W_h x S_h²)

    Args:
        strata_df: Stratum table
        target_variance: Target variance V
        total_population: Total population N

    Returns:
        The denominator shared by every sample size formula

    Raises:
        InvalidParameterError: If N is not positive
        DegenerateVarianceError: If the denominator is not a positive finite number
    """
    if total_population <= 0:
        raise InvalidParameterError("Total population must be greater than 0")

    denominator = target_variance + _weighted_variance(strata_df) / total_population

    if not math.isfinite(denominator) or denominator <= 0:
        raise DegenerateVarianceError(
            f"Variance bound must be positive, got {denominator} "
            f"(target variance {target_variance})"
        )
    return denominator


def _sample_size(numerator: float, denominator: float) -> float:
    n = numerator / denominator
    if not math.isfinite(n):
        raise DegenerateVarianceError(
            f"Sample size calculation resulted in invalid value: {n}"
        )
    return n


def calculate_proportional_sample_size(
    strata_df: pd.DataFrame, target_variance: float, total_population: int
) -> float:
    """Calculate total sample size under proportional allocation.

    Formula: n = Σ(W_h x S_h²) / (V + (1/N) x Σ(W_h x S_h²))

    Args:
        strata_df: Stratum table
        target_variance: Target variance V
        total_population: Total population N

    Returns:
        Continuous sample size n (not rounded)
    """
    numerator = _weighted_variance(strata_df)
    denominator = finite_population_denominator(
        strata_df, target_variance, total_population
    )
    return _sample_size(numerator, denominator)


def calculate_neyman_sample_size(
    strata_df: pd.DataFrame, target_variance: float, total_population: int
) -> float:
    """Calculate total sample size under Neyman allocation.

    Formula: n = (Σ(W_h x S_h))² / (V + (1/N) x Σ(W_h x S_h²))

    Args:
        strata_df: Stratum table
        target_variance: Target variance V
        total_population: Total population N

    Returns:
        Continuous sample size n (not rounded)
    """
    numerator = float((strata_df["Wh"] * strata_df["Sh"]).sum()) ** 2
    denominator = finite_population_denominator(
        strata_df, target_variance, total_population
    )
    return _sample_size(numerator, denominator)


def _unit_column(strata_df: pd.DataFrame, column: str) -> pd.Series:
    if column not in ("Ch", "Th"):
        raise InvalidParameterError(f"Unknown unit column: {column}")

    values = strata_df[column]
    if values.isna().any() or (values <= 0).any():
        raise InvalidParameterError(
            f"All strata need a positive {column} for optimum allocation"
        )
    return values


def calculate_optimum_sample_size(
    strata_df: pd.DataFrame,
    target_variance: float,
    total_population: int,
    column: str = "Ch",
) -> float:
    """Calculate total sample size under optimum allocation.

    Minimizes Σ(c_h x n_h) for a fixed variance V. With column="Th" the
    per-unit time replaces the per-unit cost.

    Formula: n = Σ(W_h x S_h x √c_h) x Σ(W_h x S_h / √c_h) / (V + (1/N) x Σ(W_h x S_h²))

    Args:
        strata_df: Stratum table
        target_variance: Target variance V
        total_population: Total population N
        column: Unit column, "Ch" (cost) or "Th" (time)

    Returns:
        Continuous sample size n (not rounded)
    """
    root_unit = np.sqrt(_unit_column(strata_df, column))
    wh_sh = strata_df["Wh"] * strata_df["Sh"]

    term1 = float((wh_sh * root_unit).sum())
    term2 = float((wh_sh / root_unit).sum())

    denominator = finite_population_denominator(
        strata_df, target_variance, total_population
    )
    return _sample_size(term1 * term2, denominator)


def _by_stratum(strata_df: pd.DataFrame, values) -> pd.Series:
    return pd.Series(
        np.asarray(values, dtype=float), index=strata_df["stratum"].tolist()
    )


def _normalize(strata_df: pd.DataFrame, products: pd.Series) -> pd.Series:
    total = float(products.sum())
    if total == 0:
        # Every stratum has zero spread, so n is zero as well
        return _by_stratum(strata_df, np.zeros(len(strata_df)))
    return _by_stratum(strata_df, products / total)


def proportional_allocation_weights(strata_df: pd.DataFrame) -> pd.Series:
    """Allocation weights W_h = N_h / N, indexed by stratum id."""
    return _by_stratum(strata_df, strata_df["Wh"])


def neyman_allocation_weights(strata_df: pd.DataFrame) -> pd.Series:
    """Allocation weights proportional to N_h x S_h.

    Formula: w_h = (N_h x S_h) / Σ(N_k x S_k)

    Args:
        strata_df: Stratum table

    Returns:
        Series of weights indexed by stratum id
    """
    return _normalize(strata_df, strata_df["Nh"] * strata_df["Sh"])


def optimum_allocation_weights(
    strata_df: pd.DataFrame, column: str = "Ch"
) -> pd.Series:
    """Allocation weights proportional to N_h x S_h / √c_h.

    Strata that are more variable and cheaper to sample receive more units.

    Args:
        strata_df: Stratum table
        column: Unit column, "Ch" (cost) or "Th" (time)

    Returns:
        Series of weights indexed by stratum id
    """
    root_unit = np.sqrt(_unit_column(strata_df, column))
    return _normalize(strata_df, strata_df["Nh"] * strata_df["Sh"] / root_unit)


def round_allocation(sample_size: float, weights: pd.Series) -> Dict:
    """Round a continuous allocation stratum by stratum.

    Each n x w_h is rounded half to even on its own, so the counts may not
    add up to ceil(n).

    Args:
        sample_size: Continuous total sample size n
        weights: Allocation weights indexed by stratum id

    Returns:
        Dictionary mapping stratum id to allocated sample count
    """
    counts = np.rint(sample_size * weights.to_numpy(dtype=float)).astype(int)
    return {
        stratum: int(count) for stratum, count in zip(weights.index.tolist(), counts)
    }

import math
from typing import Mapping, Optional

import numpy as np
import pandas as pd


def _allocated_counts(strata_df: pd.DataFrame, allocation: Mapping) -> pd.Series:
    counts = strata_df["stratum"].map(pd.Series(allocation, dtype=float))
    return counts.fillna(0.0).astype(float)


def calculate_achieved_variance(strata_df: pd.DataFrame, allocation: Mapping) -> float:
    """Calculate the variance of the stratified mean for a given allocation.

    Formula: V(ȳ_st) = Σ(W_h² x S_h² / n_h) - (1/N) x Σ(W_h x S_h²)

    A stratum with no samples and a non-zero spread leaves its mean unknown,
    which makes the variance infinite. Strata with S_h = 0 add nothing.

    Args:
        strata_df: Stratum table
        allocation: Samples per stratum id (integers or continuous values)

    Returns:
        Variance of the stratified mean estimator
    """
    n_h = _allocated_counts(strata_df, allocation)
    wh_sh_sq = strata_df["Wh"] ** 2 * strata_df["Sh"] ** 2

    if ((n_h <= 0) & (wh_sh_sq > 0)).any():
        return math.inf

    sampled = n_h > 0
    between = float((wh_sh_sq[sampled] / n_h[sampled]).sum())
    correction = float((strata_df["Wh"] * strata_df["Sh"] ** 2).sum()) / int(
        strata_df["Nh"].sum()
    )

    return max(between - correction, 0.0)


def calculate_achieved_margin_of_error(variance: float, confidence_z: float) -> float:
    """Calculate the margin of error delivered by an estimator variance.

    MOE = Z x √V
    """
    if math.isinf(variance):
        return math.inf
    return confidence_z * math.sqrt(variance)


def calculate_total_cost(
    strata_df: pd.DataFrame, allocation: Mapping, column: str = "Ch"
) -> Optional[float]:
    """Calculate the total cost (or time) of sampling an allocation.

    Formula: C = Σ(c_h x n_h)

    Args:
        strata_df: Stratum table
        allocation: Samples per stratum id
        column: Unit column, "Ch" for cost or "Th" for time

    Returns:
        Total cost, or None when a stratum has no unit value
    """
    unit = strata_df[column]
    if unit.isna().any():
        return None

    n_h = _allocated_counts(strata_df, allocation)
    return float(np.dot(unit.to_numpy(dtype=float), n_h.to_numpy(dtype=float)))

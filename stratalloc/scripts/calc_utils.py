import math

from scipy import stats

from stratalloc.errors import InvalidParameterError
from stratalloc.scripts.parameter import FIXED_Z_SCORES


def get_z_score(confidence_level: float) -> float:
    """Calculate Z-score for given confidence level.

    Args:
        confidence_level: Confidence level (0-1, exclusive)

    Returns:
        Z-score value

    Raises:
        InvalidParameterError: If the level is outside (0, 1)
    """
    if not (0 < confidence_level < 1):
        raise InvalidParameterError(
            f"Confidence level must be between 0 and 1, got {confidence_level}"
        )

    if confidence_level in FIXED_Z_SCORES:
        return FIXED_Z_SCORES[confidence_level]

    p_value = (1 + confidence_level) / 2.0
    return float(stats.norm.ppf(p_value))


def calculate_target_variance(margin_of_error: float, confidence_z: float) -> float:
    """Calculate the variance bound implied by a margin of error.

    Formula: V = (E / Z)²

    Args:
        margin_of_error: Desired absolute precision of the estimated mean (E)
        confidence_z: Z-score of the desired confidence level (Z)

    Returns:
        Target variance of the stratified mean estimator

    Raises:
        InvalidParameterError: If E or Z is not a positive finite number
    """
    errors = []
    if not math.isfinite(margin_of_error) or margin_of_error <= 0:
        errors.append(f"Margin of error must be greater than 0, got {margin_of_error}")
    if not math.isfinite(confidence_z) or confidence_z <= 0:
        errors.append(f"Confidence Z must be greater than 0, got {confidence_z}")
    if errors:
        raise InvalidParameterError("; ".join(errors))

    return (margin_of_error / confidence_z) ** 2

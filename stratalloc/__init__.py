"""Sample size and stratum allocation for stratified sampling."""

from .errors import (
    AllocationError,
    ConfigurationError,
    DegenerateVarianceError,
    InvalidParameterError,
)
from .sampling import (
    AllocationInputs,
    AllocationMethod,
    AllocationResult,
    AllocationService,
    StratumRecord,
    SurveyParameters,
    get_allocation_strategy,
)
from .scripts.logger import setup_logging

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "ConfigurationError",
    "DegenerateVarianceError",
    "InvalidParameterError",
    "AllocationInputs",
    "AllocationMethod",
    "AllocationResult",
    "AllocationService",
    "StratumRecord",
    "SurveyParameters",
    "get_allocation_strategy",
    "setup_logging",
]

"""Exceptions raised by the allocation engine.

All errors derive from ValueError so callers that already guard numeric
input with ``except ValueError`` keep working.
"""


class AllocationError(ValueError):
    """Base class for allocation engine errors."""


class InvalidParameterError(AllocationError):
    """Raised when survey parameters or stratum records are out of range."""


class DegenerateVarianceError(AllocationError):
    """Raised when the variance bound makes the sample size undefined."""


class ConfigurationError(AllocationError):
    """Raised when a survey configuration file is malformed."""

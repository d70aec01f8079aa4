"""Survey configuration loading.

A survey file is TOML with a ``[survey]`` table and one ``[[strata]]`` entry
per stratum::

    [survey]
    margin_of_error = 1.5
    confidence_z = 1.96        # or: confidence_level = 95.0

    [[strata]]
    id = 1
    population_size = 4000
    std_dev = 10.0
    unit_cost = 4.0
    unit_time = 1.0            # optional

An optional ``[logging]`` table holds a ``logging.config.dictConfig`` mapping.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import tomli

from stratalloc.errors import ConfigurationError
from stratalloc.sampling.types import AllocationInputs, StratumRecord
from stratalloc.scripts.logger import setup_logging
from stratalloc.scripts.parameter import (
    DEFAULT_CONFIDENCE_LEVEL,
    REFERENCE_CONFIDENCE_Z,
    REFERENCE_MARGIN_OF_ERROR,
    REFERENCE_STRATA,
)

logger = logging.getLogger("stratalloc.config")

_REQUIRED_STRATUM_KEYS = ("id", "population_size", "std_dev", "unit_cost")
_OPTIONAL_STRATUM_KEYS = ("unit_time",)
_NUMERIC_STRATUM_KEYS = ("population_size", "std_dev", "unit_cost", "unit_time")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _survey_number(survey: Dict[str, Any], key: str):
    value = survey[key]
    if not _is_number(value):
        raise ConfigurationError(
            f"[survey] {key} must be a number, got {type(value).__name__}"
        )
    return value


def _stratum_from_dict(index: int, entry: Dict[str, Any]) -> StratumRecord:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Stratum entry {index} must be a table")

    missing = [key for key in _REQUIRED_STRATUM_KEYS if key not in entry]
    if missing:
        raise ConfigurationError(
            f"Stratum entry {index} is missing: {', '.join(missing)}"
        )

    unknown = set(entry) - set(_REQUIRED_STRATUM_KEYS) - set(_OPTIONAL_STRATUM_KEYS)
    if unknown:
        raise ConfigurationError(
            f"Stratum entry {index} has unknown keys: {', '.join(sorted(unknown))}"
        )

    for key in _NUMERIC_STRATUM_KEYS:
        if key in entry and not _is_number(entry[key]):
            raise ConfigurationError(
                f"Stratum entry {index} {key} must be a number, "
                f"got {type(entry[key]).__name__}"
            )

    return StratumRecord(
        id=entry["id"],
        population_size=entry["population_size"],
        std_dev=entry["std_dev"],
        unit_cost=entry["unit_cost"],
        unit_time=entry.get("unit_time"),
    )


def survey_from_dict(cfg: Dict[str, Any]) -> AllocationInputs:
    """Build allocation inputs from a parsed survey configuration.

    Args:
        cfg: Parsed configuration with "survey" and "strata" keys

    Returns:
        AllocationInputs for the configured survey

    Raises:
        ConfigurationError: If required keys are missing or malformed
    """
    survey = cfg.get("survey")
    if not isinstance(survey, dict):
        raise ConfigurationError("Survey configuration needs a [survey] table")

    if "margin_of_error" not in survey:
        raise ConfigurationError("[survey] must define margin_of_error")

    if "confidence_z" in survey and "confidence_level" in survey:
        raise ConfigurationError(
            "[survey] must define only one of confidence_z and confidence_level"
        )

    strata_cfg = cfg.get("strata")
    if not isinstance(strata_cfg, list) or not strata_cfg:
        raise ConfigurationError("Survey configuration needs at least one [[strata]]")

    strata = tuple(
        _stratum_from_dict(index, entry) for index, entry in enumerate(strata_cfg)
    )

    return AllocationInputs(
        strata=strata,
        margin_of_error=_survey_number(survey, "margin_of_error"),
        confidence_z=(
            _survey_number(survey, "confidence_z") if "confidence_z" in survey else None
        ),
        confidence_level=(
            _survey_number(survey, "confidence_level")
            if "confidence_level" in survey
            else DEFAULT_CONFIDENCE_LEVEL
        ),
    )


def load_survey_config(
    path: Union[str, Path], log_config: Optional[Union[str, Path]] = None
) -> AllocationInputs:
    """Load allocation inputs from a survey TOML file.

    Logging is configured before the survey is read: from ``log_config`` when
    given, otherwise from an optional ``[logging]`` dictConfig table in the
    survey file itself.

    Args:
        path: Path to the survey file
        log_config: Optional logging TOML file

    Returns:
        AllocationInputs for the configured survey

    Raises:
        FileNotFoundError: If the survey or logging file does not exist
        ConfigurationError: If the file is not valid survey TOML
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Survey config not found at {path}")

    with path.open("rb") as f:
        try:
            cfg = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

    logging_cfg = cfg.get("logging")
    if logging_cfg is not None and not isinstance(logging_cfg, dict):
        raise ConfigurationError("[logging] must be a table")

    if log_config is not None:
        setup_logging(path=log_config)
    elif logging_cfg is not None:
        setup_logging(config=logging_cfg)

    inputs = survey_from_dict(cfg)
    logger.info(f"Loaded survey with {len(inputs.strata)} strata from {path}")
    return inputs


def reference_survey() -> AllocationInputs:
    """The four-stratum reference survey (E = 1.5, Z = 1.96)."""
    strata = tuple(
        StratumRecord(
            id=stratum_id,
            population_size=nh,
            std_dev=sh,
            unit_cost=ch,
            unit_time=th,
        )
        for stratum_id, nh, sh, ch, th in REFERENCE_STRATA
    )
    return AllocationInputs(
        strata=strata,
        margin_of_error=REFERENCE_MARGIN_OF_ERROR,
        confidence_z=REFERENCE_CONFIDENCE_Z,
    )

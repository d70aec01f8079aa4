"""Logging configuration for stratalloc.

The configuration is a ``logging.config.dictConfig`` mapping written as TOML.
It is looked up in this order:

1. a mapping passed as ``config`` (e.g. the ``[logging]`` table of a survey file)
2. a file passed as ``path``
3. the file named by the STRATALLOC_LOG_CFG environment variable
4. ``logging_config.toml`` in the repo root

When neither 3 nor 4 exists the library stays silent behind a NullHandler.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import tomli

LOG_CFG_ENV = "STRATALLOC_LOG_CFG"
LOGGER_NAME = "stratalloc"
DEFAULT_LOG_CFG = Path(__file__).parent.parent.parent / "logging_config.toml"


def _silence():
    stratalloc_logger = logging.getLogger(LOGGER_NAME)
    for handler in stratalloc_logger.handlers[:]:
        stratalloc_logger.removeHandler(handler)
    stratalloc_logger.addHandler(logging.NullHandler())


def _read_config(cfg_path: Path) -> Dict[str, Any]:
    if not cfg_path.is_file():
        raise FileNotFoundError(f"Logging config not found at {cfg_path}")

    with cfg_path.open("rb") as f:
        return tomli.load(f)


def setup_logging(
    path: Optional[Union[str, Path]] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Optional[Path]:
    """Configure the stratalloc loggers.

    Args:
        path: Explicit logging TOML file; it must exist
        config: dictConfig mapping, used instead of any file

    Returns:
        The file the configuration came from, or None when a mapping was
        applied or no configuration was found

    Raises:
        FileNotFoundError: If an explicit or configured path is not a file
    """
    if config is not None:
        cfg = dict(config)
        cfg.setdefault("version", 1)
        cfg.setdefault("disable_existing_loggers", False)
        logging.config.dictConfig(cfg)
        return None

    if path is not None:
        cfg_path = Path(path)
    else:
        cfg_path = Path(os.getenv(LOG_CFG_ENV) or DEFAULT_LOG_CFG)
        if not cfg_path.exists():
            _silence()
            return None

    logging.config.dictConfig(_read_config(cfg_path))
    logging.getLogger(f"{LOGGER_NAME}.config").debug(
        f"Logging configured from {cfg_path}"
    )
    return cfg_path

import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stratalloc.config import reference_survey  # noqa: E402
from stratalloc.scripts.logger import LOGGER_NAME  # noqa: E402
from stratalloc.scripts.stratified import build_strata_frame  # noqa: E402


@pytest.fixture
def reference_inputs():
    """Four strata: Nh=[4000,3000,2000,1000], Sh=[10,20,30,40], Ch=[4,6,8,10], E=1.5, Z=1.96."""
    return reference_survey()


@pytest.fixture
def reference_frame(reference_inputs):
    return build_strata_frame(reference_inputs.strata)


@pytest.fixture
def target_variance():
    # (1.5 / 1.96)²
    return 2.25 / 3.8416


@pytest.fixture
def stratalloc_logger():
    """The package logger, with handlers and level restored afterwards."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate

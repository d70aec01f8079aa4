"""Type definitions for allocation strategies.

Contains data classes that define the inputs and outputs for all allocation
methods. This provides a clear contract between callers and the formulas.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

import pandas as pd

from stratalloc.errors import InvalidParameterError
from stratalloc.scripts.calc_utils import calculate_target_variance, get_z_score
from stratalloc.scripts.parameter import DEFAULT_CONFIDENCE_LEVEL


class AllocationMethod(Enum):
    """Allocation methods for stratified sampling."""

    PROPORTIONAL = "proportional"
    NEYMAN = "neyman"
    COST_OPTIMUM = "cost_optimum"
    TIME_OPTIMUM = "time_optimum"

    @classmethod
    def from_string(cls, value: str) -> "AllocationMethod":
        """Convert string to AllocationMethod enum."""
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        for method in cls:
            if method.value == normalized:
                return method
        raise ValueError(f"Unknown allocation method: {value}")


@dataclass(frozen=True)
class StratumRecord:
    """A single stratum of the population."""

    id: Hashable
    population_size: int  # Nh
    std_dev: float  # Sh
    unit_cost: float  # Ch
    unit_time: Optional[float] = None  # Th, only used by time-optimum allocation


@dataclass(frozen=True)
class SurveyParameters:
    """Global survey parameters for a single run."""

    total_population: int  # N
    margin_of_error: float  # E
    confidence_z: float  # Z

    @property
    def target_variance(self) -> float:
        """Target variance V = (E / Z)²."""
        return calculate_target_variance(self.margin_of_error, self.confidence_z)

    @classmethod
    def from_strata(
        cls,
        strata: Sequence[StratumRecord],
        margin_of_error: float,
        confidence_z: float,
    ) -> "SurveyParameters":
        """Derive N from the strata and bundle it with E and Z."""
        total_population = sum(int(s.population_size) for s in strata)
        return cls(
            total_population=total_population,
            margin_of_error=margin_of_error,
            confidence_z=confidence_z,
        )

    @classmethod
    def from_confidence_level(
        cls,
        strata: Sequence[StratumRecord],
        margin_of_error: float,
        confidence_level: float,
    ) -> "SurveyParameters":
        """Same as from_strata, with Z looked up for a confidence level (0-1)."""
        return cls.from_strata(strata, margin_of_error, get_z_score(confidence_level))


@dataclass(frozen=True)
class AllocationInputs:
    """Input parameters for allocation calculations.

    Either ``confidence_z`` is given directly, or it is derived from
    ``confidence_level`` (as percentage, e.g. 95.0).
    """

    strata: Tuple[StratumRecord, ...]
    margin_of_error: float  # E, absolute
    confidence_z: Optional[float] = None
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL

    def __post_init__(self):
        object.__setattr__(self, "strata", tuple(self.strata))

    @property
    def z_score(self) -> float:
        """Z-score used for this survey."""
        if self.confidence_z is not None:
            return self.confidence_z
        if not (0 < self.confidence_level < 100):
            raise InvalidParameterError(
                f"Confidence level must be between 0 and 100, got {self.confidence_level}"
            )
        return get_z_score(self.confidence_level / 100.0)

    @property
    def parameters(self) -> SurveyParameters:
        """Survey parameters derived from these inputs."""
        return SurveyParameters.from_strata(
            self.strata, self.margin_of_error, self.z_score
        )

    def replace_strata(self, strata: Sequence[StratumRecord]) -> "AllocationInputs":
        """Return a copy of these inputs with a different stratum set."""
        return AllocationInputs(
            strata=tuple(strata),
            margin_of_error=self.margin_of_error,
            confidence_z=self.confidence_z,
            confidence_level=self.confidence_level,
        )


@dataclass(frozen=True)
class StratumAllocation:
    """Sample allocation for a single stratum."""

    stratum_id: Hashable
    samples: int
    weight: float = 0.0  # Wh, share of the population
    allocation_weight: float = 0.0  # share of the sample given to this stratum


@dataclass
class AllocationResult:
    """Results from one allocation method.

    Per-stratum counts are rounded independently and are not adjusted to add
    up to ``total_sample_size``.
    """

    method: AllocationMethod
    total_sample_size: int
    continuous_sample_size: float
    target_variance: float
    allocations: List[StratumAllocation] = field(default_factory=list)

    # Diagnostics of the rounded allocation
    achieved_variance: Optional[float] = None
    achieved_margin_of_error: Optional[float] = None
    total_cost: Optional[float] = None
    total_time: Optional[float] = None

    @property
    def allocation_dict(self) -> Dict[Hashable, int]:
        """Samples per stratum id, in stratum order."""
        return {a.stratum_id: a.samples for a in self.allocations}

    @property
    def allocated_total(self) -> int:
        """Sum of the rounded per-stratum counts."""
        return sum(a.samples for a in self.allocations)

    def to_dict(self) -> Dict[str, Any]:
        """Convert results to a plain dictionary."""
        return {
            "method": self.method.value,
            "total_sample_size": self.total_sample_size,
            "continuous_sample_size": self.continuous_sample_size,
            "target_variance": self.target_variance,
            "allocated_total": self.allocated_total,
            "achieved_variance": self.achieved_variance,
            "achieved_margin_of_error": self.achieved_margin_of_error,
            "total_cost": self.total_cost,
            "total_time": self.total_time,
            "allocations": [
                {
                    "stratum": a.stratum_id,
                    "samples": a.samples,
                    "weight": a.weight,
                    "allocation_weight": a.allocation_weight,
                }
                for a in self.allocations
            ],
        }

    def to_frame(self) -> pd.DataFrame:
        """Per-stratum allocation as a DataFrame."""
        return pd.DataFrame(
            {
                "stratum": [a.stratum_id for a in self.allocations],
                "weight": [a.weight for a in self.allocations],
                "allocation_weight": [a.allocation_weight for a in self.allocations],
                "samples": [a.samples for a in self.allocations],
            }
        )

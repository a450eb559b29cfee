"""Configuration for the evidence filter.

Thresholds and policy switches are held in an attrs class with validated
defaults. Named presets cover the two common ways of running the filter.

Example:
    >>> from evidencefilter.config import FilterConfig
    >>> config = FilterConfig(min_coverage=90, min_percent=97)
    >>> config.coverage_threshold
    90.0
    >>> FilterConfig.best_in_genome_profile().best_in_genome
    True
"""

import math
from typing import Any

import attrs

# =============================================================================
# Default Configuration Values
# =============================================================================

# Unset thresholds mean "no lower bound"
DEFAULT_MIN_COVERAGE = 0.0
DEFAULT_MIN_PERCENT = 0.0

# Fixed floor applied before grouping, independent of the thresholds
PREFILTER_MIN_COVERAGE = 40.0
PREFILTER_MIN_PERCENT = 40.0

# Tolerance policy keeps anything within 2% of the group's best coverage
NEAR_BEST_FRACTION = 0.98

# Relaxed alternative to the primary thresholds
RELAXED_COVERAGE_FACTOR = 1.05
RELAXED_PERCENT_FACTOR = 0.97

# Thresholds used by the presets
PRESET_MIN_COVERAGE = 80.0
PRESET_MIN_PERCENT = 90.0


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _non_negative(instance: Any, attribute: attrs.Attribute, value: float | None) -> None:
    if value is not None and (not math.isfinite(value) or value < 0):
        raise ValueError(f"{attribute.name} must be a finite non-negative number, got {value}")


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define
class FilterConfig:
    """Configuration for the evidence filter.

    Attributes:
        min_score: Minimum coverage. Used when min_coverage is not set.
        min_coverage: Minimum coverage required to accept a candidate.
        min_percent: Minimum percent identity required to accept a candidate.
        best_in_genome: Keep only candidates tying the group's best coverage.
            When False, keep anything within 2% of the best.
        reject_processed_pseudos: Reject unspliced lower-ranked candidates
            when the group's best candidate is spliced.
    """

    min_score: float | None = attrs.field(
        default=None, converter=_optional_float, validator=_non_negative
    )
    min_coverage: float | None = attrs.field(
        default=None, converter=_optional_float, validator=_non_negative
    )
    min_percent: float = attrs.field(
        default=DEFAULT_MIN_PERCENT, converter=float, validator=_non_negative
    )
    best_in_genome: bool = attrs.field(default=False, converter=bool)
    reject_processed_pseudos: bool = attrs.field(default=False, converter=bool)

    @property
    def coverage_threshold(self) -> float:
        """Effective minimum coverage used in the acceptance tests."""
        if self.min_coverage is not None:
            return self.min_coverage
        if self.min_score is not None:
            return self.min_score
        return DEFAULT_MIN_COVERAGE

    @property
    def policy(self) -> str:
        """Name of the acceptance policy."""
        return "best_in_genome" if self.best_in_genome else "near_best"

    # -------------------------------------------------------------------------
    # Preset Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def best_in_genome_profile(cls) -> "FilterConfig":
        """Keep only the top-scoring alignments of each evidence sequence.

        Coverage >= 80, identity >= 90, processed pseudogenes rejected.
        """
        return cls(
            min_coverage=PRESET_MIN_COVERAGE,
            min_percent=PRESET_MIN_PERCENT,
            best_in_genome=True,
            reject_processed_pseudos=True,
        )

    @classmethod
    def near_best_profile(cls) -> "FilterConfig":
        """Keep alignments within 2% of the best of each evidence sequence.

        Coverage >= 80, identity >= 90, processed pseudogenes rejected.
        """
        return cls(
            min_coverage=PRESET_MIN_COVERAGE,
            min_percent=PRESET_MIN_PERCENT,
            best_in_genome=False,
            reject_processed_pseudos=True,
        )

    @classmethod
    def preset(cls, name: str) -> "FilterConfig":
        """Get a preset configuration by name.

        Args:
            name: "best_in_genome" or "near_best".

        Raises:
            ValueError: If the preset name is unknown.
        """
        if name == "best_in_genome":
            return cls.best_in_genome_profile()
        if name == "near_best":
            return cls.near_best_profile()
        raise ValueError(f"Unknown preset: {name}")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return attrs.asdict(self)


PRESETS = ("best_in_genome", "near_best")

"""Tests for evidencefilter.config."""

import pytest

from evidencefilter.config import (
    DEFAULT_MIN_COVERAGE,
    PRESET_MIN_COVERAGE,
    PRESET_MIN_PERCENT,
    PRESETS,
    FilterConfig,
)


class TestFilterConfig:
    """Tests for FilterConfig defaults and validation."""

    def test_defaults(self) -> None:
        """Unset options mean no thresholds and the near-best policy."""
        config = FilterConfig()

        assert config.min_score is None
        assert config.min_coverage is None
        assert config.min_percent == 0.0
        assert config.coverage_threshold == DEFAULT_MIN_COVERAGE
        assert config.best_in_genome is False
        assert config.reject_processed_pseudos is False
        assert config.policy == "near_best"

    def test_numeric_conversion(self) -> None:
        """Integer thresholds are stored as floats."""
        config = FilterConfig(min_coverage=90, min_percent=97)

        assert isinstance(config.min_coverage, float)
        assert config.coverage_threshold == 90.0
        assert config.min_percent == 97.0

    def test_truthy_flags(self) -> None:
        """Truthy values enable the switches."""
        config = FilterConfig(best_in_genome=1, reject_processed_pseudos=0.01)

        assert config.best_in_genome is True
        assert config.reject_processed_pseudos is True
        assert config.policy == "best_in_genome"

    @pytest.mark.parametrize("option", ["min_score", "min_coverage", "min_percent"])
    def test_negative_threshold_rejected(self, option) -> None:
        """Negative thresholds raise ValueError."""
        with pytest.raises(ValueError, match=option):
            FilterConfig(**{option: -1})

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    @pytest.mark.parametrize("option", ["min_score", "min_coverage", "min_percent"])
    def test_non_finite_threshold_rejected(self, option, value) -> None:
        """NaN and infinite thresholds raise ValueError."""
        with pytest.raises(ValueError, match="finite"):
            FilterConfig(**{option: value})

    def test_non_numeric_threshold_rejected(self) -> None:
        """Non-numeric thresholds raise ValueError."""
        with pytest.raises(ValueError):
            FilterConfig(min_coverage="high")

    def test_to_dict(self) -> None:
        """to_dict exposes every option."""
        assert set(FilterConfig().to_dict()) == {
            "min_score",
            "min_coverage",
            "min_percent",
            "best_in_genome",
            "reject_processed_pseudos",
        }


class TestPresets:
    """Tests for preset profiles."""

    def test_best_in_genome_profile(self) -> None:
        """Strict policy with pseudogene rejection."""
        config = FilterConfig.best_in_genome_profile()

        assert config.best_in_genome is True
        assert config.reject_processed_pseudos is True
        assert config.coverage_threshold == PRESET_MIN_COVERAGE
        assert config.min_percent == PRESET_MIN_PERCENT

    def test_near_best_profile(self) -> None:
        """Tolerance policy with the same thresholds."""
        config = FilterConfig.near_best_profile()

        assert config.best_in_genome is False
        assert config.reject_processed_pseudos is True
        assert config.coverage_threshold == PRESET_MIN_COVERAGE

    @pytest.mark.parametrize("name", PRESETS)
    def test_preset_by_name(self, name) -> None:
        """Every listed preset resolves by name."""
        assert FilterConfig.preset(name).policy == name

    def test_unknown_preset(self) -> None:
        """Unknown preset names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown preset"):
            FilterConfig.preset("strictest")

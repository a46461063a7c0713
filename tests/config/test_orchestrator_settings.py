"""Tests for OrchestratorSettings and CollectorSettings."""

import pytest

from veritas.collectors import CollectorSettings
from veritas.models import Category
from veritas.orchestrator import OrchestratorSettings


class TestOrchestratorSettings:
    """Tests for orchestrator settings."""

    def test_default_values(self) -> None:
        settings = OrchestratorSettings()

        assert settings.global_timeout_seconds == 15.0
        assert settings.callback_timeout_seconds == 1.0
        assert settings.minimum_confidence == 70.0
        assert settings.proceed_threshold == 60.0
        assert settings.stage_weights == {c: 0.25 for c in Category}

    def test_custom_values(self) -> None:
        settings = OrchestratorSettings(global_timeout_seconds=5, progress_drain_seconds=0)

        assert settings.global_timeout_seconds == 5
        assert settings.progress_drain_seconds == 0

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            OrchestratorSettings(global_timeout_seconds=0)

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValueError):
            OrchestratorSettings(stage_weights={Category.MARKET: -1.0, Category.SOCIAL: 2.0})

    def test_all_zero_weights_rejected(self) -> None:
        with pytest.raises(ValueError):
            OrchestratorSettings(stage_weights={c: 0.0 for c in Category})


class TestCollectorSettings:
    def test_default_values(self) -> None:
        settings = CollectorSettings()

        assert settings.provider_timeout_seconds == 8.0
        assert settings.cache_enabled is True
        assert settings.cache_ttl_seconds == 30.0

    def test_timeout_bounds(self) -> None:
        with pytest.raises(ValueError):
            CollectorSettings(provider_timeout_seconds=0)

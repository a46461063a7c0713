"""Tests for MarketValidator."""

import pytest

from veritas.exceptions import MalformedResultError
from veritas.models import (
    Category,
    DataSourceResult,
    MarketPayload,
    Severity,
    SocialPayload,
    StageContext,
)
from veritas.validators import MarketValidator, VeritasSettings


def quote(provider: str, price: float, volume: float | None = 1e9, change: float | None = 1.0) -> DataSourceResult:
    return DataSourceResult.ok(
        Category.MARKET,
        provider,
        MarketPayload(price=price, volume_24h=volume, change_24h_percent=change),
    )


def make_context(trust_weights=None) -> StageContext:
    return StageContext.build("BTC", {}, {}, trust_weights)


@pytest.fixture
def validator():
    return MarketValidator()


class TestPriceConsistency:
    def test_consistent_prices_score_100(self, validator):
        results = [quote("a", 50000), quote("b", 50100), quote("c", 50200)]

        validation = validator.validate(results, make_context())

        assert validation.score == 100.0
        assert [f for f in validation.findings if f.severity != Severity.INFO] == []
        assert "price_consistency" in validation.passed_checks
        assert validation.consensus["price"] == pytest.approx(50100.0)

    def test_large_divergence_is_fatal(self, validator):
        results = [quote("a", 50000), quote("b", 56000)]

        validation = validator.validate(results, make_context())

        assert validation.has_fatal
        assert validation.score == 0.0
        fatal = validation.fatal_finding
        assert fatal.check == "price_consistency"
        assert fatal.involved_providers == ("a", "b")
        assert fatal.metric == pytest.approx(12.0)

    def test_two_percent_gap_warns_and_flags_arbitrage(self, validator):
        results = [quote("a", 50000), quote("b", 51000)]

        validation = validator.validate(results, make_context())

        warnings = [f for f in validation.findings if f.severity == Severity.WARNING]
        infos = [f for f in validation.findings if f.severity == Severity.INFO]
        assert len(warnings) == 1
        assert warnings[0].check == "price_consistency"
        assert warnings[0].metric == pytest.approx(2.0)
        assert len(infos) == 1
        assert infos[0].check == "arbitrage_detection"
        assert infos[0].involved_providers == ("a", "b")
        assert "buy on a" in infos[0].description
        assert validation.score == 85.0

    def test_findings_in_detection_order(self, validator):
        results = [quote("a", 50000, volume=1e9), quote("b", 51000, volume=2e9)]

        validation = validator.validate(results, make_context())

        assert [f.check for f in validation.findings] == [
            "price_consistency",
            "volume_consistency",
            "arbitrage_detection",
        ]

    def test_warning_names_only_divergent_pairs(self, validator):
        results = [quote("a", 50000), quote("b", 50050), quote("c", 51000)]

        validation = validator.validate(results, make_context())

        warning = next(f for f in validation.findings if f.severity == Severity.WARNING)
        assert set(warning.involved_providers) == {"a", "b", "c"}
        assert "a vs c" in warning.description
        assert "a vs b" not in warning.description

    def test_small_gap_has_no_arbitrage(self, validator):
        results = [quote("a", 50000), quote("b", 50800)]

        validation = validator.validate(results, make_context())

        assert not any(f.check == "arbitrage_detection" for f in validation.findings)
        assert validation.score == 85.0


class TestVolumeConsistency:
    def test_volume_divergence_warns(self, validator):
        results = [quote("a", 50000, volume=1e9), quote("b", 50000, volume=1.2e9)]

        validation = validator.validate(results, make_context())

        assert [f.check for f in validation.findings] == ["volume_consistency"]
        assert validation.findings[0].severity == Severity.WARNING
        assert validation.score == 85.0

    def test_single_volume_is_not_compared(self, validator):
        results = [quote("a", 50000, volume=1e9), quote("b", 50000, volume=None)]

        validation = validator.validate(results, make_context())

        assert "volume_consistency" not in validation.passed_checks + validation.failed_checks
        assert validation.consensus["volume_24h"] == 1e9


class TestCorroboration:
    def test_single_success_is_capped(self, validator):
        results = [
            quote("a", 50000),
            DataSourceResult.timed_out(Category.MARKET, "b"),
            DataSourceResult.timed_out(Category.MARKET, "c"),
        ]

        validation = validator.validate(results, make_context())

        assert validation.score == 50.0
        assert not validation.has_fatal
        finding = validation.findings[0]
        assert finding.check == "corroboration"
        assert finding.severity == Severity.WARNING
        assert "Insufficient corroboration" in finding.description

    def test_no_data(self, validator):
        results = [
            DataSourceResult.failed(Category.MARKET, "a", "down"),
            DataSourceResult.timed_out(Category.MARKET, "b"),
        ]

        validation = validator.validate(results, make_context())

        assert validation.score == 0.0
        assert len(validation.findings) == 1
        assert validation.findings[0].severity == Severity.WARNING
        assert validation.findings[0].check == "market_data_availability"

    def test_min_sources_configurable(self):
        validator = MarketValidator(VeritasSettings(min_market_sources=1))

        validation = validator.validate([quote("a", 50000)], make_context())

        assert validation.score == 100.0


class TestConsensus:
    def test_trust_weighted_price(self, validator):
        results = [quote("a", 100.0), quote("b", 103.0)]

        validation = validator.validate(results, make_context({"a": 1.0, "b": 0.5}))

        assert validation.consensus["price"] == pytest.approx(101.0)
        assert validation.consensus["max_price_deviation"] == pytest.approx(0.03)


class TestInputChecks:
    def test_rejects_other_category(self, validator):
        social = DataSourceResult.ok(Category.SOCIAL, "s", SocialPayload(sentiment_score=50))

        with pytest.raises(MalformedResultError):
            validator.validate([social], make_context())

    def test_deterministic(self, validator):
        results = [quote("a", 50000), quote("b", 51000), quote("c", 50500)]

        first = validator.validate(results, make_context())
        second = validator.validate(results, make_context())

        assert first.findings == second.findings
        assert first.score == second.score


class TestVeritasSettings:
    def test_defaults(self):
        settings = VeritasSettings()

        assert settings.price_warning_threshold == 0.015
        assert settings.price_fatal_threshold == 0.10
        assert settings.volume_warning_threshold == 0.10
        assert settings.arbitrage_threshold == 0.02
        assert settings.sentiment_mismatch_threshold == 30
        assert settings.warning_penalty == 15
        assert settings.insufficient_corroboration_cap == 50

    def test_warning_must_be_below_fatal(self):
        with pytest.raises(ValueError):
            VeritasSettings(price_warning_threshold=0.2, price_fatal_threshold=0.1)

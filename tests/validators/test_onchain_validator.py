"""Tests for OnChainValidator."""

import pytest

from veritas.models import (
    Category,
    CategoryValidation,
    DataSourceResult,
    OnChainPayload,
    Severity,
    StageContext,
)
from veritas.validators import OnChainValidator
from veritas.validators.onchain_validator import consistency_from_flow_ratio


def flows(provider: str, inflow: float, outflow: float) -> DataSourceResult:
    return DataSourceResult.ok(
        Category.ONCHAIN,
        provider,
        OnChainPayload(exchange_inflow_usd=inflow, exchange_outflow_usd=outflow),
    )


def market_context(volume: float | None = 30e9, change: float | None = 1.0) -> StageContext:
    consensus = {"price": 50000.0}
    if volume is not None:
        consensus["volume_24h"] = volume
    if change is not None:
        consensus["change_24h_percent"] = change
    market = CategoryValidation(category=Category.MARKET, score=100.0, consensus=consensus)
    return StageContext.build("BTC", {}, {Category.MARKET: market})


@pytest.fixture
def validator():
    return OnChainValidator()


class TestConsistencyFromFlowRatio:
    @pytest.mark.parametrize(
        "ratio,expected",
        [
            (0.2, 100.0),
            (0.1, 100.0),
            (0.3, 100.0),
            (0.07, 80.0),
            (0.4, 80.0),
            (0.02, 20.0),
            (0.0, 0.0),
            (0.9, 80.0),
            (3.0, 0.0),
        ],
    )
    def test_bands(self, ratio, expected):
        assert consistency_from_flow_ratio(ratio) == pytest.approx(expected)


class TestOnChainValidator:
    def test_healthy_flows(self, validator):
        validation = validator.validate([flows("chain", 2.7e9, 3.3e9)], market_context())

        assert validation.score == 100.0
        assert validation.count(Severity.WARNING) == 0
        assert validation.consensus["net_flow_usd"] == pytest.approx(0.6e9)
        assert validation.consensus["flow_to_volume_ratio"] == pytest.approx(0.2)
        info = validation.findings[-1]
        assert info.check == "flow_direction"
        assert "accumulation" in info.description

    def test_zero_flows_with_huge_volume_is_fatal(self, validator):
        validation = validator.validate([flows("chain", 0, 0)], market_context(volume=25e9))

        assert validation.has_fatal
        assert validation.score == 0.0
        assert validation.fatal_finding.check == "market_to_chain_consistency"

    def test_zero_flows_with_modest_volume_is_not_fatal(self, validator):
        validation = validator.validate([flows("chain", 0, 0)], market_context(volume=5e9))

        assert not validation.has_fatal
        assert validation.score == 0.0

    def test_low_consistency_warns_without_double_penalty(self, validator):
        validation = validator.validate([flows("chain", 0.15e9, 0.15e9)], market_context())

        warning = next(f for f in validation.findings if f.severity == Severity.WARNING)
        assert warning.check == "market_to_chain_consistency"
        assert validation.score == pytest.approx(10.0)

    def test_missing_market_volume_gives_partial_score(self, validator):
        validation = validator.validate(
            [flows("chain", 2.7e9, 3.3e9)], StageContext.build("BTC", {}, {})
        )

        assert validation.score == 50.0
        assert validation.findings[0].severity == Severity.WARNING
        assert validation.findings[0].check == "market_to_chain_consistency"
        assert "market_to_chain_consistency" in validation.failed_checks

    def test_accumulation_while_price_falls_warns(self, validator):
        validation = validator.validate([flows("chain", 2e9, 4e9)], market_context(change=-7.0))

        warning = next(f for f in validation.findings if f.check == "flow_price_alignment")
        assert warning.severity == Severity.WARNING
        assert "accumulation" in warning.description
        assert validation.score == 85.0

    def test_distribution_while_price_rises_warns(self, validator):
        validation = validator.validate([flows("chain", 4e9, 2e9)], market_context(change=6.0))

        warning = next(f for f in validation.findings if f.check == "flow_price_alignment")
        assert "distribution" in warning.description
        assert validation.score == 85.0

    def test_flows_are_averaged_across_providers(self, validator):
        results = [flows("a", 1e9, 3e9), flows("b", 3e9, 3e9)]

        validation = validator.validate(results, market_context())

        assert validation.consensus["exchange_inflow_usd"] == pytest.approx(2e9)
        assert validation.consensus["exchange_outflow_usd"] == pytest.approx(3e9)

    def test_no_data(self, validator):
        results = [DataSourceResult.timed_out(Category.ONCHAIN, "chain")]

        validation = validator.validate(results, market_context())

        assert validation.score == 0.0
        assert validation.findings[0].check == "onchain_data_availability"

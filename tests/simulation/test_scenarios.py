"""End-to-end runs of the built-in simulation scenarios."""

import pytest

from veritas.models import Category, Severity, SourceStatus
from veritas.orchestrator import PipelineState
from veritas.simulation import SimulationSettings, SimulatorEngine
from veritas.simulation.scenario_runner import ScenarioRunner
from veritas.simulation.scenarios import (
    ArbitrageWindowScenario,
    ConsistentPricesScenario,
    FatalPriceDivergenceScenario,
    InsufficientCorroborationScenario,
    OnChainHangTimeoutScenario,
    default_scenarios,
)


@pytest.fixture
def engine():
    return SimulatorEngine(SimulationSettings(hang_seconds=2.0))


async def run_scenario(scenario, engine):
    result = await scenario.run(engine)
    return scenario.check(result, engine)


class TestScenarios:
    @pytest.mark.asyncio
    async def test_consistent_prices(self, engine):
        assert await run_scenario(ConsistentPricesScenario(), engine) == []

        result = engine.last_result
        assert result.success
        assert result.validations[Category.MARKET].score == 100.0

    @pytest.mark.asyncio
    async def test_fatal_price_divergence(self, engine):
        assert await run_scenario(FatalPriceDivergenceScenario(), engine) == []

        assert engine.progress_updates[-1].completed_stages == (Category.MARKET,)

    @pytest.mark.asyncio
    async def test_arbitrage_window(self, engine):
        assert await run_scenario(ArbitrageWindowScenario(), engine) == []

        market = engine.last_result.validations[Category.MARKET]
        assert market.count(Severity.WARNING) == 1
        assert market.count(Severity.INFO) == 1

    @pytest.mark.asyncio
    async def test_insufficient_corroboration(self, engine):
        assert await run_scenario(InsufficientCorroborationScenario(hang_seconds=2.0), engine) == []

        statuses = [r.status for r in engine.last_result.results[Category.MARKET]]
        assert statuses == [SourceStatus.OK, SourceStatus.TIMED_OUT, SourceStatus.TIMED_OUT]

    @pytest.mark.asyncio
    async def test_onchain_hang_timeout(self, engine):
        assert await run_scenario(OnChainHangTimeoutScenario(hang_seconds=2.0), engine) == []

        result = engine.last_result
        assert result.timed_out
        assert result.progress == 50

    @pytest.mark.asyncio
    async def test_default_scenarios_all_pass(self, engine):
        scenarios = default_scenarios(hang_seconds=2.0)
        runner = ScenarioRunner(engine, scenarios, engine.settings)

        report = await runner.run_all()

        assert report.total == 5
        assert report.all_passed, report.render()
        assert [o.final_state for o in report.outcomes] == [
            PipelineState.DONE,
            PipelineState.HALTED,
            PipelineState.DONE,
            PipelineState.DONE,
            PipelineState.TIMED_OUT,
        ]
        assert report.metrics.total_attempts == 5
        assert report.metrics.timed_out_attempts == 1

    @pytest.mark.asyncio
    async def test_check_lists_broken_expectations(self, engine):
        halted = await FatalPriceDivergenceScenario().run(engine)

        failures = ConsistentPricesScenario().check(halted, engine)

        assert "run ended in halted instead of done" in failures
        assert any(f.startswith("unexpected price findings") for f in failures)

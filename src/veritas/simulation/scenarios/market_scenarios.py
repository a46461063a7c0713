# src/veritas/simulation/scenarios/market_scenarios.py
from typing import TYPE_CHECKING, Optional

from veritas.collectors.base import BaseProvider
from veritas.collectors.static_provider import StaticProvider
from veritas.models.data_source import Category, SourceStatus
from veritas.models.findings import Severity
from veritas.orchestrator.models import OrchestrationResult, PipelineState
from veritas.orchestrator.settings import OrchestratorSettings
from veritas.simulation.market_data import SimulatedMarket
from veritas.simulation.scenarios.base import Scenario

if TYPE_CHECKING:
    from veritas.simulation.simulator_engine import SimulatorEngine


class ConsistentPricesScenario(Scenario):
    """Three providers within 0.4% of each other raise no price findings."""

    name = "consistent_prices"
    description = "3 market providers at 50000 / 50100 / 50200"

    def build_providers(self) -> list[BaseProvider]:
        market = SimulatedMarket(symbol=self.symbol, delay_seconds=0.01)
        return market.providers(market_prices=[50_000.0, 50_100.0, 50_200.0])

    def check(self, result: OrchestrationResult, engine: "SimulatorEngine") -> list[str]:
        market = result.validations.get(Category.MARKET)
        if market is None:
            return ["market stage did not complete"]

        failures = []
        price_findings = [
            f for f in market.findings
            if f.check == "price_consistency" and f.severity != Severity.INFO
        ]
        if price_findings:
            failures.append(f"unexpected price findings: {[f.description for f in price_findings]}")
        if market.score != 100.0:
            failures.append(f"market score {market.score} instead of 100")
        if not result.completed:
            failures.append(f"run ended in {result.final_state.value} instead of done")
        return failures


class FatalPriceDivergenceScenario(Scenario):
    """A 12% price gap is FATAL and halts the pipeline after the market stage."""

    name = "fatal_price_divergence"
    description = "2 market providers at 50000 / 56000"

    def build_providers(self) -> list[BaseProvider]:
        market = SimulatedMarket(symbol=self.symbol)
        return market.providers(market_prices=[50_000.0, 56_000.0])

    def check(self, result: OrchestrationResult, engine: "SimulatorEngine") -> list[str]:
        failures = []
        if not result.halted or not result.halt_reason:
            failures.append("run was not halted")
        if result.completed_stages != [Category.MARKET]:
            failures.append(f"stages {[c.value for c in result.completed_stages]} ran past the fatal stage")
        market = result.validations.get(Category.MARKET)
        if market is None or not market.has_fatal:
            failures.append("market validation has no FATAL finding")
        return failures


class ArbitrageWindowScenario(Scenario):
    """A 2% gap is one price WARNING plus an arbitrage INFO; market scores 85."""

    name = "arbitrage_window"
    description = "2 market providers at 50000 / 51000"

    def build_providers(self) -> list[BaseProvider]:
        market = SimulatedMarket(symbol=self.symbol)
        return market.providers(market_prices=[50_000.0, 51_000.0])

    def check(self, result: OrchestrationResult, engine: "SimulatorEngine") -> list[str]:
        market = result.validations.get(Category.MARKET)
        if market is None:
            return ["market stage did not complete"]

        failures = []
        warnings = [f.check for f in market.findings if f.severity == Severity.WARNING]
        if warnings != ["price_consistency"]:
            failures.append(f"expected one price warning, got {warnings}")
        arbitrage = [f for f in market.findings if f.check == "arbitrage_detection"]
        if len(arbitrage) != 1 or arbitrage[0].severity != Severity.INFO:
            failures.append("expected one arbitrage INFO finding")
        if market.score != 85.0:
            failures.append(f"market score {market.score} instead of 85")
        return failures


class InsufficientCorroborationScenario(Scenario):
    """Only one of three market providers answers in time; score is capped at 50."""

    name = "insufficient_corroboration"
    description = "1 of 3 market providers succeeds, 2 time out"

    def __init__(self, symbol: str = "BTC", hang_seconds: float = 10.0):
        super().__init__(symbol)
        self.hang_seconds = hang_seconds

    def build_providers(self) -> list[BaseProvider]:
        market = SimulatedMarket(symbol=self.symbol)
        return [
            StaticProvider("exchange_1", Category.MARKET, {"price": 50_000.0, "volume_24h": 3e10}),
            StaticProvider("exchange_2", Category.MARKET, {"price": 50_010.0}, delay_seconds=self.hang_seconds),
            StaticProvider("exchange_3", Category.MARKET, {"price": 50_020.0}, delay_seconds=self.hang_seconds),
            *market.social_providers(),
            *market.onchain_providers(),
            *market.news_providers(),
        ]

    def orchestrator_settings(self, engine: "SimulatorEngine") -> Optional[OrchestratorSettings]:
        # Two provider timeouts must fit inside the global budget
        return engine.orchestrator_settings(
            global_timeout_seconds=max(engine.settings.global_timeout_seconds, 5.0)
        )

    def check(self, result: OrchestrationResult, engine: "SimulatorEngine") -> list[str]:
        market = result.validations.get(Category.MARKET)
        if market is None:
            return ["market stage did not complete"]

        failures = []
        if result.final_state == PipelineState.HALTED:
            failures.append(f"run halted: {result.halt_reason}")
        timed_out = [r for r in result.results[Category.MARKET] if r.status == SourceStatus.TIMED_OUT]
        if len(timed_out) != 2:
            failures.append(f"{len(timed_out)} market providers timed out instead of 2")
        if not any(f.check == "corroboration" and f.severity == Severity.WARNING for f in market.findings):
            failures.append("no insufficient corroboration warning")
        if market.score > 50.0:
            failures.append(f"market score {market.score} above the corroboration cap")
        return failures

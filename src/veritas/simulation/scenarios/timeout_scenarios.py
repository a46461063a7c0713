# src/veritas/simulation/scenarios/timeout_scenarios.py
from typing import TYPE_CHECKING, Optional

from veritas.collectors.base import BaseProvider
from veritas.collectors.settings import CollectorSettings
from veritas.collectors.static_provider import StaticProvider
from veritas.models.data_source import Category
from veritas.orchestrator.models import OrchestrationResult
from veritas.simulation.market_data import SimulatedMarket
from veritas.simulation.scenarios.base import Scenario

if TYPE_CHECKING:
    from veritas.simulation.simulator_engine import SimulatorEngine


class OnChainHangTimeoutScenario(Scenario):
    """The on-chain provider outlives the global budget.

    The provider timeout is set above the global budget so the hang is only
    cut by the deadline. Market and Social must survive as partial results.
    """

    name = "onchain_hang_timeout"
    description = "market and social complete, on-chain hangs past the global timeout"

    # Allowed overrun of the global budget
    OVERHEAD_MS = 500

    def __init__(self, symbol: str = "BTC", hang_seconds: float = 10.0):
        super().__init__(symbol)
        self.hang_seconds = hang_seconds

    def build_providers(self) -> list[BaseProvider]:
        market = SimulatedMarket(symbol=self.symbol, delay_seconds=0.05)
        return [
            *market.market_providers(),
            *market.social_providers(),
            StaticProvider(
                "chain_watch",
                Category.ONCHAIN,
                {"exchange_inflow_usd": 1e9, "exchange_outflow_usd": 1e9},
                delay_seconds=self.hang_seconds,
            ),
            *market.news_providers(),
        ]

    def collector_settings(self, engine: "SimulatorEngine") -> Optional[CollectorSettings]:
        return engine.collector_settings(provider_timeout_seconds=self.hang_seconds * 2)

    def check(self, result: OrchestrationResult, engine: "SimulatorEngine") -> list[str]:
        failures = []
        if not result.timed_out or result.success:
            failures.append(f"run ended in {result.final_state.value} instead of timed_out")
        if result.completed_stages != [Category.MARKET, Category.SOCIAL]:
            failures.append(f"completed stages {[c.value for c in result.completed_stages]}")
        if set(result.results) != {Category.MARKET, Category.SOCIAL}:
            failures.append("partial results include unfinished stages")
        budget_ms = engine.settings.global_timeout_seconds * 1000 + self.OVERHEAD_MS
        if result.duration_ms > budget_ms:
            failures.append(f"took {result.duration_ms}ms, budget {budget_ms:.0f}ms")
        return failures

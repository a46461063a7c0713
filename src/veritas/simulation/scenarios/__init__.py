# src/veritas/simulation/scenarios/__init__.py
"""Built-in simulation scenarios."""

from veritas.simulation.scenarios.base import Scenario
from veritas.simulation.scenarios.market_scenarios import (
    ArbitrageWindowScenario,
    ConsistentPricesScenario,
    FatalPriceDivergenceScenario,
    InsufficientCorroborationScenario,
)
from veritas.simulation.scenarios.timeout_scenarios import OnChainHangTimeoutScenario


def default_scenarios(symbol: str = "BTC", hang_seconds: float = 10.0) -> list[Scenario]:
    return [
        ConsistentPricesScenario(symbol),
        FatalPriceDivergenceScenario(symbol),
        ArbitrageWindowScenario(symbol),
        InsufficientCorroborationScenario(symbol, hang_seconds),
        OnChainHangTimeoutScenario(symbol, hang_seconds),
    ]


__all__ = [
    "ArbitrageWindowScenario",
    "ConsistentPricesScenario",
    "FatalPriceDivergenceScenario",
    "InsufficientCorroborationScenario",
    "OnChainHangTimeoutScenario",
    "Scenario",
    "default_scenarios",
]

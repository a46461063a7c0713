# src/veritas/simulation/scenarios/base.py
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from veritas.collectors.base import BaseProvider
from veritas.collectors.settings import CollectorSettings
from veritas.orchestrator.models import OrchestrationResult
from veritas.orchestrator.settings import OrchestratorSettings

if TYPE_CHECKING:
    from veritas.simulation.simulator_engine import SimulatorEngine


class Scenario(ABC):
    """A provider set and the pipeline outcome it must produce.

    Subclasses build the providers and list the expectations a result breaks;
    the settings hooks override the engine's timeouts for one scenario.
    """

    name: str = "unnamed_scenario"
    description: str = ""

    def __init__(self, symbol: str = "BTC"):
        self.symbol = symbol

    @abstractmethod
    def build_providers(self) -> list[BaseProvider]:
        ...

    @abstractmethod
    def check(self, result: OrchestrationResult, engine: "SimulatorEngine") -> list[str]:
        """Expectations the result violates. Empty when the scenario passed."""
        ...

    def collector_settings(self, engine: "SimulatorEngine") -> Optional[CollectorSettings]:
        return None

    def orchestrator_settings(self, engine: "SimulatorEngine") -> Optional[OrchestratorSettings]:
        return None

    async def run(self, engine: "SimulatorEngine") -> OrchestrationResult:
        return await engine.run(
            self.symbol,
            self.build_providers(),
            collector_settings=self.collector_settings(engine),
            orchestrator_settings=self.orchestrator_settings(engine),
        )

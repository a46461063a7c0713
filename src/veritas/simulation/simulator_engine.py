# src/veritas/simulation/simulator_engine.py
from typing import Optional, Sequence

from veritas.collectors.base import BaseProvider
from veritas.collectors.collector import Collector
from veritas.collectors.settings import CollectorSettings
from veritas.orchestrator.models import OrchestrationResult, ProgressUpdate
from veritas.orchestrator.settings import OrchestratorSettings
from veritas.orchestrator.validation_orchestrator import orchestrate
from veritas.reporting.metrics import ValidationMetrics
from veritas.simulation.settings import SimulationSettings
from veritas.validators import default_validators
from veritas.validators.settings import VeritasSettings


class SimulatorEngine:
    """Runs the full pipeline against simulated providers.

    Keeps the last result and its progress events, and feeds every run into
    one ValidationMetrics.
    """

    def __init__(
        self,
        settings: SimulationSettings | None = None,
        veritas_settings: VeritasSettings | None = None,
    ):
        self.settings = settings or SimulationSettings()
        self.veritas_settings = veritas_settings or VeritasSettings()
        self.last_result: Optional[OrchestrationResult] = None
        self.progress_updates: list[ProgressUpdate] = []
        self.metrics = ValidationMetrics()

    def collector_settings(self, provider_timeout_seconds: float | None = None) -> CollectorSettings:
        return CollectorSettings(
            provider_timeout_seconds=provider_timeout_seconds or self.settings.provider_timeout_seconds,
        )

    def orchestrator_settings(self, global_timeout_seconds: float | None = None) -> OrchestratorSettings:
        return OrchestratorSettings(
            global_timeout_seconds=global_timeout_seconds or self.settings.global_timeout_seconds,
        )

    async def run(
        self,
        symbol: str,
        providers: Sequence[BaseProvider],
        collector_settings: CollectorSettings | None = None,
        orchestrator_settings: OrchestratorSettings | None = None,
    ) -> OrchestrationResult:
        """Run one orchestration and record its result and progress events."""
        updates: list[ProgressUpdate] = []

        async def record(update: ProgressUpdate) -> None:
            updates.append(update)

        collector = Collector(list(providers), collector_settings or self.collector_settings())
        result = await orchestrate(
            symbol,
            collector,
            validators=default_validators(self.veritas_settings),
            settings=orchestrator_settings or self.orchestrator_settings(),
            progress_callback=record,
            metrics=self.metrics,
        )
        self.last_result = result
        self.progress_updates = updates
        return result

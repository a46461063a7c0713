# src/veritas/simulation/scenario_runner.py
import asyncio
import logging
import time

from veritas.simulation.report import ScenarioOutcome, SimulationReport
from veritas.simulation.scenarios.base import Scenario
from veritas.simulation.settings import SimulationSettings
from veritas.simulation.simulator_engine import SimulatorEngine

logger = logging.getLogger(__name__)


class ScenarioRunner:
    """Runs each scenario's pipeline on the engine and checks the outcome."""

    def __init__(
        self,
        engine: SimulatorEngine,
        scenarios: list[Scenario],
        settings: SimulationSettings | None = None,
    ):
        self.engine = engine
        self.scenarios = scenarios
        self.settings = settings or SimulationSettings()

    async def run_all(self) -> SimulationReport:
        report = SimulationReport()

        for scenario in self.scenarios:
            outcome = await self._run_one(scenario)
            logger.info(outcome.describe())
            report.outcomes.append(outcome)

            if not outcome.passed and self.settings.fail_fast:
                logger.warning(f"Stopping after {scenario.name} (fail_fast)")
                break

        report.metrics = self.engine.metrics.aggregate()
        return report

    async def _run_one(self, scenario: Scenario) -> ScenarioOutcome:
        start = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                scenario.run(self.engine),
                timeout=self.settings.scenario_timeout_seconds,
            )
            failures = scenario.check(result, self.engine)
        except Exception as e:
            return ScenarioOutcome(
                name=scenario.name,
                error=str(e) or type(e).__name__,
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        return ScenarioOutcome.from_result(
            scenario.name, result, failures, (time.perf_counter() - start) * 1000
        )

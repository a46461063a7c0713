# src/veritas/simulation/__init__.py
"""Scenario harness running the pipeline against simulated providers."""

from veritas.simulation.market_data import SimulatedMarket
from veritas.simulation.report import ScenarioOutcome, SimulationReport
from veritas.simulation.scenario_runner import ScenarioRunner
from veritas.simulation.settings import SimulationSettings
from veritas.simulation.simulator_engine import SimulatorEngine

__all__ = [
    "ScenarioOutcome",
    "ScenarioRunner",
    "SimulatedMarket",
    "SimulationReport",
    "SimulationSettings",
    "SimulatorEngine",
]

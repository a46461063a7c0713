# src/veritas/simulation/settings.py
from pydantic import BaseModel, Field


class SimulationSettings(BaseModel):
    """Configuration for the scenario harness.

    Timings are scaled down from production so the whole suite runs in a few
    seconds; the relationships between them are what the scenarios exercise.
    """

    scenario_timeout_seconds: float = Field(default=30.0, gt=0)
    fail_fast: bool = False
    seed: int = 42
    provider_timeout_seconds: float = Field(default=0.3, gt=0, le=60)
    global_timeout_seconds: float = Field(default=1.0, gt=0)
    hang_seconds: float = Field(default=10.0, gt=0)

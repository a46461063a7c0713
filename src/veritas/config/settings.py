# src/veritas/config/settings.py
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from veritas.collectors.settings import CollectorSettings
from veritas.orchestrator.settings import OrchestratorSettings
from veritas.simulation.settings import SimulationSettings
from veritas.validators.settings import VeritasSettings


class SystemConfig(BaseModel):
    name: str = "Veritas Validation Pipeline"
    version: str = "0.1.0"
    default_symbol: str = "BTC"


class ClaudeClassifierSettings(BaseModel):
    """Settings for the Claude sentiment classifier."""

    enabled: bool = False
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = Field(default=2000, ge=100, le=4096)
    rate_limit_per_minute: int = Field(default=20, gt=0, le=100)


class ClassifierSettings(BaseModel):
    """Settings for secondary sentiment classification."""

    claude: ClaudeClassifierSettings = Field(default_factory=ClaudeClassifierSettings)


class ReliabilitySettings(BaseModel):
    """Settings for the source reliability tracker."""

    enabled: bool = True
    data_dir: Optional[Path] = Path("data/reliability")


class AnthropicConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANTHROPIC_")

    api_key: str = ""


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    collectors: CollectorSettings = Field(default_factory=CollectorSettings)
    validators: VeritasSettings = Field(default_factory=VeritasSettings)
    classifiers: ClassifierSettings = Field(default_factory=ClassifierSettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    reliability: ReliabilitySettings = Field(default_factory=ReliabilitySettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data.pop("anthropic", None)
        anthropic = AnthropicConfig()

        return cls(
            **data,
            anthropic=anthropic,
        )

# src/veritas/orchestrator/settings.py
"""Configuration for the validation orchestrator."""

from pydantic import BaseModel, Field, field_validator

from veritas.models.data_source import Category


class OrchestratorSettings(BaseModel):
    """Settings for ValidationOrchestrator."""

    global_timeout_seconds: float = Field(default=15.0, gt=0, le=300)
    callback_timeout_seconds: float = Field(default=1.0, gt=0, le=30)
    progress_drain_seconds: float = Field(default=0.25, ge=0, le=5)
    stage_weights: dict[Category, float] = Field(
        default_factory=lambda: {category: 0.25 for category in Category}
    )
    minimum_confidence: float = Field(default=70.0, ge=0, le=100)
    proceed_threshold: float = Field(default=60.0, ge=0, le=100)

    @field_validator("stage_weights")
    @classmethod
    def _check_weights(cls, weights: dict[Category, float]) -> dict[Category, float]:
        if any(w < 0 for w in weights.values()):
            raise ValueError("stage weights must be non-negative")
        if sum(weights.values()) <= 0:
            raise ValueError("at least one stage weight must be positive")
        return weights

# src/veritas/collectors/settings.py
"""Configuration for the collector."""

from pydantic import BaseModel, Field


class CollectorSettings(BaseModel):
    """Settings for Collector."""

    provider_timeout_seconds: float = Field(default=8.0, gt=0, le=60)
    cache_enabled: bool = True
    cache_ttl_seconds: float = Field(default=30.0, ge=0)

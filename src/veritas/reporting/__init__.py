# src/veritas/reporting/__init__.py
"""Text rendering, guidance and metrics for orchestration results."""

from .guidance import (
    Priority,
    Recommendation,
    ReliabilityGuidance,
    build_recommendations,
    build_reliability_guidance,
    reliability_band,
)
from .metrics import AggregatedMetrics, ValidationAttempt, ValidationMetrics
from .summary import generate_data_quality_summary, get_status_message

__all__ = [
    "AggregatedMetrics",
    "Priority",
    "Recommendation",
    "ReliabilityGuidance",
    "ValidationAttempt",
    "ValidationMetrics",
    "build_recommendations",
    "build_reliability_guidance",
    "generate_data_quality_summary",
    "get_status_message",
    "reliability_band",
]

# src/veritas/scoring/__init__.py
"""Confidence scoring and provider reliability."""

from .confidence import (
    DEFAULT_STAGE_WEIGHTS,
    ConfidenceScore,
    compute_confidence,
    confidence_level,
    confidence_recommendation,
)
from .reliability import SourceReliability, SourceReliabilityTracker, ValidationOutcome

__all__ = [
    "ConfidenceScore",
    "DEFAULT_STAGE_WEIGHTS",
    "SourceReliability",
    "SourceReliabilityTracker",
    "ValidationOutcome",
    "compute_confidence",
    "confidence_level",
    "confidence_recommendation",
]

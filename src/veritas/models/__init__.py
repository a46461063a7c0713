# src/veritas/models/__init__.py
"""Shared data models."""

from .data_source import (
    Category,
    DataSourceResult,
    PAYLOAD_TYPES,
    Payload,
    SourceStatus,
)
from .context import StageContext
from .findings import CategoryValidation, Severity, ValidationFinding
from .payloads import (
    MarketPayload,
    NewsArticle,
    NewsPayload,
    OnChainPayload,
    SocialPayload,
)

__all__ = [
    "Category",
    "CategoryValidation",
    "DataSourceResult",
    "MarketPayload",
    "NewsArticle",
    "NewsPayload",
    "OnChainPayload",
    "PAYLOAD_TYPES",
    "Payload",
    "Severity",
    "SocialPayload",
    "SourceStatus",
    "StageContext",
    "ValidationFinding",
]

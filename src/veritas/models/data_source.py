# src/veritas/models/data_source.py
"""Normalized envelope for one provider call."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from veritas.models.payloads import MarketPayload, NewsPayload, OnChainPayload, SocialPayload


Payload = Union[MarketPayload, SocialPayload, OnChainPayload, NewsPayload]


class Category(str, Enum):
    """Data category. Declaration order is the canonical stage order."""

    MARKET = "market"
    SOCIAL = "social"
    ONCHAIN = "onchain"
    NEWS = "news"

    @classmethod
    def ordered(cls) -> list["Category"]:
        return list(cls)


PAYLOAD_TYPES: dict[Category, type] = {
    Category.MARKET: MarketPayload,
    Category.SOCIAL: SocialPayload,
    Category.ONCHAIN: OnChainPayload,
    Category.NEWS: NewsPayload,
}


class SourceStatus(str, Enum):
    """Outcome of a provider call."""

    OK = "ok"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class DataSourceResult:
    """Result of one provider call for one category.

    Attributes:
        category: Category the provider serves.
        provider_id: Provider identifier (e.g. "coingecko").
        status: OK, FAILED or TIMED_OUT.
        payload: Validated payload; present only when status is OK.
        fetched_at: When the call finished.
        latency_ms: Wall time spent on the call.
        error: Failure explanation for FAILED and TIMED_OUT results.
    """

    category: Category
    provider_id: str
    status: SourceStatus
    payload: Optional[Payload] = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    latency_ms: int = 0
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.is_ok and self.payload is None:
            raise ValueError(f"{self.provider_id}: OK result requires a payload")
        if not self.is_ok and self.payload is not None:
            raise ValueError(f"{self.provider_id}: {self.status.value} result cannot carry a payload")

    @property
    def is_ok(self) -> bool:
        return self.status == SourceStatus.OK

    @classmethod
    def ok(
        cls,
        category: Category,
        provider_id: str,
        payload: Payload,
        latency_ms: int = 0,
    ) -> "DataSourceResult":
        return cls(
            category=category,
            provider_id=provider_id,
            status=SourceStatus.OK,
            payload=payload,
            latency_ms=latency_ms,
        )

    @classmethod
    def failed(
        cls,
        category: Category,
        provider_id: str,
        error: str,
        latency_ms: int = 0,
    ) -> "DataSourceResult":
        return cls(
            category=category,
            provider_id=provider_id,
            status=SourceStatus.FAILED,
            latency_ms=latency_ms,
            error=error,
        )

    @classmethod
    def timed_out(
        cls,
        category: Category,
        provider_id: str,
        latency_ms: int = 0,
        timeout_seconds: Optional[float] = None,
    ) -> "DataSourceResult":
        limit = f"{timeout_seconds:g}s" if timeout_seconds is not None else f"{latency_ms}ms"
        return cls(
            category=category,
            provider_id=provider_id,
            status=SourceStatus.TIMED_OUT,
            latency_ms=latency_ms,
            error=f"timed out after {limit}",
        )

# src/veritas/models/payloads.py
"""Typed payloads for each data category.

Providers return loose mappings. These models check the documented numeric
fields once, at the collector boundary, so validators can rely on them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MarketPayload(BaseModel):
    """Price and volume reported by one market data provider."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    price: float = Field(gt=0)
    volume_24h: Optional[float] = Field(default=None, ge=0)
    change_24h_percent: Optional[float] = None


class SocialPayload(BaseModel):
    """Sentiment reported by one social provider.

    Attributes:
        sentiment_score: Numeric sentiment on a 0-100 scale (50 is neutral).
        mention_count: Number of mentions the score was computed from.
        posts: Raw post texts, used by the secondary classification pass.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    sentiment_score: Optional[float] = Field(default=None, ge=0, le=100)
    mention_count: Optional[int] = Field(default=None, ge=0)
    posts: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _require_signal(self) -> "SocialPayload":
        if self.sentiment_score is None and not self.posts:
            raise ValueError("social payload needs a sentiment_score or posts")
        return self


class OnChainPayload(BaseModel):
    """Exchange flow figures reported by one on-chain provider."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    exchange_inflow_usd: float = Field(ge=0)
    exchange_outflow_usd: float = Field(ge=0)
    active_addresses: Optional[int] = Field(default=None, ge=0)
    large_transaction_count: Optional[int] = Field(default=None, ge=0)

    @property
    def total_flow_usd(self) -> float:
        return self.exchange_inflow_usd + self.exchange_outflow_usd

    @property
    def net_flow_usd(self) -> float:
        """Withdrawals minus deposits. Positive means accumulation."""
        return self.exchange_outflow_usd - self.exchange_inflow_usd


class NewsArticle(BaseModel):
    """A single headline."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str = Field(min_length=1)
    source: str = "unknown"
    published_at: Optional[datetime] = None


class NewsPayload(BaseModel):
    """Headlines returned by one news provider."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    articles: tuple[NewsArticle, ...] = ()

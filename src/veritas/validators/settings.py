# src/veritas/validators/settings.py
"""Thresholds for cross-validation."""

from pydantic import BaseModel, Field, model_validator


class VeritasSettings(BaseModel):
    """Settings for the category validators.

    Ratios are fractions (0.015 == 1.5%). Sentiment values use the 0-100 scale.
    """

    # Market
    price_warning_threshold: float = Field(default=0.015, gt=0, le=1)
    price_fatal_threshold: float = Field(default=0.10, gt=0, le=1)
    volume_warning_threshold: float = Field(default=0.10, gt=0, le=1)
    arbitrage_threshold: float = Field(default=0.02, gt=0, le=1)
    min_market_sources: int = Field(default=2, ge=1)

    # Social
    sentiment_mismatch_threshold: float = Field(default=30.0, gt=0, le=100)
    sentiment_neutral_band: float = Field(default=5.0, ge=0, le=50)
    bullish_score_threshold: float = Field(default=60.0, ge=50, le=100)
    bearish_score_threshold: float = Field(default=40.0, ge=0, le=50)
    overwhelming_text_share: float = Field(default=70.0, gt=50, le=100)
    min_posts_for_classification: int = Field(default=3, ge=1)
    min_social_sources: int = Field(default=2, ge=1)

    # On-chain
    onchain_impossible_volume_usd: float = Field(default=20_000_000_000, gt=0)
    onchain_low_consistency: float = Field(default=50.0, ge=0, le=100)
    onchain_partial_score: float = Field(default=50.0, ge=0, le=100)
    flow_price_divergence_percent: float = Field(default=5.0, gt=0)
    net_flow_significance: float = Field(default=0.05, ge=0, le=1)
    min_onchain_sources: int = Field(default=1, ge=1)

    # News
    news_divergence_share: float = Field(default=70.0, gt=50, le=100)
    news_recency_hours: float = Field(default=24.0, gt=0)
    news_source_saturation: int = Field(default=5, ge=1)
    min_news_sources: int = Field(default=1, ge=1)

    # Scoring
    warning_penalty: float = Field(default=15.0, ge=0, le=100)
    insufficient_corroboration_cap: float = Field(default=50.0, ge=0, le=100)

    @model_validator(mode="after")
    def _check_ordering(self) -> "VeritasSettings":
        if self.price_warning_threshold >= self.price_fatal_threshold:
            raise ValueError("price_warning_threshold must be below price_fatal_threshold")
        if self.arbitrage_threshold >= self.price_fatal_threshold:
            raise ValueError("arbitrage_threshold must be below price_fatal_threshold")
        return self

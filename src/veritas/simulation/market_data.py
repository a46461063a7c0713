# src/veritas/simulation/market_data.py
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import numpy as np

from veritas.collectors.base import BaseProvider
from veritas.collectors.static_provider import StaticProvider
from veritas.models.data_source import Category


BULLISH_POSTS = (
    "{symbol} breakout looks real, rally into the weekend",
    "Accumulating more {symbol} on every dip, hodl",
    "{symbol} adoption keeps growing, long term bullish",
    "Just watching {symbol} today",
)

HEADLINES = (
    ("{symbol} ETF inflows hit record as institutional adoption grows", "coindesk"),
    ("Major exchange announces {symbol} partnership with payments giant", "the_block"),
    ("{symbol} network upgrade reaches milestone on testnet", "decrypt"),
    ("Analysts discuss {symbol} outlook ahead of macro data", "reuters"),
    ("{symbol} hashrate climbs to new record", "cointelegraph"),
)


class SimulatedMarket:
    """Generates mutually consistent provider data for one asset.

    Market quotes jitter around base_price within max_deviation; the other
    categories are built to agree with them (moderately bullish sentiment,
    exchange flows at 20% of volume with net accumulation, upbeat headlines).
    """

    def __init__(
        self,
        symbol: str = "BTC",
        base_price: float = 50_000.0,
        volume_24h: float = 30_000_000_000.0,
        change_24h_percent: float = 1.2,
        seed: int = 42,
        delay_seconds: float = 0.0,
    ):
        self.symbol = symbol
        self.base_price = base_price
        self.volume_24h = volume_24h
        self.change_24h_percent = change_24h_percent
        self.seed = seed
        self.delay_seconds = delay_seconds

    def market_quotes(self, count: int = 3, max_deviation: float = 0.002) -> list[dict]:
        """Generate count quotes whose prices differ by at most max_deviation."""
        rng = np.random.default_rng(self.seed)
        # Each offset within a quarter of the budget keeps every pair inside it
        offsets = rng.uniform(-max_deviation / 4, max_deviation / 4, size=count)
        volume_noise = rng.uniform(-0.02, 0.02, size=count)
        return [
            {
                "price": round(float(self.base_price * (1 + offset)), 2),
                "volume_24h": float(self.volume_24h * (1 + noise)),
                "change_24h_percent": self.change_24h_percent,
            }
            for offset, noise in zip(offsets, volume_noise)
        ]

    def market_providers(
        self,
        prices: Optional[Sequence[float]] = None,
        count: int = 3,
    ) -> list[StaticProvider]:
        """Market providers with generated quotes, or with the given prices."""
        if prices is None:
            quotes = self.market_quotes(count)
        else:
            quotes = [
                {
                    "price": float(price),
                    "volume_24h": self.volume_24h,
                    "change_24h_percent": self.change_24h_percent,
                }
                for price in prices
            ]
        return [
            StaticProvider(f"exchange_{i + 1}", Category.MARKET, quote, delay_seconds=self.delay_seconds)
            for i, quote in enumerate(quotes)
        ]

    def social_providers(self) -> list[StaticProvider]:
        posts = tuple(p.format(symbol=self.symbol) for p in BULLISH_POSTS)
        return [
            StaticProvider(
                "social_pulse",
                Category.SOCIAL,
                {"sentiment_score": 64.0, "mention_count": 1_250, "posts": posts},
                delay_seconds=self.delay_seconds,
            ),
            StaticProvider(
                "crowd_meter",
                Category.SOCIAL,
                {"sentiment_score": 58.0, "mention_count": 980},
                delay_seconds=self.delay_seconds,
            ),
        ]

    def onchain_providers(self) -> list[StaticProvider]:
        total = self.volume_24h * 0.2
        return [
            StaticProvider(
                "chain_watch",
                Category.ONCHAIN,
                {
                    "exchange_inflow_usd": total * 0.45,
                    "exchange_outflow_usd": total * 0.55,
                    "active_addresses": 950_000,
                    "large_transaction_count": 4_200,
                },
                delay_seconds=self.delay_seconds,
            )
        ]

    def news_providers(self, now: Optional[datetime] = None) -> list[StaticProvider]:
        now = now or datetime.now(timezone.utc)
        articles = [
            {
                "title": title.format(symbol=self.symbol),
                "source": source,
                "published_at": (now - timedelta(hours=i + 1)).isoformat(),
            }
            for i, (title, source) in enumerate(HEADLINES)
        ]
        return [
            StaticProvider("news_wire", Category.NEWS, {"articles": articles}, delay_seconds=self.delay_seconds)
        ]

    def providers(self, market_prices: Optional[Sequence[float]] = None) -> list[BaseProvider]:
        """A full provider set covering all four categories."""
        return [
            *self.market_providers(market_prices),
            *self.social_providers(),
            *self.onchain_providers(),
            *self.news_providers(),
        ]

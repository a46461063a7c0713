# src/veritas/collectors/yfinance_provider.py
"""Market provider backed by Yahoo Finance crypto quotes."""

import asyncio
import logging
from typing import Any, Mapping

import yfinance as yf

from veritas.collectors.base import BaseProvider
from veritas.exceptions import ProviderError
from veritas.models.context import StageContext
from veritas.models.data_source import Category

logger = logging.getLogger(__name__)


class YFinanceMarketProvider(BaseProvider):
    """Fetches spot price, 24h volume and 24h change for "<SYMBOL>-<QUOTE>".

    yfinance is synchronous, so the lookup runs in a worker thread.
    """

    def __init__(self, name: str = "yahoo_finance", quote_currency: str = "USD"):
        super().__init__(name=name, category=Category.MARKET)
        self.quote_currency = quote_currency

    def ticker_for(self, symbol: str) -> str:
        return f"{symbol.upper()}-{self.quote_currency}"

    async def fetch(self, symbol: str, context: StageContext) -> Mapping[str, Any]:
        return await asyncio.to_thread(self._fetch_sync, symbol)

    def _fetch_sync(self, symbol: str) -> dict[str, Any]:
        ticker = yf.Ticker(self.ticker_for(symbol))
        info = ticker.info or {}

        price = info.get("regularMarketPrice") or info.get("previousClose")
        if price is None:
            raise ProviderError(self.name, f"no quote for {self.ticker_for(symbol)}")

        volume = info.get("volume24Hr") or info.get("regularMarketVolume")
        result: dict[str, Any] = {
            "price": float(price),
            "change_24h_percent": info.get("regularMarketChangePercent"),
        }
        if volume is not None:
            result["volume_24h"] = float(volume)
        logger.debug(f"{self.name} quote for {symbol}: {result}")
        return result

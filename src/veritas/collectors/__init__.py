# src/veritas/collectors/__init__.py
"""Provider interface and the concurrent collector."""

from .base import BaseProvider
from .cache import ResponseCache
from .collector import Collector
from .settings import CollectorSettings
from .static_provider import StaticProvider
from .yfinance_provider import YFinanceMarketProvider

__all__ = [
    "BaseProvider",
    "Collector",
    "CollectorSettings",
    "ResponseCache",
    "StaticProvider",
    "YFinanceMarketProvider",
]

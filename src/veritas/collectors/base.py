# src/veritas/collectors/base.py
from abc import ABC, abstractmethod
from typing import Any, Mapping

from veritas.models.context import StageContext
from veritas.models.data_source import Category


class BaseProvider(ABC):
    """Abstract base class for all external data providers."""

    def __init__(self, name: str, category: Category):
        self._name = name
        self._category = category

    @property
    def name(self) -> str:
        return self._name

    @property
    def category(self) -> Category:
        return self._category

    @abstractmethod
    async def fetch(self, symbol: str, context: StageContext) -> Mapping[str, Any]:
        """Fetch raw data for a symbol.

        Args:
            symbol: Asset ticker, e.g. "BTC".
            context: Read-only results of earlier stages.

        Returns:
            Mapping with the category's documented fields. Unknown keys
            are ignored by the collector.
        """
        pass

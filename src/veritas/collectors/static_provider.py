# src/veritas/collectors/static_provider.py
"""Provider that serves a fixed response, for fixtures and simulation."""

import asyncio
from typing import Any, Mapping, Optional

from veritas.collectors.base import BaseProvider
from veritas.models.context import StageContext
from veritas.models.data_source import Category


class StaticProvider(BaseProvider):
    """Returns a preset mapping after an optional delay, or raises a preset error."""

    def __init__(
        self,
        name: str,
        category: Category,
        data: Optional[Mapping[str, Any]] = None,
        delay_seconds: float = 0.0,
        error: Optional[Exception] = None,
    ):
        super().__init__(name=name, category=category)
        self._data = data
        self._delay = delay_seconds
        self._error = error
        self.calls = 0

    async def fetch(self, symbol: str, context: StageContext) -> Mapping[str, Any]:
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return dict(self._data or {})

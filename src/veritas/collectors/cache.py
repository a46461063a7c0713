# src/veritas/collectors/cache.py
"""Short-lived response cache scoped to one workflow run."""

import time
from typing import Any, Callable, Mapping, Optional

from veritas.models.data_source import Category

CacheKey = tuple[Category, str, str]


class ResponseCache:
    """Caches raw provider responses keyed by (category, provider, symbol).

    One instance belongs to a single orchestrator run, so a provider that is
    asked twice within the run sees its own earlier answer. A provider name
    reused in another category is a different entry.
    """

    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Mapping[str, Any]]] = {}

    def get(self, category: Category, provider_id: str, symbol: str) -> Optional[Mapping[str, Any]]:
        key = (category, provider_id, symbol)
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at > self._ttl:
            del self._entries[key]
            return None
        return value

    def put(self, category: Category, provider_id: str, symbol: str, value: Mapping[str, Any]) -> None:
        self._entries[(category, provider_id, symbol)] = (self._clock(), value)

    def __len__(self) -> int:
        return len(self._entries)

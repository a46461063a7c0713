# src/veritas/collectors/collector.py
"""Concurrent fan-out over the providers of one category."""
import asyncio
import logging
import time
from typing import Optional

from pydantic import ValidationError

from veritas.collectors.base import BaseProvider
from veritas.collectors.cache import ResponseCache
from veritas.collectors.settings import CollectorSettings
from veritas.exceptions import CollectorConfigurationError, ProviderRateLimitError
from veritas.models.context import StageContext
from veritas.models.data_source import PAYLOAD_TYPES, Category, DataSourceResult

logger = logging.getLogger(__name__)


class Collector:
    """Invokes every provider configured for a category and normalizes results.

    Provider failures are data: a slow provider yields a TIMED_OUT result and
    a raising provider yields a FAILED result. Only configuration mistakes
    raise.
    """

    def __init__(
        self,
        providers: list[BaseProvider],
        settings: CollectorSettings | None = None,
    ):
        """Initialize the collector.

        Args:
            providers: Provider instances, in the order results are reported.
            settings: Timeout and cache settings.
        """
        self._providers = providers
        self._settings = settings or CollectorSettings()

    @property
    def providers(self) -> list[BaseProvider]:
        return self._providers

    @property
    def settings(self) -> CollectorSettings:
        return self._settings

    def providers_for(self, category: Category) -> list[BaseProvider]:
        """Return the configured providers of a category, in order."""
        return [p for p in self._providers if p.category == category]

    def new_cache(self) -> Optional[ResponseCache]:
        """Create a cache for one workflow run, or None when disabled."""
        if not self._settings.cache_enabled:
            return None
        return ResponseCache(ttl_seconds=self._settings.cache_ttl_seconds)

    async def collect(
        self,
        category: Category,
        symbol: str,
        context: StageContext,
        cache: Optional[ResponseCache] = None,
    ) -> list[DataSourceResult]:
        """Fetch a category from all of its providers concurrently.

        Args:
            category: Category to collect.
            symbol: Asset ticker.
            context: Read-only results of earlier stages.
            cache: Optional cache owned by the current run.

        Returns:
            One DataSourceResult per configured provider, in configuration order.

        Raises:
            CollectorConfigurationError: If the symbol is empty or no provider
                serves the category.
        """
        if not symbol or not symbol.strip():
            raise CollectorConfigurationError("symbol must be a non-empty string")

        providers = self.providers_for(category)
        if not providers:
            raise CollectorConfigurationError(f"No providers configured for {category.value}")

        logger.debug(f"Collecting {category.value} for {symbol} from {len(providers)} providers")
        return list(
            await asyncio.gather(
                *[self._fetch_one(p, symbol, context, cache) for p in providers]
            )
        )

    async def _fetch_one(
        self,
        provider: BaseProvider,
        symbol: str,
        context: StageContext,
        cache: Optional[ResponseCache],
    ) -> DataSourceResult:
        """Call one provider and wrap the outcome in a DataSourceResult."""
        category = provider.category
        start = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - start) * 1000)

        raw = cache.get(category, provider.name, symbol) if cache is not None else None
        if raw is None:
            try:
                raw = await asyncio.wait_for(
                    provider.fetch(symbol, context),
                    timeout=self._settings.provider_timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Provider {provider.name} timed out for {symbol}")
                return DataSourceResult.timed_out(
                    category,
                    provider.name,
                    latency_ms=elapsed_ms(),
                    timeout_seconds=self._settings.provider_timeout_seconds,
                )
            except ProviderRateLimitError as e:
                logger.warning(f"Provider {provider.name} rate limited: {e}")
                return DataSourceResult.failed(
                    category, provider.name, f"rate limited: {e}", latency_ms=elapsed_ms()
                )
            except Exception as e:
                logger.warning(f"Provider {provider.name} failed: {e}")
                return DataSourceResult.failed(category, provider.name, str(e), latency_ms=elapsed_ms())

            if cache is not None and raw is not None:
                cache.put(category, provider.name, symbol, raw)

        if raw is None:
            return DataSourceResult.failed(category, provider.name, "empty response", latency_ms=elapsed_ms())

        try:
            payload = PAYLOAD_TYPES[category].model_validate(dict(raw))
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Provider {provider.name} returned malformed {category.value} data: {e}")
            return DataSourceResult.failed(
                category, provider.name, f"malformed payload: {e}", latency_ms=elapsed_ms()
            )

        return DataSourceResult.ok(category, provider.name, payload, latency_ms=elapsed_ms())

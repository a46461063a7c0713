# src/veritas/validators/market_validator.py
"""Cross-validation of market prices and volumes across providers."""

import logging

from veritas.models.context import StageContext
from veritas.models.data_source import Category, DataSourceResult
from veritas.models.findings import CategoryValidation, Severity
from veritas.validators.base import (
    CategoryValidator,
    PairwiseDeviation,
    pairwise_deviations,
    providers_in,
    weighted_mean,
)

logger = logging.getLogger(__name__)


class MarketValidator(CategoryValidator):
    """Checks that independent market providers agree on price and volume.

    Checks run in a fixed order so findings are reproducible:
        1. corroboration (enough providers answered)
        2. price consistency (WARNING above 1.5%, FATAL above the fatal threshold)
        3. volume consistency (WARNING above 10%)
        4. arbitrage detection (INFO between the arbitrage and fatal thresholds)
    """

    category = Category.MARKET

    def _validate(
        self,
        ok: list[DataSourceResult],
        results: list[DataSourceResult],
        context: StageContext,
    ) -> CategoryValidation:
        if not ok:
            logger.warning(f"No market data for {context.symbol}")
            return self.no_data(results, "market")

        validation = CategoryValidation(category=self.category, score=100.0)
        cap = self.check_corroboration(
            ok, results, self.settings.min_market_sources, "market", validation
        )

        prices = [(r.provider_id, r.payload.price) for r in ok]
        volumes = [(r.provider_id, r.payload.volume_24h) for r in ok if r.payload.volume_24h is not None]
        changes = [
            (r.provider_id, r.payload.change_24h_percent)
            for r in ok
            if r.payload.change_24h_percent is not None
        ]

        price_pairs = pairwise_deviations(prices)
        max_price_deviation = max((p.deviation for p in price_pairs), default=0.0)

        if price_pairs:
            self._check_price(price_pairs, max_price_deviation, validation)
            self._check_volume(volumes, validation)
            self._check_arbitrage(prices, max_price_deviation, validation)

        validation.consensus["price"] = weighted_mean(prices, context)
        validation.consensus["max_price_deviation"] = max_price_deviation
        if volumes:
            validation.consensus["volume_24h"] = weighted_mean(volumes, context)
        if changes:
            validation.consensus["change_24h_percent"] = weighted_mean(changes, context)

        validation.score = self.penalized_score(100.0, validation, cap)
        logger.info(
            f"Market validation for {context.symbol}: score={validation.score:.0f}, "
            f"max price deviation={max_price_deviation * 100:.3f}%"
        )
        return validation

    def _check_price(
        self,
        pairs: list[PairwiseDeviation],
        max_deviation: float,
        validation: CategoryValidation,
    ) -> None:
        fatal = self.settings.price_fatal_threshold
        warning = self.settings.price_warning_threshold

        if max_deviation > fatal:
            divergent = [p for p in pairs if p.deviation > fatal]
            validation.findings.append(
                self.finding(
                    Severity.FATAL,
                    f"Price deviation of {max_deviation * 100:.2f}% exceeds the fatal threshold "
                    f"of {fatal * 100:.2f}% ({self._describe(divergent)}); "
                    f"at least one provider is returning stale or invalid data",
                    providers_in(divergent),
                    metric=max_deviation * 100,
                    check="price_consistency",
                )
            )
            validation.failed_checks.append("price_consistency")
        elif max_deviation > warning:
            divergent = [p for p in pairs if p.deviation > warning]
            validation.findings.append(
                self.finding(
                    Severity.WARNING,
                    f"Price discrepancy of {max_deviation * 100:.2f}% exceeds "
                    f"{warning * 100:.2f}% ({self._describe(divergent)})",
                    providers_in(divergent),
                    metric=max_deviation * 100,
                    check="price_consistency",
                )
            )
            validation.failed_checks.append("price_consistency")
        else:
            validation.passed_checks.append("price_consistency")

    def _check_volume(
        self,
        volumes: list[tuple[str, float]],
        validation: CategoryValidation,
    ) -> None:
        if len(volumes) < 2:
            return

        threshold = self.settings.volume_warning_threshold
        pairs = pairwise_deviations(volumes)
        max_deviation = max(p.deviation for p in pairs)

        if max_deviation > threshold:
            divergent = [p for p in pairs if p.deviation > threshold]
            validation.findings.append(
                self.finding(
                    Severity.WARNING,
                    f"Volume discrepancy of {max_deviation * 100:.2f}% exceeds "
                    f"{threshold * 100:.2f}% ({self._describe(divergent)})",
                    providers_in(divergent),
                    metric=max_deviation * 100,
                    check="volume_consistency",
                )
            )
            validation.failed_checks.append("volume_consistency")
        else:
            validation.passed_checks.append("volume_consistency")

    def _check_arbitrage(
        self,
        prices: list[tuple[str, float]],
        spread: float,
        validation: CategoryValidation,
    ) -> None:
        if not (self.settings.arbitrage_threshold <= spread <= self.settings.price_fatal_threshold):
            return

        low_provider, low_price = min(prices, key=lambda item: item[1])
        high_provider, high_price = max(prices, key=lambda item: item[1])
        validation.findings.append(
            self.finding(
                Severity.INFO,
                f"Possible arbitrage: {spread * 100:.2f}% spread, buy on {low_provider} at "
                f"${low_price:,.2f}, sell on {high_provider} at ${high_price:,.2f}",
                [low_provider, high_provider],
                metric=spread * 100,
                check="arbitrage_detection",
            )
        )

    @staticmethod
    def _describe(pairs: list[PairwiseDeviation]) -> str:
        return ", ".join(f"{p.first} vs {p.second}: {p.deviation * 100:.2f}%" for p in pairs)

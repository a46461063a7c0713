# src/veritas/validators/news_validator.py
"""News headline validation against on-chain activity."""

import logging
from datetime import timedelta, timezone
from typing import Optional

from veritas.analyzers.sentiment_classifier import (
    KeywordSentimentClassifier,
    SentimentBreakdown,
    SentimentClassifier,
    SentimentLabel,
)
from veritas.models.context import StageContext
from veritas.models.data_source import Category, DataSourceResult
from veritas.models.findings import CategoryValidation, Severity
from veritas.models.payloads import NewsArticle
from veritas.validators.base import CategoryValidator
from veritas.validators.settings import VeritasSettings

logger = logging.getLogger(__name__)


class NewsValidator(CategoryValidator):
    """Classifies headlines and checks them against exchange flows.

    Score components:
        clarity     30  share of the dominant label
        diversity   20  distinct sources, saturating at news_source_saturation
        recency     20  share of articles published within news_recency_hours
        confidence  20  classifier confidence
        alignment   10  headline tone agrees with on-chain flow direction
    """

    category = Category.NEWS

    def __init__(
        self,
        settings: VeritasSettings | None = None,
        classifier: SentimentClassifier | None = None,
    ):
        super().__init__(settings)
        self.classifier = classifier or KeywordSentimentClassifier()

    def _validate(
        self,
        ok: list[DataSourceResult],
        results: list[DataSourceResult],
        context: StageContext,
    ) -> CategoryValidation:
        articles = self._unique_articles(ok)
        if not articles:
            logger.warning(f"No news articles for {context.symbol}")
            return self.no_data(results, "news")

        validation = CategoryValidation(category=self.category, score=100.0)
        cap = self.check_corroboration(
            ok, results, self.settings.min_news_sources, "news", validation
        )
        providers = [r.provider_id for r in ok]

        breakdown = self.classifier.classify([a.title for a in articles])
        validation.findings.append(
            self.finding(
                Severity.INFO,
                f"News sentiment across {breakdown.total} headlines: "
                f"{breakdown.bullish_percentage:.0f}% bullish, "
                f"{breakdown.bearish_percentage:.0f}% bearish, "
                f"{breakdown.neutral_percentage:.0f}% neutral ({breakdown.method} classification)",
                providers,
                metric=breakdown.average_score,
                check="news_sentiment",
            )
        )

        net_flow = context.consensus(Category.ONCHAIN, "net_flow_usd")
        if net_flow is None:
            validation.findings.append(
                self.finding(
                    Severity.WARNING,
                    "On-chain data unavailable; news cannot be checked against exchange flows",
                    providers,
                    check="onchain_data_availability",
                )
            )
            validation.failed_checks.append("onchain_data_availability")
        else:
            self._check_onchain_alignment(breakdown, net_flow, providers, validation)

        base = self._base_score(breakdown, articles, ok, net_flow)
        validation.consensus["bullish_percentage"] = breakdown.bullish_percentage
        validation.consensus["bearish_percentage"] = breakdown.bearish_percentage
        validation.consensus["base_score"] = base

        validation.score = self.penalized_score(base, validation, cap)
        logger.info(
            f"News validation for {context.symbol}: {len(articles)} headlines, "
            f"score={validation.score:.0f}"
        )
        return validation

    @staticmethod
    def _unique_articles(ok: list[DataSourceResult]) -> list[NewsArticle]:
        seen: dict[str, NewsArticle] = {}
        for result in ok:
            for article in result.payload.articles:
                seen.setdefault(article.title.strip().lower(), article)
        return list(seen.values())

    def _check_onchain_alignment(
        self,
        breakdown: SentimentBreakdown,
        net_flow: float,
        providers: list[str],
        validation: CategoryValidation,
    ) -> None:
        share = self.settings.news_divergence_share

        if breakdown.bearish_percentage > share and net_flow > 0:
            description = (
                f"News-onchain divergence: {breakdown.bearish_percentage:.0f}% bearish headlines "
                f"while exchange flows show accumulation (net outflow ${net_flow / 1e6:,.1f}M)"
            )
            metric = breakdown.bearish_percentage
        elif breakdown.bullish_percentage > share and net_flow < 0:
            description = (
                f"News-onchain divergence: {breakdown.bullish_percentage:.0f}% bullish headlines "
                f"while exchange flows show distribution (net inflow ${abs(net_flow) / 1e6:,.1f}M)"
            )
            metric = breakdown.bullish_percentage
        else:
            validation.findings.append(
                self.finding(
                    Severity.INFO,
                    "News sentiment and on-chain activity are consistent",
                    providers,
                    check="news_onchain_alignment",
                )
            )
            validation.passed_checks.append("news_onchain_alignment")
            return

        validation.findings.append(
            self.finding(
                Severity.WARNING,
                description,
                providers,
                metric=metric,
                check="news_onchain_alignment",
            )
        )
        validation.failed_checks.append("news_onchain_alignment")

    def _base_score(
        self,
        breakdown: SentimentBreakdown,
        articles: list[NewsArticle],
        ok: list[DataSourceResult],
        net_flow: Optional[float],
    ) -> float:
        dominant = max(
            breakdown.bullish_percentage,
            breakdown.bearish_percentage,
            breakdown.neutral_percentage,
        )
        clarity = dominant / 100 * 30

        sources = len({a.source for a in articles})
        diversity = min(sources / self.settings.news_source_saturation * 20, 20.0)

        # Recency is measured from fetch time so results are reproducible
        reference = max(r.fetched_at for r in ok)
        window = timedelta(hours=self.settings.news_recency_hours)
        recent = 0
        for article in articles:
            if article.published_at is None:
                continue
            published = article.published_at
            if published.tzinfo is None:
                published = published.replace(tzinfo=timezone.utc)
            if reference - published < window:
                recent += 1
        recency = min(recent / len(articles) * 20, 20.0)

        confidence = breakdown.confidence / 100 * 20

        flow = net_flow or 0.0
        overall = breakdown.overall
        aligned = (
            overall == SentimentLabel.NEUTRAL
            or (overall == SentimentLabel.BULLISH and flow > 0)
            or (overall == SentimentLabel.BEARISH and flow < 0)
        )
        alignment = 10.0 if aligned else 0.0

        return round(min(clarity + diversity + recency + confidence + alignment, 100.0), 2)

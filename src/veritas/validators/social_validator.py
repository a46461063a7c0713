# src/veritas/validators/social_validator.py
"""Social sentiment validation.

Detects logical impossibilities in social data and cross-checks numeric
sentiment scores against each other and against a classification of the raw
posts. Disagreement here is WARNING-level: social data is noisy.
"""

import logging
from itertools import combinations

from veritas.analyzers.sentiment_classifier import (
    KeywordSentimentClassifier,
    SentimentBreakdown,
    SentimentClassifier,
)
from veritas.models.context import StageContext
from veritas.models.data_source import Category, DataSourceResult
from veritas.models.findings import CategoryValidation, Severity
from veritas.validators.base import CategoryValidator, weighted_mean
from veritas.validators.settings import VeritasSettings

logger = logging.getLogger(__name__)


class SocialValidator(CategoryValidator):
    """Validates sentiment reported by social providers."""

    category = Category.SOCIAL

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
        if not ok:
            logger.warning(f"No social data for {context.symbol}")
            return self.no_data(results, "social")

        validation = CategoryValidation(category=self.category, score=100.0)
        cap = self.check_corroboration(
            ok, results, self.settings.min_social_sources, "social", validation
        )

        if self._check_impossibility(ok, validation):
            validation.score = 0.0
            return validation

        breakdowns = self._classify_posts(ok)
        self._check_text_consistency(ok, breakdowns, validation)
        self._check_mismatch(ok, validation)

        scores = [(r.provider_id, r.payload.sentiment_score) for r in ok if r.payload.sentiment_score is not None]
        if scores:
            validation.consensus["sentiment_score"] = weighted_mean(scores, context)
        if breakdowns:
            text_scores = [b.average_score for b in breakdowns.values()]
            # Rescale -100..100 to the 0..100 sentiment scale
            validation.consensus["text_sentiment_score"] = 50 + sum(text_scores) / len(text_scores) / 2

        validation.score = self.penalized_score(100.0, validation, cap)
        return validation

    def _check_impossibility(self, ok: list[DataSourceResult], validation: CategoryValidation) -> bool:
        """FATAL when a provider reports sentiment without any mentions."""
        band = self.settings.sentiment_neutral_band
        impossible = [
            r
            for r in ok
            if r.payload.mention_count == 0
            and r.payload.sentiment_score is not None
            and abs(r.payload.sentiment_score - 50) > band
        ]
        for r in impossible:
            validation.findings.append(
                self.finding(
                    Severity.FATAL,
                    f"{r.provider_id} reports sentiment {r.payload.sentiment_score:.0f} from zero "
                    f"mentions; sentiment cannot exist without mentions",
                    [r.provider_id],
                    metric=r.payload.sentiment_score,
                    check="social_impossibility",
                )
            )
        if impossible:
            validation.failed_checks.append("social_impossibility")
            return True
        validation.passed_checks.append("social_impossibility")
        return False

    def _classify_posts(self, ok: list[DataSourceResult]) -> dict[str, SentimentBreakdown]:
        minimum = self.settings.min_posts_for_classification
        return {
            r.provider_id: self.classifier.classify(list(r.payload.posts))
            for r in ok
            if len(r.payload.posts) >= minimum
        }

    def _check_text_consistency(
        self,
        ok: list[DataSourceResult],
        breakdowns: dict[str, SentimentBreakdown],
        validation: CategoryValidation,
    ) -> None:
        """WARNING when a numeric score contradicts the tone of another provider's posts."""
        if not breakdowns:
            return

        share = self.settings.overwhelming_text_share
        before = len(validation.findings)
        for scored in ok:
            score = scored.payload.sentiment_score
            if score is None:
                continue
            for text_provider, breakdown in breakdowns.items():
                if score >= self.settings.bullish_score_threshold and breakdown.bearish_percentage >= share:
                    tone, pct, direction = "bearish", breakdown.bearish_percentage, "bullish"
                elif score <= self.settings.bearish_score_threshold and breakdown.bullish_percentage >= share:
                    tone, pct, direction = "bullish", breakdown.bullish_percentage, "bearish"
                else:
                    continue
                validation.findings.append(
                    self.finding(
                        Severity.WARNING,
                        f"Logical inconsistency: {scored.provider_id} scores sentiment {direction} "
                        f"({score:.0f}) but {pct:.0f}% of {text_provider} posts read {tone} "
                        f"({breakdown.method} classification)",
                        [scored.provider_id, text_provider],
                        metric=pct,
                        check="sentiment_text_consistency",
                    )
                )

        if len(validation.findings) > before:
            validation.failed_checks.append("sentiment_text_consistency")
        else:
            validation.passed_checks.append("sentiment_text_consistency")

    def _check_mismatch(self, ok: list[DataSourceResult], validation: CategoryValidation) -> None:
        """WARNING when two numeric sentiment scores differ by more than the threshold."""
        scored = [(r.provider_id, r.payload.sentiment_score) for r in ok if r.payload.sentiment_score is not None]
        if len(scored) < 2:
            return

        threshold = self.settings.sentiment_mismatch_threshold
        gaps = [(a, b, abs(a[1] - b[1])) for a, b in combinations(scored, 2)]
        divergent = [g for g in gaps if g[2] > threshold]
        if not divergent:
            validation.passed_checks.append("sentiment_consistency")
            return

        worst = max(g[2] for g in divergent)
        providers: dict[str, None] = {}
        for a, b, _ in divergent:
            providers.setdefault(a[0])
            providers.setdefault(b[0])
        detail = ", ".join(f"{a[0]} ({a[1]:.0f}) vs {b[0]} ({b[1]:.0f})" for a, b, _ in divergent)
        validation.findings.append(
            self.finding(
                Severity.WARNING,
                f"Sentiment mismatch of {worst:.0f} points exceeds {threshold:.0f}: {detail}",
                tuple(providers),
                metric=worst,
                check="sentiment_consistency",
            )
        )
        validation.failed_checks.append("sentiment_consistency")

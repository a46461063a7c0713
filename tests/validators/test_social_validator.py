"""Tests for SocialValidator."""

from unittest.mock import MagicMock

import pytest

from veritas.analyzers import SentimentBreakdown, SentimentLabel
from veritas.models import Category, DataSourceResult, Severity, SocialPayload, StageContext
from veritas.validators import SocialValidator


def social(provider: str, score: float | None = None, mentions: int | None = 100, posts=()) -> DataSourceResult:
    return DataSourceResult.ok(
        Category.SOCIAL,
        provider,
        SocialPayload(sentiment_score=score, mention_count=mentions, posts=tuple(posts)),
    )


def make_context() -> StageContext:
    return StageContext.build("BTC", {}, {})


@pytest.fixture
def validator():
    return SocialValidator()


class TestSentimentAgreement:
    def test_close_scores_pass(self, validator):
        validation = validator.validate([social("a", 60), social("b", 55)], make_context())

        assert validation.score == 100.0
        assert validation.findings == []
        assert "sentiment_consistency" in validation.passed_checks
        assert validation.consensus["sentiment_score"] == pytest.approx(57.5)

    def test_mismatch_warns(self, validator):
        validation = validator.validate([social("a", 80), social("b", 40)], make_context())

        assert len(validation.findings) == 1
        finding = validation.findings[0]
        assert finding.severity == Severity.WARNING
        assert finding.check == "sentiment_consistency"
        assert finding.metric == pytest.approx(40.0)
        assert finding.involved_providers == ("a", "b")
        assert validation.score == 85.0

    def test_mismatch_at_threshold_passes(self, validator):
        validation = validator.validate([social("a", 80), social("b", 50)], make_context())

        assert validation.count(Severity.WARNING) == 0


class TestImpossibility:
    def test_sentiment_without_mentions_is_fatal(self, validator):
        results = [social("a", 75, mentions=0), social("b", 60)]

        validation = validator.validate(results, make_context())

        assert validation.has_fatal
        assert validation.score == 0.0
        assert validation.fatal_finding.check == "social_impossibility"
        assert validation.fatal_finding.involved_providers == ("a",)

    def test_neutral_score_without_mentions_is_allowed(self, validator):
        results = [social("a", 52, mentions=0), social("b", 55)]

        validation = validator.validate(results, make_context())

        assert not validation.has_fatal
        assert "social_impossibility" in validation.passed_checks


class TestTextConsistency:
    def test_bullish_score_against_bearish_posts(self, validator):
        results = [
            social("scores", 75),
            social("posts", None, mentions=3, posts=["Exchange hacked", "Prices crash", "Scam warning"]),
        ]

        validation = validator.validate(results, make_context())

        warnings = [f for f in validation.findings if f.check == "sentiment_text_consistency"]
        assert len(warnings) == 1
        assert warnings[0].involved_providers == ("scores", "posts")
        assert warnings[0].metric == pytest.approx(100.0)
        assert validation.score == 85.0
        assert validation.consensus["text_sentiment_score"] < 50

    def test_bearish_score_against_bullish_posts(self, validator):
        results = [
            social("scores", 25),
            social("posts", None, mentions=3, posts=["Rally continues", "Breakout to the moon", "Adoption surge"]),
        ]

        validation = validator.validate(results, make_context())

        warnings = [f for f in validation.findings if f.check == "sentiment_text_consistency"]
        assert len(warnings) == 1
        assert "scores sentiment bearish (25)" in warnings[0].description
        assert "100% of posts posts read bullish" in warnings[0].description
        assert warnings[0].involved_providers == ("scores", "posts")
        assert validation.score == 85.0
        assert validation.consensus["text_sentiment_score"] > 50

    def test_too_few_posts_are_not_classified(self, validator):
        results = [
            social("scores", 75),
            social("posts", None, mentions=2, posts=["Exchange hacked", "Prices crash"]),
        ]

        validation = validator.validate(results, make_context())

        assert validation.findings == []
        assert "text_sentiment_score" not in validation.consensus

    def test_uses_injected_classifier(self):
        classifier = MagicMock()
        classifier.classify.return_value = SentimentBreakdown(
            labels=[SentimentLabel.BULLISH] * 3, scores=[50, 50, 50], confidence=90, method="mock"
        )
        validator = SocialValidator(classifier=classifier)
        results = [social("scores", 30), social("posts", 45, posts=["a", "b", "c"])]

        validation = validator.validate(results, make_context())

        classifier.classify.assert_called_once_with(["a", "b", "c"])
        warning = next(f for f in validation.findings if f.check == "sentiment_text_consistency")
        assert "mock classification" in warning.description


class TestCorroboration:
    def test_single_provider_is_capped(self, validator):
        validation = validator.validate([social("a", 60)], make_context())

        assert validation.score == 50.0
        assert validation.findings[0].check == "corroboration"

    def test_no_data(self, validator):
        results = [DataSourceResult.failed(Category.SOCIAL, "a", "HTTP 500")]

        validation = validator.validate(results, make_context())

        assert validation.score == 0.0
        assert validation.findings[0].check == "social_data_availability"

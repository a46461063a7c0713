# src/veritas/analyzers/sentiment_classifier.py
"""Secondary sentiment classification of raw post and headline text."""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence


class SentimentLabel(str, Enum):
    """Direction of a piece of text."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


@dataclass
class SentimentBreakdown:
    """Aggregate classification of a batch of texts.

    Attributes:
        labels: One label per classified text, in input order.
        scores: One score per text, -100 (bearish) to +100 (bullish).
        confidence: Classifier confidence (0-100).
        method: Name of the classifier that produced the breakdown.
    """

    labels: list[SentimentLabel] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)
    confidence: float = 0.0
    method: str = "none"

    @property
    def total(self) -> int:
        return len(self.labels)

    def percentage(self, label: SentimentLabel) -> float:
        """Share of texts with the given label, 0-100."""
        if not self.labels:
            return 0.0
        return 100.0 * sum(1 for l in self.labels if l == label) / len(self.labels)

    @property
    def bullish_percentage(self) -> float:
        return self.percentage(SentimentLabel.BULLISH)

    @property
    def bearish_percentage(self) -> float:
        return self.percentage(SentimentLabel.BEARISH)

    @property
    def neutral_percentage(self) -> float:
        return self.percentage(SentimentLabel.NEUTRAL)

    @property
    def average_score(self) -> float:
        if not self.scores:
            return 0.0
        return sum(self.scores) / len(self.scores)

    @property
    def overall(self) -> SentimentLabel:
        """Majority label, NEUTRAL unless one side holds more than half."""
        if self.bullish_percentage > 50:
            return SentimentLabel.BULLISH
        if self.bearish_percentage > 50:
            return SentimentLabel.BEARISH
        return SentimentLabel.NEUTRAL


class SentimentClassifier(ABC):
    """Classifies short texts as bullish, bearish or neutral."""

    name: str = "classifier"

    @abstractmethod
    def classify(self, texts: Sequence[str]) -> SentimentBreakdown:
        """Classify texts.

        Args:
            texts: Posts or headlines.

        Returns:
            SentimentBreakdown with one label and score per text.
        """
        pass


class KeywordSentimentClassifier(SentimentClassifier):
    """Keyword-count classifier. Deterministic and offline."""

    name = "keyword"

    DEFAULT_BULLISH = (
        "bullish", "moon", "pump", "buy", "long", "hodl", "rocket", "breakout",
        "rally", "surge", "gains", "soars", "adoption", "partnership", "approval",
        "upgrade", "record", "milestone", "growth", "accumulate",
    )
    DEFAULT_BEARISH = (
        "bearish", "dump", "sell", "short", "crash", "scam", "rug", "loss",
        "plunge", "falls", "drops", "decline", "crackdown", "ban", "hack",
        "fraud", "lawsuit", "collapse", "liquidation", "fear",
    )

    def __init__(
        self,
        bullish_keywords: Sequence[str] | None = None,
        bearish_keywords: Sequence[str] | None = None,
        step: float = 10.0,
        max_score: float = 80.0,
        base_score: float = 40.0,
        confidence: float = 50.0,
    ):
        self.bullish_keywords = tuple(bullish_keywords or self.DEFAULT_BULLISH)
        self.bearish_keywords = tuple(bearish_keywords or self.DEFAULT_BEARISH)
        self.step = step
        self.max_score = max_score
        self.base_score = base_score
        self.confidence = confidence
        self._bullish_re = self._compile(self.bullish_keywords)
        self._bearish_re = self._compile(self.bearish_keywords)

    @staticmethod
    def _compile(keywords: Sequence[str]) -> re.Pattern:
        alternation = "|".join(re.escape(k) for k in keywords)
        return re.compile(rf"\b(?:{alternation})(?:s|es|ed|ing)?\b", re.IGNORECASE)

    def classify_one(self, text: str) -> tuple[SentimentLabel, float]:
        """Classify a single text and return (label, score)."""
        bullish = len(self._bullish_re.findall(text))
        bearish = len(self._bearish_re.findall(text))

        if bullish > bearish:
            return SentimentLabel.BULLISH, min(self.max_score, self.base_score + bullish * self.step)
        if bearish > bullish:
            return SentimentLabel.BEARISH, max(-self.max_score, -self.base_score - bearish * self.step)
        return SentimentLabel.NEUTRAL, 0.0

    def classify(self, texts: Sequence[str]) -> SentimentBreakdown:
        labels: list[SentimentLabel] = []
        scores: list[float] = []
        for text in texts:
            label, score = self.classify_one(text)
            labels.append(label)
            scores.append(score)

        return SentimentBreakdown(
            labels=labels,
            scores=scores,
            confidence=self.confidence if texts else 0.0,
            method=self.name,
        )

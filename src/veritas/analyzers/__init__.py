# src/veritas/analyzers/__init__.py
from .claude_classifier import ClaudeSentimentClassifier
from .sentiment_classifier import (
    KeywordSentimentClassifier,
    SentimentBreakdown,
    SentimentClassifier,
    SentimentLabel,
)

__all__ = [
    "ClaudeSentimentClassifier",
    "KeywordSentimentClassifier",
    "SentimentBreakdown",
    "SentimentClassifier",
    "SentimentLabel",
]

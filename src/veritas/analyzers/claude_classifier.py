# src/veritas/analyzers/claude_classifier.py
import json
import logging
import time
from typing import Sequence

from anthropic import Anthropic

from veritas.analyzers.sentiment_classifier import (
    KeywordSentimentClassifier,
    SentimentBreakdown,
    SentimentClassifier,
    SentimentLabel,
)

logger = logging.getLogger(__name__)


class ClaudeSentimentClassifier(SentimentClassifier):
    """Classifies texts with Claude, falling back to keywords on any failure.

    Note: Rate limiting via _enforce_rate_limit() is not thread-safe.
    Validation runs one classifier call at a time per pipeline run.
    """

    name = "claude"

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    DEFAULT_MAX_TOKENS = 2000
    MAX_TEXTS = 20

    CLASSIFY_PROMPT = '''Classify the sentiment of each numbered text about the cryptocurrency {symbol}.

Texts:
{texts}

Use "bullish" for text that is optimistic about price, "bearish" for text that is
pessimistic about price and "neutral" otherwise. Score each text from -100
(extremely bearish) to 100 (extremely bullish).

Respond with a JSON object containing:
- items: list with one object per text, in order, each with "label" and "score"
- confidence: number 0-100 for your overall confidence

Respond ONLY with valid JSON, no other text.'''

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        max_tokens: int | None = None,
        rate_limit_per_minute: int = 20,
        symbol: str = "crypto",
        fallback: SentimentClassifier | None = None,
    ):
        self.client = Anthropic(api_key=api_key)
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.rate_limit_per_minute = rate_limit_per_minute
        self.symbol = symbol
        self.fallback = fallback or KeywordSentimentClassifier()
        self._last_call_time: float | None = None

    def classify(self, texts: Sequence[str]) -> SentimentBreakdown:
        texts = list(texts)[: self.MAX_TEXTS]
        if not texts:
            return SentimentBreakdown(method=self.name)

        self._enforce_rate_limit()

        try:
            prompt = self.CLASSIFY_PROMPT.format(
                symbol=self.symbol,
                texts="\n".join(f"{i + 1}. {t[:200]}" for i, t in enumerate(texts)),
            )
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )

            result_text = response.content[0].text.strip()

            # Strip markdown code blocks if present
            if result_text.startswith("```"):
                lines = result_text.split("\n")
                if lines[0].startswith("```"):
                    lines = lines[1:]
                if lines and lines[-1].strip() == "```":
                    lines = lines[:-1]
                result_text = "\n".join(lines)

            data = json.loads(result_text)
            items = data["items"]
            if len(items) != len(texts):
                raise ValueError(f"expected {len(texts)} items, got {len(items)}")

            labels = [SentimentLabel(item["label"]) for item in items]
            scores = [max(-100.0, min(100.0, float(item["score"]))) for item in items]
            confidence = max(0.0, min(100.0, float(data.get("confidence", 50))))

            return SentimentBreakdown(
                labels=labels,
                scores=scores,
                confidence=confidence,
                method=self.name,
            )

        except Exception as e:
            logger.warning(f"Claude classification failed, using {self.fallback.name}: {e}")
            return self.fallback.classify(texts)

    def _enforce_rate_limit(self) -> None:
        """Enforce rate limiting between API calls."""
        if self._last_call_time is not None:
            min_interval = 60.0 / self.rate_limit_per_minute
            elapsed = time.time() - self._last_call_time
            if elapsed < min_interval:
                time.sleep(min_interval - elapsed)
        self._last_call_time = time.time()

# src/veritas/reporting/metrics.py
"""In-memory metrics over validation runs."""
import logging
from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from veritas.models.data_source import Category
from veritas.models.findings import Severity

if TYPE_CHECKING:
    from veritas.orchestrator.models import OrchestrationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationAttempt:
    """Metrics extracted from one orchestration result."""

    symbol: str
    success: bool
    completed: bool
    halted: bool
    timed_out: bool
    duration_ms: int
    confidence_score: Optional[float]
    fatal_findings: int
    warning_findings: int
    info_findings: int
    completed_stages: tuple[Category, ...]
    errors: tuple[str, ...]
    started_at: Optional[datetime] = None

    @classmethod
    def from_result(cls, result: "OrchestrationResult") -> "ValidationAttempt":
        counts = Counter(
            finding.severity
            for validation in result.validations.values()
            for finding in validation.findings
        )
        score = result.confidence_score
        return cls(
            symbol=result.symbol,
            success=result.success,
            completed=result.completed,
            halted=result.halted,
            timed_out=result.timed_out,
            duration_ms=result.duration_ms,
            confidence_score=score.overall_score if score is not None else None,
            fatal_findings=counts[Severity.FATAL],
            warning_findings=counts[Severity.WARNING],
            info_findings=counts[Severity.INFO],
            completed_stages=tuple(result.completed_stages),
            errors=tuple(error.message for error in result.errors),
            started_at=result.started_at,
        )


@dataclass
class AggregatedMetrics:
    """Totals and averages over a set of validation attempts."""

    total_attempts: int
    successful_attempts: int
    failed_attempts: int
    halted_attempts: int
    timed_out_attempts: int

    average_duration_ms: float
    average_confidence: float

    fatal_findings: int
    warning_findings: int
    info_findings: int

    most_common_errors: list[tuple[str, int]]
    symbols_validated: list[str]


class ValidationMetrics:
    """Keeps the most recent validation attempts and aggregates them.

    Feed it every OrchestrationResult; the oldest attempts are dropped once
    max_attempts is reached.
    """

    def __init__(self, max_attempts: int = 1000):
        self._attempts: deque[ValidationAttempt] = deque(maxlen=max_attempts)

    def __len__(self) -> int:
        return len(self._attempts)

    def record(self, result: "OrchestrationResult") -> ValidationAttempt:
        attempt = ValidationAttempt.from_result(result)
        self._attempts.append(attempt)

        confidence = f"{attempt.confidence_score:.1f}%" if attempt.confidence_score is not None else "n/a"
        logger.info(
            f"Validation attempt for {attempt.symbol}: success={attempt.success}, "
            f"duration={attempt.duration_ms}ms, confidence={confidence}"
        )
        return attempt

    def for_symbol(self, symbol: str, limit: int = 10) -> list[ValidationAttempt]:
        """Most recent attempts for a symbol, newest first."""
        matching = [a for a in reversed(self._attempts) if a.symbol == symbol]
        return matching[:limit]

    def aggregate(self, since: Optional[datetime] = None, top_errors: int = 10) -> AggregatedMetrics:
        """Aggregate the recorded attempts.

        Args:
            since: Only count attempts started at or after this time.
            top_errors: Number of distinct error messages to report.

        Returns:
            AggregatedMetrics; all zero when nothing matches.
        """
        attempts = [
            a for a in self._attempts
            if since is None or (a.started_at is not None and a.started_at >= since)
        ]
        if not attempts:
            return self._empty_metrics()

        total = len(attempts)
        successful = sum(1 for a in attempts if a.success)
        scores = [a.confidence_score for a in attempts if a.confidence_score is not None]
        errors = Counter(error for a in attempts for error in a.errors)

        symbols: list[str] = []
        for attempt in attempts:
            if attempt.symbol not in symbols:
                symbols.append(attempt.symbol)

        return AggregatedMetrics(
            total_attempts=total,
            successful_attempts=successful,
            failed_attempts=total - successful,
            halted_attempts=sum(1 for a in attempts if a.halted),
            timed_out_attempts=sum(1 for a in attempts if a.timed_out),
            average_duration_ms=sum(a.duration_ms for a in attempts) / total,
            average_confidence=sum(scores) / len(scores) if scores else 0.0,
            fatal_findings=sum(a.fatal_findings for a in attempts),
            warning_findings=sum(a.warning_findings for a in attempts),
            info_findings=sum(a.info_findings for a in attempts),
            most_common_errors=errors.most_common(top_errors),
            symbols_validated=symbols,
        )

    def _empty_metrics(self) -> AggregatedMetrics:
        return AggregatedMetrics(
            total_attempts=0,
            successful_attempts=0,
            failed_attempts=0,
            halted_attempts=0,
            timed_out_attempts=0,
            average_duration_ms=0.0,
            average_confidence=0.0,
            fatal_findings=0,
            warning_findings=0,
            info_findings=0,
            most_common_errors=[],
            symbols_validated=[],
        )

"""Tests for ValidationMetrics."""

from datetime import datetime, timedelta, timezone

import pytest

from veritas.models import Category, CategoryValidation, Severity, ValidationFinding
from veritas.orchestrator import OrchestrationResult, StageError
from veritas.reporting import ValidationAttempt, ValidationMetrics
from veritas.scoring import compute_confidence

START = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def make_result(
    symbol: str = "BTC",
    stages: int = 4,
    halted: bool = False,
    timed_out: bool = False,
    duration_ms: int = 100,
    errors: list[str] = (),
    findings: list[ValidationFinding] = (),
    started_at: datetime = START,
) -> OrchestrationResult:
    completed_stages = Category.ordered()[:stages]
    validations = {c: CategoryValidation(category=c, score=100.0) for c in completed_stages}
    for finding in findings:
        validations[finding.category].findings.append(finding)
    completed = stages == 4 and not halted and not timed_out
    return OrchestrationResult(
        symbol=symbol,
        success=completed,
        completed=completed,
        halted=halted,
        halt_reason="halted" if halted else None,
        timed_out=timed_out,
        progress=stages * 25,
        completed_stages=completed_stages,
        results={},
        validations=validations,
        confidence_score=compute_confidence(validations, completed_stages),
        duration_ms=duration_ms,
        errors=[StageError(stage=Category.MARKET, provider_id="p", message=m) for m in errors],
        started_at=started_at,
    )


class TestValidationAttempt:
    def test_from_result_counts_findings(self):
        findings = [
            ValidationFinding(Category.MARKET, Severity.FATAL, "gap"),
            ValidationFinding(Category.MARKET, Severity.INFO, "arbitrage"),
        ]

        attempt = ValidationAttempt.from_result(make_result(stages=1, halted=True, findings=findings))

        assert attempt.halted
        assert not attempt.success
        assert attempt.fatal_findings == 1
        assert attempt.warning_findings == 0
        assert attempt.info_findings == 1
        assert attempt.completed_stages == (Category.MARKET,)
        assert attempt.confidence_score == pytest.approx(25.0)


class TestValidationMetrics:
    def test_empty(self):
        summary = ValidationMetrics().aggregate()

        assert summary.total_attempts == 0
        assert summary.average_confidence == 0.0
        assert summary.most_common_errors == []

    def test_aggregate(self):
        metrics = ValidationMetrics()
        metrics.record(make_result(duration_ms=100))
        metrics.record(make_result("ETH", stages=1, halted=True, duration_ms=50, errors=["HTTP 503"]))
        metrics.record(
            make_result(stages=2, timed_out=True, duration_ms=300, errors=["HTTP 503", "timed out after 8s"])
        )

        summary = metrics.aggregate()

        assert summary.total_attempts == 3
        assert summary.successful_attempts == 1
        assert summary.failed_attempts == 2
        assert summary.halted_attempts == 1
        assert summary.timed_out_attempts == 1
        assert summary.average_duration_ms == pytest.approx(150.0)
        assert summary.average_confidence == pytest.approx((100 + 25 + 50) / 3)
        assert summary.most_common_errors == [("HTTP 503", 2), ("timed out after 8s", 1)]
        assert summary.symbols_validated == ["BTC", "ETH"]

    def test_aggregate_since(self):
        metrics = ValidationMetrics()
        metrics.record(make_result(started_at=START - timedelta(days=2)))
        metrics.record(make_result(started_at=START))

        assert metrics.aggregate(since=START - timedelta(hours=24)).total_attempts == 1

    def test_for_symbol_newest_first(self):
        metrics = ValidationMetrics()
        metrics.record(make_result(duration_ms=1))
        metrics.record(make_result("ETH"))
        metrics.record(make_result(duration_ms=2))

        attempts = metrics.for_symbol("BTC")

        assert [a.duration_ms for a in attempts] == [2, 1]
        assert len(metrics.for_symbol("BTC", limit=1)) == 1

    def test_keeps_most_recent_attempts(self):
        metrics = ValidationMetrics(max_attempts=2)
        for symbol in ("BTC", "ETH", "SOL"):
            metrics.record(make_result(symbol))

        assert len(metrics) == 2
        assert metrics.aggregate().symbols_validated == ["ETH", "SOL"]

"""Tests for status messages and the data quality summary."""

from veritas.models import Category, CategoryValidation, Severity, ValidationFinding
from veritas.orchestrator import OrchestrationResult, StageError
from veritas.reporting import (
    Priority,
    Recommendation,
    ReliabilityGuidance,
    generate_data_quality_summary,
    get_status_message,
)
from veritas.scoring import compute_confidence


def make_result(
    scores: dict[Category, float],
    findings: list[ValidationFinding] = (),
    completed: bool = True,
    halted: bool = False,
    timed_out: bool = False,
    errors: list[StageError] = (),
) -> OrchestrationResult:
    validations = {c: CategoryValidation(category=c, score=s) for c, s in scores.items()}
    for finding in findings:
        validations[finding.category].findings.append(finding)
    stages = [c for c in Category.ordered() if c in scores]
    return OrchestrationResult(
        symbol="BTC",
        success=completed and not halted and not timed_out,
        completed=completed,
        halted=halted,
        halt_reason="Fatal error in market validation: prices diverge" if halted else None,
        timed_out=timed_out,
        progress=len(stages) * 25,
        completed_stages=stages,
        results={},
        validations=validations,
        confidence_score=compute_confidence(validations, stages),
        duration_ms=1234,
        errors=list(errors),
    )


ALL_100 = {c: 100.0 for c in Category.ordered()}


class TestGetStatusMessage:
    def test_complete(self):
        message = get_status_message(make_result(ALL_100))

        assert message == "Validation complete with excellent confidence (100.00%)"

    def test_poor_confidence_adds_caution(self):
        message = get_status_message(make_result({c: 20.0 for c in Category.ordered()}))

        assert message.endswith("Use caution.")

    def test_timed_out(self):
        result = make_result({Category.MARKET: 100.0}, completed=False, timed_out=True)

        message = get_status_message(result)

        assert "timed out after 1234ms" in message
        assert "25% complete" in message

    def test_halted(self):
        result = make_result({Category.MARKET: 0.0}, completed=False, halted=True)

        assert get_status_message(result).startswith("Validation halted: Fatal error in market")


class TestGenerateDataQualitySummary:
    def test_groups_findings_by_severity(self):
        findings = [
            ValidationFinding(Category.MARKET, Severity.WARNING, "Price discrepancy of 2.00%", ("a", "b")),
            ValidationFinding(Category.MARKET, Severity.INFO, "Possible arbitrage", ("a", "b")),
            ValidationFinding(Category.NEWS, Severity.WARNING, "News-onchain divergence"),
        ]

        summary = generate_data_quality_summary(make_result(ALL_100, findings))
        lines = summary.splitlines()

        assert lines[0] == "Data quality summary for BTC"
        assert "Status: complete" in lines
        assert "FATAL (0):" in lines
        assert "WARNING (2):" in lines
        assert "  - market: Price discrepancy of 2.00% [a, b]" in lines
        assert "  - news: News-onchain divergence" in lines
        assert lines.index("WARNING (2):") < lines.index("INFO (1):")
        assert lines[-1].startswith("Recommendation:")

    def test_marks_missing_stages(self):
        result = make_result(
            {Category.MARKET: 100.0, Category.SOCIAL: 90.0}, completed=False, timed_out=True
        )

        summary = generate_data_quality_summary(result)

        assert "  onchain: 0.00 (not completed)" in summary
        assert "Missing stages (scored 0): onchain, news" in summary
        assert "Status: timed out (50% complete)" in summary

    def test_lists_provider_errors(self):
        errors = [
            StageError(stage=Category.MARKET, provider_id="binance", message="HTTP 503"),
            StageError(stage=Category.SOCIAL, provider_id=None, message="stage failure"),
        ]

        summary = generate_data_quality_summary(make_result(ALL_100, errors=errors))

        assert "Provider errors (1):" in summary
        assert "  - market/binance: HTTP 503" in summary

    def test_identical_results_render_identically(self):
        findings = [ValidationFinding(Category.SOCIAL, Severity.WARNING, "Sentiment mismatch")]

        first = generate_data_quality_summary(make_result(ALL_100, findings))
        second = generate_data_quality_summary(make_result(ALL_100, findings))

        assert first == second

    def test_renders_guidance_and_recommendations(self):
        result = make_result(ALL_100)
        result.reliability_guidance = ReliabilityGuidance(
            overall_reliability="fair",
            can_proceed_with_analysis=False,
            warnings=("2 fatal finding(s) detected",),
            weaknesses=("Price discrepancies detected across sources",),
        )
        result.recommendations = [
            Recommendation(
                priority=Priority.HIGH,
                title="Price discrepancy detected",
                description="Price deviation of 7.00% detected across providers.",
                action="Verify price data from additional sources.",
                affected_providers=("a", "b"),
            )
        ]

        lines = generate_data_quality_summary(result).splitlines()

        assert "Reliability: fair (can proceed with analysis: no)" in lines
        assert lines[lines.index("Warnings:") + 1] == "  - 2 fatal finding(s) detected"
        assert "Strengths:" not in lines
        assert "Weaknesses:" in lines
        assert "Recommendations (1):" in lines
        assert "  - [high] Price discrepancy detected: Verify price data from additional sources. [a, b]" in lines
        assert lines[-1].startswith("Recommendation:")

# src/veritas/reporting/summary.py
"""Human-readable renderings of an orchestration result."""

from typing import TYPE_CHECKING

from veritas.models.data_source import Category
from veritas.models.findings import Severity
from veritas.scoring.confidence import confidence_level, confidence_recommendation

if TYPE_CHECKING:
    from veritas.orchestrator.models import OrchestrationResult


SEVERITY_ORDER = (Severity.FATAL, Severity.WARNING, Severity.INFO)


def get_status_message(result: "OrchestrationResult") -> str:
    """One-line status of a run."""
    if result.timed_out:
        return (
            f"Validation timed out after {result.duration_ms}ms. "
            f"Partial results available ({result.progress}% complete)."
        )
    if result.halted:
        return f"Validation halted: {result.halt_reason}"
    if not result.completed:
        return f"Validation incomplete ({result.progress}% complete)"
    if result.confidence_score is None:
        return "Validation complete"

    confidence = result.confidence_score.overall_score
    level = confidence_level(confidence)
    message = f"Validation complete with {level} confidence ({confidence:.2f}%)"
    if level == "poor":
        message += ". Use caution."
    return message


def generate_data_quality_summary(result: "OrchestrationResult") -> str:
    """Render findings grouped by severity, with per-category scores.

    The text depends only on the result's findings, scores and stage
    outcomes, never on timing, so identical runs render identically.
    """
    score = result.confidence_score
    lines = [f"Data quality summary for {result.symbol}"]

    if result.timed_out:
        lines.append(f"Status: timed out ({result.progress}% complete)")
    elif result.halted:
        lines.append(f"Status: halted ({result.halt_reason})")
    elif result.completed:
        lines.append("Status: complete")
    else:
        lines.append(f"Status: incomplete ({result.progress}% complete)")

    if score is None:
        lines.append("Overall confidence: unavailable")
        return "\n".join(lines)

    lines.append(
        f"Overall confidence: {score.overall_score:.2f}% ({confidence_level(score.overall_score)})"
    )

    lines.append("Category scores:")
    for category in Category.ordered():
        value = score.per_category_score.get(category, 0.0)
        suffix = " (not completed)" if category in score.missing_categories else ""
        lines.append(f"  {category.value}: {value:.2f}{suffix}")

    if score.missing_categories:
        missing = ", ".join(c.value for c in score.missing_categories)
        lines.append(f"Missing stages (scored 0): {missing}")

    for severity in SEVERITY_ORDER:
        findings = [f for f in score.findings if f.severity == severity]
        lines.append(f"{severity.value.upper()} ({len(findings)}):")
        if not findings:
            lines.append("  none")
        for finding in findings:
            providers = ""
            if finding.involved_providers:
                providers = f" [{', '.join(finding.involved_providers)}]"
            lines.append(f"  - {finding.category.value}: {finding.description}{providers}")

    provider_errors = [e for e in result.errors if e.provider_id is not None]
    if provider_errors:
        lines.append(f"Provider errors ({len(provider_errors)}):")
        for error in provider_errors:
            lines.append(f"  - {error.stage.value}/{error.provider_id}: {error.message}")

    guidance = result.reliability_guidance
    if guidance is not None:
        proceed = "yes" if guidance.can_proceed_with_analysis else "no"
        lines.append(f"Reliability: {guidance.overall_reliability} (can proceed with analysis: {proceed})")
        for label, items in (
            ("Warnings", guidance.warnings),
            ("Strengths", guidance.strengths),
            ("Weaknesses", guidance.weaknesses),
        ):
            if items:
                lines.append(f"{label}:")
                lines.extend(f"  - {item}" for item in items)

    if result.recommendations:
        lines.append(f"Recommendations ({len(result.recommendations)}):")
        for rec in result.recommendations:
            providers = f" [{', '.join(rec.affected_providers)}]" if rec.affected_providers else ""
            lines.append(f"  - [{rec.priority.value}] {rec.title}: {rec.action}{providers}")

    lines.append(f"Recommendation: {confidence_recommendation(score.overall_score)}")
    return "\n".join(lines)

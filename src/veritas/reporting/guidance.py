# src/veritas/reporting/guidance.py
"""Reliability guidance and prioritized recommendations for one run."""
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from veritas.models.data_source import Category
from veritas.models.findings import Severity, ValidationFinding

if TYPE_CHECKING:
    from veritas.orchestrator.models import OrchestrationResult


# Fewer completed stages than this is reported as incomplete coverage
MIN_COVERED_STAGES = 3

# Price deviation (percent) above which a discrepancy is high priority
CRITICAL_PRICE_DEVIATION = 5.0

STRENGTHS = {
    "price_consistency": "Price data consistent across sources",
    "volume_consistency": "Volume data consistent across sources",
    "sentiment_consistency": "Social sentiment validated across multiple sources",
    "market_to_chain_consistency": "On-chain data aligns with market activity",
    "news_onchain_alignment": "News sentiment agrees with on-chain flows",
}

WEAKNESSES = {
    "price_consistency": "Price discrepancies detected across sources",
    "volume_consistency": "Volume discrepancies detected across sources",
    "sentiment_consistency": "Social sentiment divergence detected",
    "sentiment_text_consistency": "Social sentiment scores contradict post content",
    "market_to_chain_consistency": "On-chain data inconsistent with market activity",
    "social_impossibility": "Social data contains logical impossibilities",
    "news_onchain_alignment": "News sentiment diverges from on-chain flows",
}


class Priority(str, Enum):
    """Urgency of a recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = (Priority.HIGH, Priority.MEDIUM, Priority.LOW)


@dataclass(frozen=True)
class Recommendation:
    """One actionable follow-up for the caller."""

    priority: Priority
    title: str
    description: str
    action: str
    affected_providers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReliabilityGuidance:
    """Whether a run's data can carry an analysis, and why.

    Attributes:
        overall_reliability: excellent / good / fair / poor / critical.
        can_proceed_with_analysis: No FATAL finding and a score of at least
            the proceed threshold.
        warnings: Conditions that undermine the result.
        strengths: Checks that passed, plus full coverage and trusted sources.
        weaknesses: Checks that failed, plus missing coverage.
    """

    overall_reliability: str
    can_proceed_with_analysis: bool
    warnings: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()


def reliability_band(score: float) -> str:
    if score >= 90:
        return "excellent"
    elif score >= 75:
        return "good"
    elif score >= 60:
        return "fair"
    elif score >= 40:
        return "poor"
    return "critical"


def _findings(result: "OrchestrationResult") -> list[ValidationFinding]:
    """Findings of the completed stages in pipeline order."""
    findings = []
    for category in Category.ordered():
        validation = result.validations.get(category)
        if validation is not None:
            findings.extend(validation.findings)
    return findings


def _check_names(result: "OrchestrationResult", attribute: str) -> list[str]:
    names: list[str] = []
    for category in Category.ordered():
        validation = result.validations.get(category)
        if validation is None:
            continue
        for name in getattr(validation, attribute):
            if name not in names:
                names.append(name)
    return names


def _providers(findings: Sequence[ValidationFinding]) -> tuple[str, ...]:
    seen: list[str] = []
    for finding in findings:
        for provider in finding.involved_providers:
            if provider not in seen:
                seen.append(provider)
    return tuple(seen)


def build_reliability_guidance(
    result: "OrchestrationResult",
    reliable_sources: Sequence[str] = (),
    proceed_threshold: float = 60.0,
) -> ReliabilityGuidance:
    """Summarize how far a run's data can be trusted.

    Args:
        result: Result of a run; its validations and confidence score are read.
        reliable_sources: Providers with a consistently good track record.
        proceed_threshold: Minimum confidence for can_proceed_with_analysis.
    """
    score = result.confidence_score.overall_score if result.confidence_score else 0.0
    findings = _findings(result)
    fatal = sum(1 for f in findings if f.severity == Severity.FATAL)
    warning = sum(1 for f in findings if f.severity == Severity.WARNING)
    covered = len(result.completed_stages)

    warnings = []
    if fatal:
        warnings.append(f"{fatal} fatal finding(s) detected, analysis reliability severely compromised")
    if warning > 2:
        warnings.append(f"{warning} warning(s) detected, data quality issues present")
    if score < 70:
        warnings.append("Overall data quality below recommended threshold (70%)")
    if result.timed_out:
        warnings.append(f"Run timed out with {result.progress}% of stages complete")
    if result.halted:
        warnings.append(f"Run halted: {result.halt_reason}")

    passed = _check_names(result, "passed_checks")
    failed = _check_names(result, "failed_checks")

    strengths = [STRENGTHS[name] for name in passed if name in STRENGTHS]
    if covered == len(Category):
        strengths.append("Complete data coverage across all data types")
    if reliable_sources:
        strengths.append(f"Consistently reliable sources: {', '.join(reliable_sources)}")

    weaknesses = [WEAKNESSES[name] for name in failed if name in WEAKNESSES]
    for category in Category.ordered():
        validation = result.validations.get(category)
        if validation is not None and "corroboration" in validation.failed_checks:
            weaknesses.append(f"Too few {category.value} sources to corroborate each other")
    if covered < MIN_COVERED_STAGES:
        weaknesses.append("Incomplete data coverage, missing data types")

    return ReliabilityGuidance(
        overall_reliability=reliability_band(score),
        can_proceed_with_analysis=fatal == 0 and score >= proceed_threshold,
        warnings=tuple(warnings),
        strengths=tuple(strengths),
        weaknesses=tuple(weaknesses),
    )


def _stage_recommendation(
    findings: list[ValidationFinding],
    title: str,
    fatal_action: str,
    action: str,
) -> Recommendation:
    has_fatal = any(f.is_fatal for f in findings)
    return Recommendation(
        priority=Priority.HIGH if has_fatal else Priority.MEDIUM,
        title=title,
        description=f"{len(findings)} issue(s) detected.",
        action=fatal_action if has_fatal else action,
        affected_providers=_providers(findings),
    )


def build_recommendations(
    result: "OrchestrationResult",
    unreliable_sources: Sequence[str] = (),
) -> list[Recommendation]:
    """Actionable follow-ups for a run, highest priority first.

    Args:
        result: Result of a run.
        unreliable_sources: Providers whose track record is below par.
    """
    findings = [f for f in _findings(result) if f.severity != Severity.INFO]
    recommendations = []

    fatal = [f for f in findings if f.is_fatal]
    if fatal:
        recommendations.append(
            Recommendation(
                priority=Priority.HIGH,
                title="Critical data quality issues detected",
                description=f"{len(fatal)} fatal finding(s) prevent reliable analysis.",
                action="Review fatal findings. Do not proceed with analysis until resolved.",
                affected_providers=_providers(fatal),
            )
        )

    price = [f for f in findings if f.check == "price_consistency"]
    if price:
        deviation = max(f.metric or 0.0 for f in price)
        recommendations.append(
            Recommendation(
                priority=Priority.HIGH if deviation > CRITICAL_PRICE_DEVIATION else Priority.MEDIUM,
                title="Price discrepancy detected",
                description=f"Price deviation of {deviation:.2f}% detected across providers.",
                action="Consensus price uses trust-weighted averaging. Investigate the diverging providers.",
                affected_providers=_providers(price),
            )
        )

    volume = [f for f in findings if f.check == "volume_consistency"]
    if volume:
        recommendations.append(
            Recommendation(
                priority=Priority.MEDIUM,
                title="Volume discrepancy detected",
                description="Trading volume varies significantly across providers.",
                action="Consensus volume uses trust-weighted averaging. Monitor the affected providers.",
                affected_providers=_providers(volume),
            )
        )

    social = [f for f in findings if f.category == Category.SOCIAL]
    if social:
        recommendations.append(
            _stage_recommendation(
                social,
                "Social sentiment data issues",
                "Social data is logically impossible. Do not use it for analysis.",
                "Review social sentiment carefully. Providers disagree.",
            )
        )

    onchain = [f for f in findings if f.category == Category.ONCHAIN]
    if onchain:
        recommendations.append(
            _stage_recommendation(
                onchain,
                "On-chain data inconsistency",
                "On-chain data is unreliable. Make no accumulation or distribution claims.",
                "Use on-chain data with caution. Market-to-chain consistency is low.",
            )
        )

    covered = len(result.completed_stages)
    if covered < MIN_COVERED_STAGES:
        recommendations.append(
            Recommendation(
                priority=Priority.MEDIUM,
                title="Incomplete data coverage",
                description=f"Only {covered} of {len(Category)} stages completed.",
                action="Analysis may be limited. Retry once more providers respond.",
            )
        )

    suspects = list(_providers(findings))
    for provider in unreliable_sources:
        if provider not in suspects:
            suspects.append(provider)
    if len(suspects) >= 2:
        recommendations.append(
            Recommendation(
                priority=Priority.LOW,
                title="Multiple source reliability issues",
                description=f"{len(suspects)} providers show reliability issues.",
                action="Monitor provider reliability. Consider alternative providers if issues persist.",
                affected_providers=tuple(suspects),
            )
        )

    return sorted(recommendations, key=lambda r: PRIORITY_ORDER.index(r.priority))

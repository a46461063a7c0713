# src/veritas/scoring/confidence.py
"""Overall confidence score computed from per-category validations."""

from dataclasses import dataclass
from typing import Mapping, Sequence

from veritas.models.data_source import Category
from veritas.models.findings import CategoryValidation, Severity, ValidationFinding

DEFAULT_STAGE_WEIGHTS: dict[Category, float] = {
    Category.MARKET: 0.25,
    Category.SOCIAL: 0.25,
    Category.ONCHAIN: 0.25,
    Category.NEWS: 0.25,
}


@dataclass(frozen=True)
class ConfidenceScore:
    """Confidence in one run's data.

    Attributes:
        overall_score: Weighted average of per_category_score (0-100).
        per_category_score: Score of every category; missing categories are 0.
        findings: All findings in stage order, then detection order.
        missing_categories: Categories whose stage did not complete.
    """

    overall_score: float
    per_category_score: dict[Category, float]
    findings: tuple[ValidationFinding, ...] = ()
    missing_categories: tuple[Category, ...] = ()

    @property
    def has_fatal(self) -> bool:
        return any(f.is_fatal for f in self.findings)

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def level(self) -> str:
        return confidence_level(self.overall_score)

    @property
    def recommendation(self) -> str:
        return confidence_recommendation(self.overall_score)


def compute_confidence(
    validations: Mapping[Category, CategoryValidation],
    completed: Sequence[Category],
    weights: Mapping[Category, float] | None = None,
) -> ConfidenceScore:
    """Combine category validations into a ConfidenceScore.

    Only validations of completed stages count. A category that did not
    complete contributes 0 and is listed in missing_categories.

    Args:
        validations: Validation per category.
        completed: Completed stages, in order.
        weights: Weight per category; defaults to equal weights.

    Returns:
        ConfidenceScore with overall_score rounded to 2 decimals.
    """
    weights = weights or DEFAULT_STAGE_WEIGHTS
    done = set(completed)

    per_category: dict[Category, float] = {}
    findings: list[ValidationFinding] = []
    missing: list[Category] = []

    for category in Category.ordered():
        validation = validations.get(category)
        if category in done and validation is not None:
            per_category[category] = validation.score
            findings.extend(validation.findings)
        else:
            per_category[category] = 0.0
            missing.append(category)

    total_weight = sum(weights.get(c, 0.0) for c in Category.ordered())
    if total_weight <= 0:
        overall = 0.0
    else:
        overall = sum(weights.get(c, 0.0) * per_category[c] for c in Category.ordered()) / total_weight

    return ConfidenceScore(
        overall_score=round(overall, 2),
        per_category_score=per_category,
        findings=tuple(findings),
        missing_categories=tuple(missing),
    )


def confidence_level(score: float) -> str:
    """Map a score to excellent / good / acceptable / fair / poor."""
    if score >= 90:
        return "excellent"
    elif score >= 80:
        return "good"
    elif score >= 70:
        return "acceptable"
    elif score >= 60:
        return "fair"
    return "poor"


def confidence_recommendation(score: float) -> str:
    """Advice for downstream consumers at a given confidence."""
    if score >= 90:
        return "Data quality is excellent. Proceed with high confidence."
    elif score >= 80:
        return "Data quality is good. Proceed with confidence."
    elif score >= 70:
        return "Data quality is acceptable. Proceed with normal caution."
    elif score >= 60:
        return "Data quality is fair. Review discrepancies before making decisions."
    return "Data quality is poor. Do not make trading decisions based on this analysis."

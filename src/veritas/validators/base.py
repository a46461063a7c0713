# src/veritas/validators/base.py
"""Shared machinery for the category validators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import combinations
from typing import Optional, Sequence

from veritas.exceptions import MalformedResultError
from veritas.models.context import StageContext
from veritas.models.data_source import PAYLOAD_TYPES, Category, DataSourceResult
from veritas.models.findings import CategoryValidation, Severity, ValidationFinding
from veritas.validators.settings import VeritasSettings


@dataclass(frozen=True)
class PairwiseDeviation:
    """Relative deviation between two providers' values for the same fact."""

    first: str
    second: str
    deviation: float


def relative_deviation(a: float, b: float) -> float:
    """Return |a - b| / min(a, b); 0 when both are zero."""
    low = min(a, b)
    if low <= 0:
        return 0.0 if a == b else float("inf")
    return abs(a - b) / low


def pairwise_deviations(values: Sequence[tuple[str, float]]) -> list[PairwiseDeviation]:
    """Deviation for every provider pair, in input order."""
    return [
        PairwiseDeviation(first=a[0], second=b[0], deviation=relative_deviation(a[1], b[1]))
        for a, b in combinations(values, 2)
    ]


def providers_in(pairs: Sequence[PairwiseDeviation]) -> tuple[str, ...]:
    """Distinct provider ids named in the pairs, in first-seen order."""
    seen: dict[str, None] = {}
    for pair in pairs:
        seen.setdefault(pair.first)
        seen.setdefault(pair.second)
    return tuple(seen)


def weighted_mean(values: Sequence[tuple[str, float]], context: StageContext) -> Optional[float]:
    """Trust-weighted mean of (provider, value) pairs."""
    if not values:
        return None
    weights = [context.trust_weight(provider) for provider, _ in values]
    total = sum(weights)
    if total <= 0:
        return sum(v for _, v in values) / len(values)
    return sum(w * v for w, (_, v) in zip(weights, values)) / total


class CategoryValidator(ABC):
    """Base class for Veritas validators.

    A validator turns one stage's DataSourceResults into a CategoryValidation.
    Data-quality problems become findings; only a payload of the wrong type
    raises.
    """

    category: Category

    def __init__(self, settings: VeritasSettings | None = None):
        self.settings = settings or VeritasSettings()

    def validate(
        self,
        results: Sequence[DataSourceResult],
        context: StageContext,
    ) -> CategoryValidation:
        """Validate one stage's provider results.

        Args:
            results: Collector output for this category.
            context: Read-only results of earlier stages.

        Returns:
            CategoryValidation with findings in detection order.

        Raises:
            MalformedResultError: If a result belongs to another category or
                carries a payload of the wrong type.
        """
        expected = PAYLOAD_TYPES[self.category]
        for result in results:
            if result.category != self.category:
                raise MalformedResultError(
                    f"{self.category.value} validator received {result.category.value} "
                    f"result from {result.provider_id}"
                )
            if result.is_ok and not isinstance(result.payload, expected):
                raise MalformedResultError(
                    f"{result.provider_id} payload is {type(result.payload).__name__}, "
                    f"expected {expected.__name__}"
                )

        ok = [r for r in results if r.is_ok]
        return self._validate(ok, list(results), context)

    @abstractmethod
    def _validate(
        self,
        ok: list[DataSourceResult],
        results: list[DataSourceResult],
        context: StageContext,
    ) -> CategoryValidation:
        pass

    def finding(
        self,
        severity: Severity,
        description: str,
        providers: Sequence[str] = (),
        metric: Optional[float] = None,
        check: str = "",
    ) -> ValidationFinding:
        return ValidationFinding(
            category=self.category,
            severity=severity,
            description=description,
            involved_providers=tuple(providers),
            metric=metric,
            check=check,
        )

    def no_data(self, results: list[DataSourceResult], label: str) -> CategoryValidation:
        """Validation for a stage where no provider returned data."""
        finding = self.finding(
            Severity.WARNING,
            f"No {label} provider returned data ({len(results)} attempted)",
            [r.provider_id for r in results],
            check=f"{self.category.value}_data_availability",
        )
        return CategoryValidation(
            category=self.category,
            score=0.0,
            findings=[finding],
            failed_checks=[finding.check],
        )

    def check_corroboration(
        self,
        ok: list[DataSourceResult],
        results: list[DataSourceResult],
        min_sources: int,
        label: str,
        validation: CategoryValidation,
    ) -> Optional[float]:
        """Emit an insufficient-corroboration warning when too few providers succeeded.

        Returns:
            The score cap to apply, or None when corroboration is sufficient.
        """
        if len(ok) >= min_sources:
            validation.passed_checks.append("corroboration")
            return None

        succeeded = ", ".join(r.provider_id for r in ok)
        validation.findings.append(
            self.finding(
                Severity.WARNING,
                f"Insufficient corroboration: only {len(ok)} of {len(results)} {label} "
                f"providers returned data ({succeeded})",
                [r.provider_id for r in ok],
                check="corroboration",
            )
        )
        validation.failed_checks.append("corroboration")
        return self.settings.insufficient_corroboration_cap

    def penalized_score(
        self,
        base: float,
        validation: CategoryValidation,
        cap: Optional[float] = None,
        exclude_checks: Sequence[str] = (),
    ) -> float:
        """Apply finding penalties to a base score.

        Each WARNING costs warning_penalty, a FATAL floors the score at 0 and
        the corroboration cap is applied last.
        """
        if validation.has_fatal:
            return 0.0
        warnings = sum(
            1
            for f in validation.findings
            if f.severity == Severity.WARNING and f.check not in exclude_checks
        )
        score = base - warnings * self.settings.warning_penalty
        if cap is not None:
            score = min(score, cap)
        return max(0.0, min(100.0, score))

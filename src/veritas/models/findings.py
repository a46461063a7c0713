# src/veritas/models/findings.py
"""Findings and per-category validation outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from veritas.models.data_source import Category


class Severity(str, Enum):
    """Severity of a validation finding."""

    INFO = "info"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass(frozen=True)
class ValidationFinding:
    """One detected consistency issue or confirmation.

    Attributes:
        category: Category the finding belongs to.
        severity: INFO, WARNING or FATAL.
        description: Human-readable explanation.
        involved_providers: Providers involved, in first-seen order.
        metric: Optional numeric deviation (percent for price/volume checks).
        check: Name of the check that produced the finding.
    """

    category: Category
    severity: Severity
    description: str
    involved_providers: tuple[str, ...] = ()
    metric: Optional[float] = None
    check: str = ""

    @property
    def is_fatal(self) -> bool:
        return self.severity == Severity.FATAL


@dataclass
class CategoryValidation:
    """Output of one validator run.

    Attributes:
        category: Category validated.
        score: Category confidence score (0-100).
        findings: Findings in detection order.
        passed_checks: Names of checks that passed.
        failed_checks: Names of checks that failed.
        consensus: Consensus values derived from the providers (e.g. price).
    """

    category: Category
    score: float
    findings: list[ValidationFinding] = field(default_factory=list)
    passed_checks: list[str] = field(default_factory=list)
    failed_checks: list[str] = field(default_factory=list)
    consensus: dict[str, float] = field(default_factory=dict)

    @property
    def has_fatal(self) -> bool:
        return any(f.is_fatal for f in self.findings)

    @property
    def fatal_finding(self) -> Optional[ValidationFinding]:
        for finding in self.findings:
            if finding.is_fatal:
                return finding
        return None

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

# src/veritas/simulation/report.py
"""Outcome of a simulation pass over the built-in scenarios."""
from dataclasses import dataclass, field
from typing import Optional

from veritas.models.data_source import Category
from veritas.orchestrator.models import OrchestrationResult, PipelineState
from veritas.reporting.metrics import AggregatedMetrics


@dataclass(frozen=True)
class ScenarioOutcome:
    """How the pipeline ended for one scenario and which expectations broke.

    A scenario that raised or overran its budget has error set and no
    pipeline fields.
    """

    name: str
    failures: tuple[str, ...] = ()
    error: Optional[str] = None
    duration_ms: float = 0.0
    final_state: Optional[PipelineState] = None
    halt_reason: Optional[str] = None
    overall_score: Optional[float] = None
    completed_stages: tuple[Category, ...] = ()

    @property
    def passed(self) -> bool:
        return self.error is None and not self.failures

    @classmethod
    def from_result(
        cls,
        name: str,
        result: OrchestrationResult,
        failures: list[str],
        duration_ms: float,
    ) -> "ScenarioOutcome":
        score = result.confidence_score
        return cls(
            name=name,
            failures=tuple(failures),
            duration_ms=duration_ms,
            final_state=result.final_state,
            halt_reason=result.halt_reason,
            overall_score=score.overall_score if score is not None else None,
            completed_stages=tuple(result.completed_stages),
        )

    def describe(self) -> str:
        """One line: verdict, end state, score and the first broken expectation."""
        verdict = "PASS" if self.passed else "FAIL"
        if self.error is not None:
            return f"{self.name}: {verdict} (error: {self.error})"

        stages = ", ".join(c.value for c in self.completed_stages) or "none"
        score = f"{self.overall_score:.1f}" if self.overall_score is not None else "n/a"
        line = f"{self.name}: {verdict} state={self.final_state.value} score={score} stages=[{stages}]"
        if self.halt_reason:
            line += f" halt={self.halt_reason!r}"
        if self.failures:
            line += f" ({'; '.join(self.failures)})"
        return line


@dataclass
class SimulationReport:
    """Scenario outcomes plus metrics over every pipeline run they made."""

    outcomes: list[ScenarioOutcome] = field(default_factory=list)
    metrics: Optional[AggregatedMetrics] = None

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def passed(self) -> int:
        return sum(1 for o in self.outcomes if o.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def all_passed(self) -> bool:
        return self.total > 0 and self.failed == 0

    def render(self) -> list[str]:
        lines = [outcome.describe() for outcome in self.outcomes]
        lines.append(f"{self.passed}/{self.total} scenarios passed")
        if self.metrics is not None and self.metrics.total_attempts:
            m = self.metrics
            lines.append(
                f"Pipeline runs: {m.total_attempts} "
                f"(succeeded {m.successful_attempts}, halted {m.halted_attempts}, "
                f"timed out {m.timed_out_attempts}), "
                f"avg {m.average_duration_ms:.0f}ms, avg confidence {m.average_confidence:.1f}%"
            )
            for error, count in m.most_common_errors[:3]:
                lines.append(f"  {count}x {error}")
        return lines

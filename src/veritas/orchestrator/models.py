# src/veritas/orchestrator/models.py
"""Data models for the validation orchestrator."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from veritas.models.data_source import Category, DataSourceResult
from veritas.models.findings import CategoryValidation
from veritas.reporting.guidance import Recommendation, ReliabilityGuidance
from veritas.scoring.confidence import ConfidenceScore


class PipelineState(str, Enum):
    """State of one orchestration run."""

    MARKET = "market"
    SOCIAL = "social"
    ONCHAIN = "onchain"
    NEWS = "news"
    DONE = "done"
    HALTED = "halted"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @property
    def category(self) -> Optional[Category]:
        """Category collected in this state, None for terminal states."""
        return STAGE_CATEGORIES.get(self)


TERMINAL_STATES = frozenset({PipelineState.DONE, PipelineState.HALTED, PipelineState.TIMED_OUT})

STAGE_CATEGORIES: dict[PipelineState, Category] = {
    PipelineState.MARKET: Category.MARKET,
    PipelineState.SOCIAL: Category.SOCIAL,
    PipelineState.ONCHAIN: Category.ONCHAIN,
    PipelineState.NEWS: Category.NEWS,
}

# Normal progression after a stage completes without a FATAL finding
NEXT_STATE: dict[PipelineState, PipelineState] = {
    PipelineState.MARKET: PipelineState.SOCIAL,
    PipelineState.SOCIAL: PipelineState.ONCHAIN,
    PipelineState.ONCHAIN: PipelineState.NEWS,
    PipelineState.NEWS: PipelineState.DONE,
}


class IllegalTransitionError(RuntimeError):
    """Raised when a run is moved out of a terminal state."""


@dataclass
class StageError:
    """A provider failure or stage error recorded during a run."""

    stage: Category
    provider_id: Optional[str]
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ProgressUpdate:
    """Progress event delivered to the caller's callback."""

    state: PipelineState
    progress: int
    completed_stages: tuple[Category, ...]


@dataclass
class OrchestrationState:
    """Mutable state of a single run. Never shared between runs."""

    symbol: str
    current_stage: PipelineState = PipelineState.MARKET
    completed_stages: list[Category] = field(default_factory=list)
    results: dict[Category, list[DataSourceResult]] = field(default_factory=dict)
    validations: dict[Category, CategoryValidation] = field(default_factory=dict)
    errors: list[StageError] = field(default_factory=list)
    halted: bool = False
    halt_reason: Optional[str] = None
    timed_out: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def progress(self) -> int:
        return round(len(self.completed_stages) / len(Category) * 100)

    def complete_stage(self, category: Category) -> None:
        """Record a finished stage. Stages must complete in canonical order."""
        self._require_active()
        expected = Category.ordered()[len(self.completed_stages)]
        if category != expected:
            raise IllegalTransitionError(f"Expected {expected.value} stage, got {category.value}")
        self.completed_stages.append(category)

    def advance(self) -> PipelineState:
        self._require_active()
        self.current_stage = NEXT_STATE[self.current_stage]
        return self.current_stage

    def halt(self, reason: str) -> None:
        self._require_active()
        self.halted = True
        self.halt_reason = reason
        self.current_stage = PipelineState.HALTED

    def time_out(self) -> None:
        self._require_active()
        self.timed_out = True
        self.current_stage = PipelineState.TIMED_OUT

    def snapshot(self) -> ProgressUpdate:
        return ProgressUpdate(
            state=self.current_stage,
            progress=self.progress,
            completed_stages=tuple(self.completed_stages),
        )

    def _require_active(self) -> None:
        if self.current_stage.is_terminal:
            raise IllegalTransitionError(f"Run already finished in state {self.current_stage.value}")


@dataclass
class OrchestrationResult:
    """Final outcome of a run, including partial results."""

    symbol: str
    success: bool
    completed: bool
    halted: bool
    halt_reason: Optional[str]
    timed_out: bool
    progress: int
    completed_stages: list[Category]
    results: dict[Category, list[DataSourceResult]]
    validations: dict[Category, CategoryValidation]
    confidence_score: Optional[ConfidenceScore]
    duration_ms: int
    errors: list[StageError] = field(default_factory=list)
    data_quality_summary: str = ""
    reliability_guidance: Optional[ReliabilityGuidance] = None
    recommendations: list[Recommendation] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def final_state(self) -> PipelineState:
        """State the run ended in."""
        if self.timed_out:
            return PipelineState.TIMED_OUT
        if self.halted:
            return PipelineState.HALTED
        if self.completed:
            return PipelineState.DONE
        pending = [c for c in Category.ordered() if c not in self.completed_stages]
        return PipelineState(pending[0].value) if pending else PipelineState.DONE

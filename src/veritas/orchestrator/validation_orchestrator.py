# src/veritas/orchestrator/validation_orchestrator.py
"""Sequential validation pipeline with a global deadline."""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Mapping, Optional

from veritas.collectors.cache import ResponseCache
from veritas.collectors.collector import Collector
from veritas.exceptions import CollectorConfigurationError
from veritas.models.context import StageContext
from veritas.models.data_source import Category
from veritas.models.findings import CategoryValidation, Severity
from veritas.orchestrator.models import (
    OrchestrationResult,
    OrchestrationState,
    PipelineState,
    StageError,
)
from veritas.orchestrator.progress import ProgressCallback, ProgressDispatcher
from veritas.orchestrator.settings import OrchestratorSettings
from veritas.reporting.guidance import build_recommendations, build_reliability_guidance
from veritas.reporting.metrics import ValidationMetrics
from veritas.reporting.summary import generate_data_quality_summary
from veritas.scoring.confidence import compute_confidence
from veritas.scoring.reliability import SourceReliabilityTracker, ValidationOutcome
from veritas.validators import default_validators
from veritas.validators.base import CategoryValidator, relative_deviation


logger = logging.getLogger(__name__)


class ValidationOrchestrator:
    """Runs Market -> Social -> OnChain -> News under one wall-clock budget.

    Each stage collects from every provider of its category, then validates
    the results against the earlier stages. A FATAL finding halts the run,
    and an expired deadline cancels the current stage. Either way the stages
    completed so far are returned with a confidence score.
    """

    def __init__(
        self,
        collector: Collector,
        validators: Optional[Mapping[Category, CategoryValidator]] = None,
        settings: Optional[OrchestratorSettings] = None,
        reliability_tracker: Optional[SourceReliabilityTracker] = None,
        metrics: Optional[ValidationMetrics] = None,
    ):
        self._collector = collector
        self._validators: dict[Category, CategoryValidator] = {
            **default_validators(),
            **dict(validators or {}),
        }
        self._settings = settings or OrchestratorSettings()
        self._tracker = reliability_tracker
        self._metrics = metrics

    @property
    def settings(self) -> OrchestratorSettings:
        return self._settings

    async def run(
        self,
        symbol: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> OrchestrationResult:
        """Run the pipeline for one symbol.

        Args:
            symbol: Asset ticker, e.g. "BTC".
            progress_callback: Optional callable receiving a ProgressUpdate
                after every state transition. May be a coroutine function.

        Returns:
            OrchestrationResult; partial when halted or timed out.

        Raises:
            CollectorConfigurationError: If the symbol is empty or a stage
                has no providers.
        """
        if not symbol or not symbol.strip():
            raise CollectorConfigurationError("symbol must be a non-empty string")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.global_timeout_seconds
        start = time.perf_counter()

        state = OrchestrationState(symbol=symbol)
        trust_weights = self._tracker.snapshot() if self._tracker is not None else {}
        cache = self._collector.new_cache()

        dispatcher = None
        if progress_callback is not None:
            dispatcher = ProgressDispatcher(progress_callback, self._settings.callback_timeout_seconds)
            dispatcher.start()

        def emit() -> None:
            if dispatcher is not None:
                dispatcher.emit(state.snapshot())

        logger.info(f"Starting validation for {symbol}")
        emit()

        try:
            while not state.current_stage.is_terminal:
                category = state.current_stage.category
                remaining = deadline - loop.time()
                if remaining <= 0:
                    self._time_out(state, category)
                    emit()
                    break

                try:
                    validation = await asyncio.wait_for(
                        self._run_stage(category, state, trust_weights, cache),
                        timeout=remaining,
                    )
                except asyncio.TimeoutError:
                    self._time_out(state, category)
                    emit()
                    break
                except CollectorConfigurationError:
                    raise
                except Exception as e:
                    logger.error(f"{category.value} validation raised: {e}")
                    state.errors.append(StageError(stage=category, provider_id=None, message=str(e)))
                    state.halt(f"{category.value} validation error: {e}")
                    emit()
                    break

                state.complete_stage(category)
                fatal = validation.fatal_finding
                if fatal is not None:
                    state.halt(f"Fatal error in {category.value} validation: {fatal.description}")
                    logger.error(f"Validation halted for {symbol}: {state.halt_reason}")
                else:
                    state.advance()
                emit()
        finally:
            if dispatcher is not None:
                await dispatcher.close(self._settings.progress_drain_seconds)

        if self._tracker is not None:
            self._record_reliability(state)

        result = self._build_result(state, start)
        if self._metrics is not None:
            self._metrics.record(result)
        logger.info(
            f"Validation for {symbol} finished in {result.duration_ms}ms: "
            f"state={state.current_stage.value}, progress={result.progress}%, "
            f"confidence={result.confidence_score.overall_score:.1f}"
        )
        return result

    async def _run_stage(
        self,
        category: Category,
        state: OrchestrationState,
        trust_weights: Mapping[str, float],
        cache: Optional[ResponseCache],
    ) -> CategoryValidation:
        logger.info(f"Stage {category.value} started for {state.symbol}")
        context = StageContext.build(state.symbol, state.results, state.validations, trust_weights)

        results = await self._collector.collect(category, state.symbol, context, cache)
        state.results[category] = results
        for result in results:
            if not result.is_ok:
                state.errors.append(
                    StageError(
                        stage=category,
                        provider_id=result.provider_id,
                        message=result.error or result.status.value,
                        timestamp=result.fetched_at,
                    )
                )

        validator = self._validators[category]
        # Validators may call out to a classifier API; keep the loop free
        validation = await asyncio.to_thread(validator.validate, results, context)
        state.validations[category] = validation

        for finding in validation.findings:
            if finding.severity != Severity.INFO:
                logger.warning(f"[{category.value}] {finding.severity.value}: {finding.description}")
        logger.info(f"Stage {category.value} finished: score={validation.score:.1f}")
        return validation

    def _time_out(self, state: OrchestrationState, category: Optional[Category]) -> None:
        stage = category.value if category is not None else state.current_stage.value
        logger.error(
            f"Validation for {state.symbol} timed out after "
            f"{self._settings.global_timeout_seconds}s during {stage} stage"
        )
        state.time_out()

    def _record_reliability(self, state: OrchestrationState) -> None:
        """Feed this run's provider outcomes to the reliability tracker."""
        market = state.validations.get(Category.MARKET)
        consensus_price = market.consensus.get("price") if market is not None else None
        threshold = self._validators[Category.MARKET].settings.price_warning_threshold

        for category in state.completed_stages:
            for result in state.results.get(category, []):
                if not result.is_ok:
                    outcome = ValidationOutcome.FAIL
                elif (
                    category == Category.MARKET
                    and consensus_price
                    and relative_deviation(result.payload.price, consensus_price) > threshold
                ):
                    outcome = ValidationOutcome.DEVIATION
                else:
                    outcome = ValidationOutcome.PASS
                self._tracker.record(result.provider_id, outcome)

    def _build_result(self, state: OrchestrationState, start: float) -> OrchestrationResult:
        completed_stages = list(state.completed_stages)
        confidence = compute_confidence(
            state.validations, completed_stages, self._settings.stage_weights
        )
        completed = state.current_stage == PipelineState.DONE

        result = OrchestrationResult(
            symbol=state.symbol,
            success=completed and not state.halted and not state.timed_out,
            completed=completed,
            halted=state.halted,
            halt_reason=state.halt_reason,
            timed_out=state.timed_out,
            progress=state.progress,
            completed_stages=completed_stages,
            results={c: state.results[c] for c in completed_stages if c in state.results},
            validations={c: state.validations[c] for c in completed_stages if c in state.validations},
            confidence_score=confidence,
            duration_ms=int((time.perf_counter() - start) * 1000),
            errors=list(state.errors),
            started_at=state.started_at,
            finished_at=datetime.now(timezone.utc),
        )
        reliable, unreliable = [], []
        if self._tracker is not None:
            reliable = self._tracker.reliable_sources()
            unreliable = self._tracker.unreliable_sources()
        result.reliability_guidance = build_reliability_guidance(
            result, reliable, self._settings.proceed_threshold
        )
        result.recommendations = build_recommendations(result, unreliable)
        result.data_quality_summary = generate_data_quality_summary(result)
        return result


async def orchestrate(
    symbol: str,
    collector: Collector,
    validators: Optional[Mapping[Category, CategoryValidator]] = None,
    settings: Optional[OrchestratorSettings] = None,
    progress_callback: Optional[ProgressCallback] = None,
    reliability_tracker: Optional[SourceReliabilityTracker] = None,
    metrics: Optional[ValidationMetrics] = None,
) -> OrchestrationResult:
    """Run one validation pipeline with a fresh orchestrator."""
    orchestrator = ValidationOrchestrator(collector, validators, settings, reliability_tracker, metrics)
    return await orchestrator.run(symbol, progress_callback)


def is_sufficient_for_analysis(result: OrchestrationResult, minimum_confidence: float = 70.0) -> bool:
    """True when the data is good enough to build an analysis on.

    Only a completed run qualifies: halted and timed-out runs carry usable
    partial data but are never analysis-ready. On top of that the confidence
    score must reach minimum_confidence with no FATAL finding, and the
    reliability guidance, when present, must allow proceeding.
    """
    if not result.completed or result.halted or result.timed_out:
        return False
    score = result.confidence_score
    if score is None:
        return False
    if score.has_fatal:
        return False
    if score.overall_score < minimum_confidence:
        return False
    guidance = result.reliability_guidance
    return guidance is None or guidance.can_proceed_with_analysis

"""Tests for orchestrator models and the run state machine."""

import pytest

from veritas.models import Category
from veritas.orchestrator import OrchestrationState, PipelineState
from veritas.orchestrator.models import IllegalTransitionError


class TestPipelineState:
    def test_stage_states_map_to_categories(self):
        assert PipelineState.MARKET.category == Category.MARKET
        assert PipelineState.DONE.category is None

    def test_terminal_states(self):
        terminal = {s for s in PipelineState if s.is_terminal}
        assert terminal == {PipelineState.DONE, PipelineState.HALTED, PipelineState.TIMED_OUT}


class TestOrchestrationState:
    def test_initial_state(self):
        state = OrchestrationState(symbol="BTC")

        assert state.current_stage == PipelineState.MARKET
        assert state.progress == 0
        assert not state.halted
        assert not state.timed_out

    def test_happy_path_reaches_done(self):
        state = OrchestrationState(symbol="BTC")
        visited = [state.current_stage]

        for category in Category.ordered():
            state.complete_stage(category)
            visited.append(state.advance())

        assert visited == [
            PipelineState.MARKET,
            PipelineState.SOCIAL,
            PipelineState.ONCHAIN,
            PipelineState.NEWS,
            PipelineState.DONE,
        ]
        assert state.progress == 100

    def test_progress_counts_completed_stages(self):
        state = OrchestrationState(symbol="BTC")
        state.complete_stage(Category.MARKET)
        state.advance()

        assert state.progress == 25

    def test_stages_complete_in_order(self):
        state = OrchestrationState(symbol="BTC")

        with pytest.raises(IllegalTransitionError):
            state.complete_stage(Category.SOCIAL)

    def test_halt_is_terminal(self):
        state = OrchestrationState(symbol="BTC")
        state.complete_stage(Category.MARKET)
        state.halt("Fatal error in market validation")

        assert state.current_stage == PipelineState.HALTED
        assert state.halt_reason == "Fatal error in market validation"
        with pytest.raises(IllegalTransitionError):
            state.advance()
        with pytest.raises(IllegalTransitionError):
            state.time_out()

    def test_time_out_is_terminal(self):
        state = OrchestrationState(symbol="BTC")
        state.time_out()

        assert state.timed_out
        assert state.current_stage == PipelineState.TIMED_OUT
        with pytest.raises(IllegalTransitionError):
            state.halt("late fatal")

    def test_snapshot(self):
        state = OrchestrationState(symbol="BTC")
        state.complete_stage(Category.MARKET)
        state.advance()

        update = state.snapshot()

        assert update.state == PipelineState.SOCIAL
        assert update.progress == 25
        assert update.completed_stages == (Category.MARKET,)

"""Tests for ExecutionEngine and RandomSelector."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from madhouse.core.outcome import FailureKind, Mode
from madhouse.core.wrapper import CommandWrapper
from madhouse.engine import ExecutionEngine, RandomSelector, Selection
from madhouse.errors import InvalidScenarioError
from madhouse.scenario.composer import SequenceComposer

from tests.conftest import Blocked, Counter, Crash, Ctx, Decrement, Increment, Reset


def wrap(*commands):
    return [CommandWrapper(c) for c in commands]


class TestEngineSetup:
    def test_state_factory_must_be_callable(self):
        with pytest.raises(InvalidScenarioError):
            ExecutionEngine(Counter(), Ctx())

    def test_fresh_state_per_run(self):
        engine = ExecutionEngine(Counter, Ctx())
        engine.run_sequence(wrap(Increment(10)))
        first = engine.last_state
        engine.run_sequence(wrap(Increment(10)))
        assert engine.last_state is not first
        assert engine.last_state.value == 10


class TestNormalMode:
    def test_empty_sequence_succeeds(self):
        outcome = ExecutionEngine(Counter, Ctx()).run_sequence([])
        assert outcome.success
        assert outcome.mode == Mode.NORMAL
        assert outcome.steps_executed == 0

    def test_runs_in_order(self):
        engine = ExecutionEngine(Counter, Ctx())
        outcome = engine.run_sequence(wrap(Increment(10), Decrement(4), Increment(1)))

        assert outcome.success
        assert outcome.labels == ["INCREMENT(10)", "DECREMENT(4)", "INCREMENT(1)"]
        assert engine.last_state.value == 7

    def test_invariant_violation_at_step_one(self):
        outcome = ExecutionEngine(Counter, Ctx()).run_sequence(
            wrap(Increment(50), Increment(51))
        )

        assert not outcome.success
        failure = outcome.failure
        assert failure.kind == FailureKind.INVARIANT_VIOLATION
        assert failure.step_index == 1
        assert failure.label == "INCREMENT(51)"
        assert "101" in failure.detail
        assert isinstance(failure.error, AssertionError)

    def test_stops_after_violation(self):
        engine = ExecutionEngine(Counter, Ctx())
        outcome = engine.run_sequence(wrap(Increment(60), Increment(60), Reset()))
        assert outcome.failure.step_index == 1
        assert len(outcome.steps) == 2
        assert outcome.labels == ["INCREMENT(60)", "INCREMENT(60)"]
        assert engine.last_state.value == 120

    def test_precondition_not_met(self):
        engine = ExecutionEngine(Counter, Ctx())
        outcome = engine.run_sequence(wrap(Decrement(5)))

        assert outcome.failure.kind == FailureKind.PRECONDITION_NOT_MET
        assert outcome.failure.step_index == 0
        assert outcome.failure.label == "DECREMENT(5)"
        assert outcome.steps == []
        assert engine.last_state.value == 0

    def test_rejected_command_is_never_applied(self):
        outcome = ExecutionEngine(Counter, Ctx()).run_sequence(wrap(Reset(), Blocked()))
        assert outcome.failure.kind == FailureKind.PRECONDITION_NOT_MET
        assert outcome.failure.step_index == 1
        assert Blocked.applied == 0

    def test_crash_propagates(self):
        with pytest.raises(ZeroDivisionError):
            ExecutionEngine(Counter, Ctx()).run_sequence(wrap(Crash()))

    @given(data=st.data())
    def test_step_types_match_declaration(self, data):
        declared = [Increment, Reset, Increment, Reset]
        sequence = data.draw(SequenceComposer(declared, Ctx()).sequence())
        outcome = ExecutionEngine(Counter, Ctx()).run_sequence(sequence)

        executed = [step.command_type for step in outcome.steps]
        assert executed == [t.__name__ for t in declared][: len(executed)]
        if outcome.success:
            assert outcome.steps_executed == len(declared)


class TestRandomizedMode:
    @given(data=st.data())
    def test_empty_scenario_succeeds(self, data):
        outcome = ExecutionEngine(Counter, Ctx()).run_randomized([], data.draw)
        assert outcome.success
        assert outcome.mode == Mode.RANDOMIZED
        assert outcome.steps_executed == 0

    @given(data=st.data())
    def test_step_count_matches_declaration(self, data):
        declared = [Reset, Decrement, Reset, Decrement, Reset]
        strategies = SequenceComposer(declared, Ctx()).strategies()
        outcome = ExecutionEngine(Counter, Ctx()).run_randomized(strategies, data.draw)

        # Reset is always legal, so selection always succeeds
        assert outcome.success
        assert outcome.steps_executed == len(declared)

    @given(data=st.data())
    def test_explicit_step_count(self, data):
        strategies = SequenceComposer([Reset], Ctx()).strategies()
        outcome = ExecutionEngine(Counter, Ctx()).run_randomized(strategies, data.draw, steps=4)
        assert outcome.labels == ["RESET"] * 4

    @given(data=st.data())
    @settings(max_examples=20)
    def test_only_decrement_has_no_eligible_command(self, data):
        strategies = SequenceComposer([Decrement], Ctx()).strategies()
        engine = ExecutionEngine(Counter, Ctx(), retry_limit=5)
        outcome = engine.run_randomized(strategies, data.draw)

        assert outcome.failure.kind == FailureKind.NO_ELIGIBLE_COMMAND
        assert outcome.failure.step_index == 0
        assert outcome.failure.label.startswith("DECREMENT(")
        assert engine.last_state.value == 0

    @given(data=st.data())
    @settings(max_examples=20)
    def test_rejected_candidates_are_never_applied(self, data):
        strategies = SequenceComposer([Blocked, Reset, Blocked], Ctx()).strategies()
        outcome = ExecutionEngine(Counter, Ctx()).run_randomized(strategies, data.draw)

        assert Blocked.applied == 0
        assert all(step.command_type == "Reset" for step in outcome.steps)

    @given(data=st.data())
    def test_invariant_violation_reported(self, data):
        strategies = [st.just(Increment(60)).map(CommandWrapper)] * 2
        outcome = ExecutionEngine(Counter, Ctx()).run_randomized(strategies, data.draw)

        assert outcome.failure.kind == FailureKind.INVARIANT_VIOLATION
        assert outcome.failure.step_index == 1
        assert outcome.failure.label == "INCREMENT(60)"

    @given(data=st.data())
    def test_custom_selector(self, data):
        class FirstOnly:
            def select(self, state, draw):
                return Selection(wrapper=CommandWrapper(Reset()), attempts=1)

        outcome = ExecutionEngine(Counter, Ctx()).run_randomized(
            [st.nothing()] * 3, data.draw, selector=FirstOnly()
        )
        assert outcome.labels == ["RESET"] * 3


class TestRandomSelector:
    def test_retry_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            RandomSelector([], retry_limit=0)

    @given(data=st.data())
    def test_no_strategies(self, data):
        selection = RandomSelector([]).select(Counter(), data.draw)
        assert not selection.found
        assert selection.attempts == 0

    @given(data=st.data())
    def test_selects_eligible(self, data):
        strategies = SequenceComposer([Increment], Ctx()).strategies()
        selection = RandomSelector(strategies).select(Counter(), data.draw)
        assert selection.found
        assert selection.attempts == 1
        assert selection.wrapper.command_type == "Increment"

    @given(data=st.data())
    def test_gives_up_after_retry_limit(self, data):
        strategies = SequenceComposer([Blocked], Ctx()).strategies()
        selection = RandomSelector(strategies, retry_limit=3).select(Counter(), data.draw)
        assert not selection.found
        assert selection.attempts == 3
        assert selection.last_label == "BLOCKED"

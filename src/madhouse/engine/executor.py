"""ExecutionEngine: drives check/apply for one scenario run."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from hypothesis.strategies import SearchStrategy

from madhouse.core.outcome import ExecutionOutcome, Failure, FailureKind, Mode
from madhouse.core.wrapper import CommandWrapper
from madhouse.engine.selection import DEFAULT_RETRY_LIMIT, Draw, RandomSelector, Selector
from madhouse.errors import InvalidScenarioError

logger = logging.getLogger(__name__)


class ExecutionEngine:
    """Runs command sequences against a fresh state.

    Every run walks ``Ready -> Running(i) -> Success | Failed(i, reason)``:

    1. Build a fresh state from ``state_factory``
    2. For each step, check the command's precondition
    3. Apply it, recording label and timing
    4. Stop at the first precondition failure or invariant violation

    The engine never touches the same state twice; each call to
    ``run_sequence`` or ``run_randomized`` starts from a new one. The
    context is shared by all runs and only ever read.
    """

    def __init__(
        self,
        state_factory: Callable[[], Any],
        context: Any,
        retry_limit: int = DEFAULT_RETRY_LIMIT,
    ) -> None:
        if not callable(state_factory):
            raise InvalidScenarioError(
                f"state_factory must be callable, got {type(state_factory).__name__}"
            )
        self.state_factory = state_factory
        self.context = context
        self.retry_limit = retry_limit
        self._last_state: Any = None

    @property
    def last_state(self) -> Any:
        """State left behind by the most recent run (for inspection only)."""
        return self._last_state

    def run_sequence(self, sequence: Sequence[CommandWrapper]) -> ExecutionOutcome:
        """Execute a pre-sampled sequence strictly in order.

        A false precondition stops the run with PRECONDITION_NOT_MET; the
        command is not applied.
        """
        outcome = ExecutionOutcome(mode=Mode.NORMAL)
        state = self._fresh_state()

        for index, wrapper in enumerate(sequence):
            if not wrapper.check(state):
                logger.debug("Step %d: precondition of %s not met", index, wrapper.label)
                outcome.fail(Failure(
                    kind=FailureKind.PRECONDITION_NOT_MET,
                    step_index=index,
                    label=wrapper.label,
                    detail=f"precondition of {wrapper.label} is false",
                ))
                break
            if not self._execute(wrapper, state, index, outcome):
                break

        outcome.finish()
        return outcome

    def run_randomized(
        self,
        strategies: Sequence[SearchStrategy[CommandWrapper]],
        draw: Draw,
        steps: int | None = None,
        selector: Selector | None = None,
    ) -> ExecutionOutcome:
        """Select and execute one command per step, drawing on demand.

        Runs ``len(strategies)`` steps unless ``steps`` is given. A step
        that finds no eligible command within the retry limit stops the
        run with NO_ELIGIBLE_COMMAND.
        """
        selector = selector or RandomSelector(strategies, self.retry_limit)
        total = len(strategies) if steps is None else steps
        outcome = ExecutionOutcome(mode=Mode.RANDOMIZED)
        state = self._fresh_state()

        for index in range(total):
            selection = selector.select(state, draw)
            if not selection.found:
                logger.info(
                    "Step %d: no eligible command after %d attempts",
                    index,
                    selection.attempts,
                )
                outcome.fail(Failure(
                    kind=FailureKind.NO_ELIGIBLE_COMMAND,
                    step_index=index,
                    label=selection.last_label or "<none>",
                    detail=f"no eligible command after {selection.attempts} attempts",
                ))
                break
            if not self._execute(selection.wrapper, state, index, outcome):
                break

        outcome.finish()
        return outcome

    def _fresh_state(self) -> Any:
        state = self.state_factory()
        self._last_state = state
        return state

    def _execute(
        self,
        wrapper: CommandWrapper,
        state: Any,
        index: int,
        outcome: ExecutionOutcome,
    ) -> bool:
        """Apply one command; return False when the run must stop."""
        record = wrapper.execute(state, self.context, index=index)
        outcome.record(record)

        if record.ok:
            logger.debug("Step %d: %s (%.3fms)", index, record.label, record.duration_ms)
            return True

        logger.info("Step %d: %s violated an invariant: %s", index, record.label, record.detail)
        outcome.fail(Failure(
            kind=FailureKind.INVARIANT_VIOLATION,
            step_index=index,
            label=record.label,
            detail=record.detail or "",
            duration_ms=record.duration_ms,
            error=record.error,
        ))
        return False

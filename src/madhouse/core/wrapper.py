"""CommandWrapper: runtime envelope around one generated command."""

from __future__ import annotations

import inspect
import time
from datetime import datetime
from typing import Any

from madhouse.core.command import Command
from madhouse.core.outcome import StepRecord, StepStatus
from madhouse.errors import ErrorContext, InvalidScenarioError


class CommandWrapper:
    """Holds a command instance, its label and the timing of its execution.

    A wrapper is created at generation time and executed at most once.
    Timing is recorded for reporting only and never changes the verdict.
    """

    def __init__(self, command: Command) -> None:
        if not isinstance(command, Command):
            raise InvalidScenarioError(
                f"CommandWrapper expects a Command instance, got {type(command).__name__}"
            )
        self.command = command
        self.label = command.label()
        self.started_at: datetime | None = None
        self.duration_ms: float | None = None
        self._context_passing = _context_passing(command)

    @property
    def command_type(self) -> str:
        return type(self.command).__name__

    @property
    def executed(self) -> bool:
        return self.started_at is not None

    def check(self, state: Any) -> bool:
        """Evaluate the command's precondition against ``state``."""
        return bool(self.command.check(state))

    def execute(self, state: Any, context: Any, index: int = 0) -> StepRecord:
        """Apply the command and return a timed StepRecord.

        An AssertionError raised by apply() becomes a VIOLATION record;
        any other exception propagates unchanged.
        """
        if self.executed:
            raise InvalidScenarioError(
                f"{self.label} was already executed; wrappers are single-use",
                context=ErrorContext(step_index=index, label=self.label),
            )

        self.started_at = datetime.now()
        start = time.perf_counter()
        try:
            if self._context_passing == "positional":
                self.command.apply(state, context)
            elif self._context_passing == "keyword":
                self.command.apply(state, context=context)
            else:
                self.command.apply(state)
        except AssertionError as e:
            self.duration_ms = (time.perf_counter() - start) * 1000
            return StepRecord(
                index=index,
                label=self.label,
                command_type=self.command_type,
                status=StepStatus.VIOLATION,
                started_at=self.started_at,
                duration_ms=self.duration_ms,
                detail=str(e) or type(e).__name__,
                error=e,
            )

        self.duration_ms = (time.perf_counter() - start) * 1000
        return StepRecord(
            index=index,
            label=self.label,
            command_type=self.command_type,
            status=StepStatus.OK,
            started_at=self.started_at,
            duration_ms=self.duration_ms,
        )

    def __repr__(self) -> str:
        return self.label


def _context_passing(command: Command) -> str | None:
    """How ``command.apply`` takes the context: "positional", "keyword" or None."""
    try:
        sig = inspect.signature(command.apply)
    except (ValueError, TypeError):
        # Can't inspect (e.g., built-in), assume the full signature
        return "positional"
    params = list(sig.parameters.values())
    if any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params):
        return "positional"

    context = sig.parameters.get("context")
    if context is not None and context.kind == inspect.Parameter.KEYWORD_ONLY:
        return "keyword"

    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return "positional" if len(positional) >= 2 else None

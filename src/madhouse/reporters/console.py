"""Console reporter for terminal output."""

from __future__ import annotations

import io
import sys
from typing import TextIO

from madhouse.core.outcome import ExecutionOutcome, FailureKind


class ConsoleReporter:
    """Formats an ExecutionOutcome as a step-by-step trace."""

    # ANSI color codes
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    def __init__(self, file: TextIO | None = None, color: bool = True) -> None:
        self.file = file or sys.stdout
        self.color = color

    def _c(self, text: str, code: str) -> str:
        """Apply color if enabled."""
        if self.color:
            return f"{code}{text}{self.RESET}"
        return text

    @classmethod
    def render(cls, outcome: ExecutionOutcome) -> str:
        """Return the uncolored trace as a string."""
        buffer = io.StringIO()
        cls(file=buffer, color=False).report(outcome)
        return buffer.getvalue()

    def report(self, outcome: ExecutionOutcome) -> None:
        """Output the outcome to the console."""
        self._header(f"Scenario ({outcome.mode.value})")

        if outcome.steps:
            self._section(f"Steps ({len(outcome.steps)})")
            for step in outcome.steps:
                status = self._c("ok", self.GREEN) if step.ok else self._c("FAILED", self.RED)
                self._line(f"  #{step.index} {step.label} {status} ({step.duration_ms:.3f}ms)")
        else:
            self._line("  (no steps)")

        failure = outcome.failure
        if failure is None:
            self._line(self._c(f"PASSED in {outcome.duration_ms:.0f}ms", self.GREEN + self.BOLD))
            return

        self._section("Failure")
        color = self.RED if failure.kind == FailureKind.INVARIANT_VIOLATION else self.YELLOW
        self._kv("Kind", self._c(failure.kind.value, color))
        self._kv("Step", str(failure.step_index))
        self._kv("Command", failure.label)
        if failure.detail:
            self._kv("Detail", failure.detail)
        self._line(self._c("FAILED", self.RED + self.BOLD))

    def _header(self, text: str) -> None:
        self._line(self._c(f"=== {text} ===", self.BOLD))

    def _section(self, text: str) -> None:
        self._line(self._c(f"--- {text} ---", self.BLUE))

    def _kv(self, key: str, value: str) -> None:
        self._line(f"  {key}: {value}")

    def _line(self, text: str) -> None:
        print(text, file=self.file)

"""StepRecord, Failure and ExecutionOutcome dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Mode(Enum):
    """How the engine picks the commands of a run."""

    NORMAL = "normal"  # pre-sampled sequence, declared order
    RANDOMIZED = "randomized"  # per-step uniform selection


class StepStatus(Enum):
    """Result of applying one command."""

    OK = "ok"
    VIOLATION = "violation"


class FailureKind(Enum):
    """Why a run stopped before exhausting its steps."""

    PRECONDITION_NOT_MET = "precondition_not_met"
    NO_ELIGIBLE_COMMAND = "no_eligible_command"
    INVARIANT_VIOLATION = "invariant_violation"


@dataclass(frozen=True)
class StepRecord:
    """Timed result of executing one CommandWrapper."""

    index: int
    label: str
    command_type: str
    status: StepStatus
    started_at: datetime
    duration_ms: float = 0.0
    detail: str | None = None
    error: BaseException | None = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.status == StepStatus.OK


@dataclass(frozen=True)
class Failure:
    """Where and why a run failed.

    ``(kind, step_index, label)`` identifies the failure; ``detail`` is the
    raw message of the violated assertion or precondition.
    """

    kind: FailureKind
    step_index: int
    label: str
    detail: str = ""
    duration_ms: float = 0.0
    error: BaseException | None = field(default=None, compare=False, repr=False)

    @property
    def signature(self) -> tuple[FailureKind, int, str]:
        return (self.kind, self.step_index, self.label)


@dataclass
class ExecutionOutcome:
    """The complete output of one scenario run."""

    mode: Mode
    steps: list[StepRecord] = field(default_factory=list)
    failure: Failure | None = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """True if every selected step ran without failure."""
        return self.failure is None

    @property
    def steps_executed(self) -> int:
        """Number of steps whose apply() completed without violation."""
        return sum(1 for step in self.steps if step.ok)

    @property
    def labels(self) -> list[str]:
        """Labels of every executed step, including a violating one, in order."""
        return [step.label for step in self.steps]

    def record(self, step: StepRecord) -> None:
        self.steps.append(step)

    def fail(self, failure: Failure) -> None:
        self.failure = failure

    def finish(self) -> None:
        """Mark the run as finished."""
        self.finished_at = datetime.now()
        self.duration_ms = (self.finished_at - self.started_at).total_seconds() * 1000

    def summary(self) -> dict[str, int | float | bool | str | None]:
        """Get a summary of the run."""
        return {
            "mode": self.mode.value,
            "steps_executed": self.steps_executed,
            "success": self.success,
            "failure": self.failure.kind.value if self.failure else None,
            "failed_step": self.failure.step_index if self.failure else None,
            "duration_ms": round(self.duration_ms, 2),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert the outcome to a JSON-friendly dictionary."""
        return {
            "summary": self.summary(),
            "steps": [
                {
                    "index": step.index,
                    "label": step.label,
                    "command": step.command_type,
                    "status": step.status.value,
                    "duration_ms": round(step.duration_ms, 3),
                    "detail": step.detail,
                }
                for step in self.steps
            ],
            "failure": (
                {
                    "kind": self.failure.kind.value,
                    "step_index": self.failure.step_index,
                    "label": self.failure.label,
                    "detail": self.failure.detail,
                    "duration_ms": round(self.failure.duration_ms, 3),
                }
                if self.failure
                else None
            ),
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }

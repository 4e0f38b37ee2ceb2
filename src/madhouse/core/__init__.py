"""Core data objects for madhouse.

This module contains the fundamental data structures:
- Command, State, TestContext: What a scenario is made of
- CommandWrapper: One generated command plus its label and timing
- StepRecord, Failure, ExecutionOutcome: What a run produced
"""

from madhouse.core.command import Command, State, TestContext
from madhouse.core.outcome import (
    ExecutionOutcome,
    Failure,
    FailureKind,
    Mode,
    StepRecord,
    StepStatus,
)
from madhouse.core.wrapper import CommandWrapper

__all__ = [
    "Command",
    "State",
    "TestContext",
    "CommandWrapper",
    "ExecutionOutcome",
    "Failure",
    "FailureKind",
    "Mode",
    "StepRecord",
    "StepStatus",
]

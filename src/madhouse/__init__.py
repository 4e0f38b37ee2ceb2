"""madhouse - model-based testing of stateful systems.

Declare commands (check/apply/label/build), list them in a scenario, and let
Hypothesis generate, run and shrink command sequences until an invariant
breaks.

Example:
    from madhouse import Command, scenario
"""

from madhouse.core.command import Command, State, TestContext
from madhouse.core.wrapper import CommandWrapper
from madhouse.core.outcome import (
    ExecutionOutcome,
    Failure,
    FailureKind,
    Mode,
    StepRecord,
    StepStatus,
)

from madhouse.config import MadhouseConfig, get_config, load_config

from madhouse.engine import ExecutionEngine, RandomSelector

from madhouse.scenario import CommandProvider, Scenario, SequenceComposer, scenario

from madhouse.errors import (
    ConfigError,
    InvalidScenarioError,
    InvariantViolation,
    MadhouseError,
    NoEligibleCommandError,
    PreconditionNotMetError,
)

# Reporters
from madhouse.reporters import ConsoleReporter, JSONReporter

__version__ = "0.1.0"

__all__ = [
    # Core
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
    # Config
    "MadhouseConfig",
    "get_config",
    "load_config",
    # Engine
    "ExecutionEngine",
    "RandomSelector",
    # Scenario
    "CommandProvider",
    "Scenario",
    "SequenceComposer",
    "scenario",
    # Errors
    "ConfigError",
    "InvalidScenarioError",
    "InvariantViolation",
    "MadhouseError",
    "NoEligibleCommandError",
    "PreconditionNotMetError",
    # Reporters
    "ConsoleReporter",
    "JSONReporter",
]

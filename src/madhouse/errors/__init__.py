"""madhouse error handling.

Custom exception hierarchy with error codes and structured context.
"""

from madhouse.errors.base import (
    ConfigError,
    ErrorCode,
    ErrorContext,
    InvalidScenarioError,
    InvariantViolation,
    MadhouseError,
    NoEligibleCommandError,
    PreconditionNotMetError,
    ScenarioError,
    ValidationError,
)

__all__ = [
    "ConfigError",
    "ErrorCode",
    "ErrorContext",
    "InvalidScenarioError",
    "InvariantViolation",
    "MadhouseError",
    "NoEligibleCommandError",
    "PreconditionNotMetError",
    "ScenarioError",
    "ValidationError",
]

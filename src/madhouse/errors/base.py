"""Custom exception hierarchy for madhouse.

All madhouse errors inherit from MadhouseError and include:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with scenario/step/label details
- suggestions: List of actionable steps to resolve the issue

Example:
    try:
        scenario(ctx, Increment, Decrement, state=Counter)
    except NoEligibleCommandError as e:
        print(f"Error [{e.error_code.value}]: {e.message}")
        for suggestion in e.suggestions:
            print(f"  - {suggestion}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for madhouse.

    Error codes are organized by category:
    - E2xx: Validation errors (configuration, scenario construction)
    - E4xx: Scenario execution errors
    - E9xx: Unknown/internal errors
    """

    # Validation errors (E2xx)
    VALIDATION_FAILED = "E201"
    INVALID_CONFIG = "E202"
    INVALID_SCENARIO = "E203"

    # Scenario execution errors (E4xx)
    PRECONDITION_NOT_MET = "E401"
    NO_ELIGIBLE_COMMAND = "E402"
    INVARIANT_VIOLATION = "E403"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if 200 <= code_num < 300:
            return "validation"
        elif 400 <= code_num < 500:
            return "scenario"
        return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        scenario_name: Name of the scenario being executed
        step_index: Zero-based index of the offending step
        label: Label of the offending command
        duration_ms: Time spent in the offending step
        extra: Additional context-specific information
        timestamp: When the error occurred
    """

    scenario_name: str | None = None
    step_index: int | None = None
    label: str | None = None
    duration_ms: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "scenario_name": self.scenario_name,
            "step_index": self.step_index,
            "label": self.label,
            "duration_ms": self.duration_ms,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.scenario_name:
            parts.append(f"scenario={self.scenario_name}")
        if self.step_index is not None:
            parts.append(f"step={self.step_index}")
        if self.label:
            parts.append(f"command={self.label}")
        return " > ".join(parts) if parts else "unknown location"


class MadhouseError(Exception):
    """Base exception for all madhouse errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.context.duration_ms is not None:
            lines.append(f"Elapsed: {self.context.duration_ms:.2f}ms")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ValidationError(MadhouseError):
    """Validation failed."""

    error_code = ErrorCode.VALIDATION_FAILED
    default_message = "Validation failed"


class ConfigError(ValidationError):
    """Configuration validation failed.

    The madhouse.yaml file or a MADHOUSE_* environment variable holds an
    invalid value.
    """

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check madhouse.yaml syntax with a YAML linter",
        "Valid modes are 'normal' and 'randomized'",
        "max_examples and retry_limit must be positive integers",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message=message, **kwargs)


class InvalidScenarioError(ValidationError):
    """The scenario definition is invalid.

    A scenario entry must be a Command subclass or a Command instance, and
    every Command.build() must return a Hypothesis strategy.
    """

    error_code = ErrorCode.INVALID_SCENARIO
    default_message = "Invalid scenario definition"
    default_suggestions = [
        "Pass Command subclasses or Command instances to the scenario",
        "Ensure Command.build(context) returns a hypothesis strategy",
        "Pass a zero-argument callable as the state factory",
    ]


class ScenarioError(MadhouseError):
    """Scenario execution error."""

    error_code = ErrorCode.UNKNOWN
    default_message = "Scenario execution failed"


class PreconditionNotMetError(ScenarioError):
    """A scheduled command's precondition was false.

    In normal mode this is handled internally as a rejected sample; it only
    reaches the caller when the engine is driven directly.
    """

    error_code = ErrorCode.PRECONDITION_NOT_MET
    default_message = "Command precondition not met"
    default_suggestions = [
        "Narrow the command's build() strategy so sampled values are legal",
        "Reorder the scenario so earlier commands establish the precondition",
    ]


class NoEligibleCommandError(ScenarioError):
    """Randomized selection found no applicable command."""

    error_code = ErrorCode.NO_ELIGIBLE_COMMAND
    default_message = "No eligible command could be selected"
    default_suggestions = [
        "Add a command whose precondition holds on the initial state",
        "Raise retry_limit (MADHOUSE_RETRY_LIMIT) if eligible commands are rare",
    ]

    def __init__(
        self,
        message: str | None = None,
        attempts: int = 0,
        **kwargs: Any,
    ) -> None:
        self.attempts = attempts
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["attempts"] = self.attempts
        return result


class InvariantViolation(ScenarioError, AssertionError):
    """A command's postcondition failed inside apply().

    Subclasses AssertionError, so a plain ``assert`` and an explicit
    ``raise InvariantViolation(...)`` are reported the same way.
    """

    error_code = ErrorCode.INVARIANT_VIOLATION
    default_message = "Invariant violated"

"""Custom exception hierarchy for SynthQA.

SynthQA errors carry:
- A structured error code for programmatic handling
- Context describing where in a run the error happened
- Actionable suggestions for recovery

Errors raised by user code inside steps and hooks are never wrapped: the
runner records them as-is on the step or journey result. The classes here
are only raised by SynthQA itself (bad configuration, hooks registered in the
wrong scope, unusable reporters).

Example:
    try:
        controller.add_hook(HookKind.BEFORE, callback)
    except SynthQAError as e:
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
    """Standardized error codes for SynthQA.

    Error codes are organized by category:
    - E2xx: Configuration and validation errors
    - E3xx: Hook errors
    - E4xx: Journey execution errors
    - E6xx: Reporter errors
    - E9xx: Unknown/internal errors
    """

    # Validation errors (E2xx)
    VALIDATION_FAILED = "E201"
    INVALID_CONFIG = "E202"
    INVALID_JOURNEY = "E203"

    # Hook errors (E3xx)
    INVALID_HOOK = "E301"

    # Journey execution errors (E4xx)
    JOURNEY_FAILED = "E401"

    # Reporter errors (E6xx)
    REPORTER_ERROR = "E602"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "unknown"
        elif code_num < 300:
            return "validation"
        elif code_num < 400:
            return "hook"
        elif code_num < 500:
            return "journey"
        elif code_num < 700:
            return "reporter"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        journey_name: Name of the journey being registered or executed
        step_name: Name of the current step
        extra: Additional context-specific information
        timestamp: When the error occurred
    """

    journey_name: str | None = None
    step_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "journey_name": self.journey_name,
            "step_name": self.step_name,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.journey_name:
            parts.append(f"journey={self.journey_name}")
        if self.step_name:
            parts.append(f"step={self.step_name}")
        return " > ".join(parts) if parts else "unknown location"


class SynthQAError(Exception):
    """Base exception for all SynthQA errors.

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


class ConfigError(SynthQAError):
    """Configuration could not be loaded or failed validation."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check synthqa.yaml for typos in option names",
        "Environment variables must use the SYNTHQA_ prefix",
        "Valid screenshot modes are: on, off, only-on-failure",
    ]


class HookRegistrationError(SynthQAError):
    """A hook was registered for a kind its scope does not support."""

    error_code = ErrorCode.INVALID_HOOK
    default_message = "Hook registered in the wrong scope"
    default_suggestions = [
        "Register before_all/after_all hooks on the controller",
        "Register before/after hooks from inside a journey builder",
    ]


class JourneyDefinitionError(SynthQAError):
    """A journey or step definition is malformed."""

    error_code = ErrorCode.INVALID_JOURNEY
    default_message = "Invalid journey definition"


class ReporterError(SynthQAError):
    """A reporter could not be resolved or constructed."""

    error_code = ErrorCode.REPORTER_ERROR
    default_message = "Reporter error"
    default_suggestions = [
        "Use one of the built-in reporter names: default, json",
        "Custom reporters must be classes accepting (bus, output=...)",
    ]

"""SynthQA Error Handling Module.

Exception hierarchy with error codes and structured context.
"""

from synthqa.errors.base import (
    ConfigError,
    ErrorCode,
    ErrorContext,
    HookRegistrationError,
    JourneyDefinitionError,
    ReporterError,
    SynthQAError,
)

__all__ = [
    "ConfigError",
    "ErrorCode",
    "ErrorContext",
    "HookRegistrationError",
    "JourneyDefinitionError",
    "ReporterError",
    "SynthQAError",
]

"""Reporters module for SynthQA.

Provides the built-in run reporters:
- ConsoleReporter: Human-readable output rendered with rich ("default")
- JSONReporter: Newline-delimited JSON, acknowledges every journey end ("json")
"""

from __future__ import annotations

import logging
from typing import Any

from synthqa.errors import ReporterError
from synthqa.reporters.base import BaseReporter
from synthqa.reporters.console import ConsoleReporter
from synthqa.reporters.json_report import JSONReporter

logger = logging.getLogger(__name__)

REPORTERS: dict[str, type[BaseReporter]] = {
    "default": ConsoleReporter,
    "json": JSONReporter,
}


def resolve_reporter(selector: Any = None) -> type[BaseReporter]:
    """Resolve a reporter name or class to a reporter class.

    Args:
        selector: Built-in reporter name, a ``BaseReporter`` subclass, or None
            for the default reporter.

    Returns:
        The reporter class to instantiate.

    Raises:
        ReporterError: If ``selector`` is neither a name nor a reporter class.
    """
    if selector is None:
        return REPORTERS["default"]
    if isinstance(selector, str):
        if selector not in REPORTERS:
            logger.warning(f"Unknown reporter '{selector}', using default")
            return REPORTERS["default"]
        return REPORTERS[selector]
    if isinstance(selector, type) and issubclass(selector, BaseReporter):
        return selector
    raise ReporterError(
        message=f"Invalid reporter: {selector!r}",
        suggestions=[f"Use one of {sorted(REPORTERS)} or a BaseReporter subclass"],
    )


__all__ = [
    "REPORTERS",
    "BaseReporter",
    "ConsoleReporter",
    "JSONReporter",
    "resolve_reporter",
]

"""Logging setup for the ``synthqa`` logger namespace.

Modules log through ``logging.getLogger(__name__)``; this module only decides
how those records are rendered:
- JSON lines for log shipping (``StructuredFormatter``)
- Colored single lines for terminals (``HumanReadableFormatter``)

Records emitted while a journey runs carry the journey name through
``log_context``:

    >>> configure_logging(level="DEBUG")
    >>> with log_context(journey="checkout"):
    ...     logger.debug("Runner: start step (open store)")
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, TextIO

ROOT_LOGGER = "synthqa"

_context_fields: ContextVar[dict[str, Any] | None] = ContextVar("synthqa_log_context", default=None)


class StructuredFormatter(logging.Formatter):
    """Format records as one JSON object per line.

    Attributes:
        include_location: Whether to include file/line/function in output.
        extra_fields: Static fields added to every record.
    """

    def __init__(
        self,
        include_location: bool = False,
        extra_fields: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_location:
            log_data["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        context = _context_fields.get()
        if context:
            log_data["context"] = dict(context)

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in self.extra_fields.items():
            log_data.setdefault(key, value)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """Colored, single-line formatter for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, stream: TextIO | None = None) -> None:
        super().__init__()
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    @staticmethod
    def _supports_color(stream: TextIO) -> bool:
        if os.environ.get("NO_COLOR"):
            return False
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            level = f"{color}{record.levelname:8}{self.RESET}"
        else:
            level = f"{record.levelname:8}"

        base = f"{timestamp} {level} [{record.name}] {record.getMessage()}"

        context = _context_fields.get()
        if context:
            base += " | " + " ".join(f"{k}={v}" for k, v in context.items())

        if record.exc_info:
            base += f"\n{self.formatException(record.exc_info)}"

        return base


def configure_logging(
    level: int | str = logging.WARNING,
    json_output: bool = False,
    stream: TextIO | None = None,
    include_location: bool = False,
) -> logging.Handler:
    """Install a single handler on the ``synthqa`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Minimum log level, as a number or a name such as ``"DEBUG"``.
        json_output: Emit JSON lines instead of human-readable lines.
        stream: Destination stream, stderr by default so reporter output on
            stdout stays clean.
        include_location: Include file/line/function in JSON output.

    Returns:
        The installed handler.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    stream = stream or sys.stderr
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.handlers.clear()
    root_logger.propagate = False

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    if json_output:
        handler.setFormatter(StructuredFormatter(include_location=include_location))
    else:
        handler.setFormatter(HumanReadableFormatter(stream=stream))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Add fields to every record logged inside the block."""
    current = dict(_context_fields.get() or {})
    current.update(kwargs)
    token = _context_fields.set(current)
    try:
        yield
    finally:
        _context_fields.reset(token)


def get_context() -> dict[str, Any]:
    return dict(_context_fields.get() or {})

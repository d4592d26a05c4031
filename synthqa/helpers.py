"""Small shared utilities: clocks, source locations and journey matching."""

from __future__ import annotations

import fnmatch
import inspect
import time
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """Source location where a journey or step was defined."""

    file: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


def monotonic_time_in_seconds() -> float:
    """Monotonic clock used for all start/end timings."""
    return time.monotonic()


def get_timestamp() -> int:
    """Wall clock timestamp in microseconds since the epoch."""
    return time.time_ns() // 1000


def get_caller_location(depth: int = 2) -> Location | None:
    """Return the location of the frame ``depth`` levels above the caller.

    ``depth=1`` is the function calling this helper, ``depth=2`` is whoever
    called that function (the usual case for registration APIs).
    """
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                return None
            frame = frame.f_back
        if frame is None:
            return None
        return Location(file=frame.f_code.co_filename, line=frame.f_lineno)
    finally:
        del frame


def is_match(
    name: str,
    tags: Iterable[str],
    match: str | None = None,
    tag_patterns: Iterable[str] | None = None,
) -> bool:
    """Check a journey against the ``match`` and ``tags`` run filters.

    ``match`` is a glob applied to the journey name; a plain word with no
    glob characters matches as a substring. ``tag_patterns`` are globs and the
    journey qualifies when any of its tags matches any pattern. Both filters
    must pass when both are given.
    """
    if match:
        pattern = match if any(c in match for c in "*?[") else f"*{match}*"
        if not fnmatch.fnmatchcase(name, pattern):
            return False

    patterns = list(tag_patterns or [])
    if patterns:
        journey_tags = list(tags)
        if not any(fnmatch.fnmatchcase(tag, p) for tag in journey_tags for p in patterns):
            return False

    return True

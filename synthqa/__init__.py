"""SynthQA - Synthetic Monitoring Journey Runner.

SynthQA executes scripted browser journeys against a live site and reports
the outcome of every step. Journeys are plain builder functions that register
steps when a run starts; drivers and instrumentation come from a pluggable
``Gatherer``.

Key Features:
    - Journey DSL: Builder functions registering ordered steps and hooks
    - Step Policy: Every step after a failure is reported as skipped
    - Global Hooks: before_all/after_all around the whole run
    - Run Filters: Match journeys by name glob and tags, or dry-run them
    - Reporters: Rich console output and newline-delimited JSON

Example:
    >>> from synthqa import RunController, RunOptions
    >>>
    >>> controller = RunController(gatherer)
    >>>
    >>> @controller.journey("search", tags=["smoke"])
    ... def search(j):
    ...     j.step("open home", lambda: j.page.goto(j.params["url"]))
    ...     j.step("search", lambda: j.page.fill("#q", "shoes"))
    >>>
    >>> results = await controller.run(RunOptions(params={"url": "https://example.com"}))
"""

from synthqa.config import SynthQAConfig, load_config
from synthqa.core import (
    EventBus,
    EventKind,
    HookArgs,
    HookKind,
    Journey,
    JourneyBuilder,
    JourneyResult,
    JourneyStatus,
    MonitorConfig,
    RunOptions,
    RunResult,
    ScreenshotMode,
    Step,
    StepResult,
    StepStatus,
)
from synthqa.errors import ConfigError, HookRegistrationError, ReporterError, SynthQAError
from synthqa.observability import configure_logging
from synthqa.reporters import BaseReporter, ConsoleReporter, JSONReporter
from synthqa.runner import RunController

__version__ = "0.1.0"

__all__ = [
    "BaseReporter",
    "ConfigError",
    "ConsoleReporter",
    "EventBus",
    "EventKind",
    "HookArgs",
    "HookKind",
    "HookRegistrationError",
    "JSONReporter",
    "Journey",
    "JourneyBuilder",
    "JourneyResult",
    "JourneyStatus",
    "MonitorConfig",
    "ReporterError",
    "RunController",
    "RunOptions",
    "RunResult",
    "ScreenshotMode",
    "Step",
    "StepResult",
    "StepStatus",
    "SynthQAConfig",
    "SynthQAError",
    "__version__",
    "configure_logging",
    "load_config",
]

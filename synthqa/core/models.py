"""Core domain models for SynthQA.

This module defines the building blocks of a run:
- Step: One unit of work inside a journey
- Journey: A named scenario whose steps are produced by a builder callback
- MonitorConfig: Scheduling/location metadata attached to journeys
- RunOptions: Immutable snapshot of the options for one run
- StepResult / JourneyResult: Structured outcomes

Journeys do not hold a fixed list of steps. Their builder callback is invoked
at the start of every run and registers steps through a ``JourneyBuilder``
(see ``synthqa.core.context``):

    >>> def checkout(j):
    ...     @j.step("open store")
    ...     async def _():
    ...         await j.page.goto("https://shop.example.com")
    ...
    ...     j.step("add to cart", add_to_cart)
    >>>
    >>> journey = Journey(name="checkout", callback=checkout, tags=["shop"])
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from synthqa.core.hooks import HookCallback, HookKind, HookRegistry, HookScope
from synthqa.errors import ErrorContext, JourneyDefinitionError
from synthqa.helpers import Location, is_match

if TYPE_CHECKING:
    from synthqa.core.context import JourneyBuilder


StepCallback = Callable[[], Awaitable[None] | None]
JourneyCallback = Callable[["JourneyBuilder"], None]


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class JourneyStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ScreenshotMode(str, Enum):
    """When step screenshots are captured.

    ``only-on-failure`` still captures every step; reporters drop the
    screenshots of passing steps.
    """

    ON = "on"
    OFF = "off"
    ONLY_ON_FAILURE = "only-on-failure"


@dataclass
class Step:
    """A single unit of work in a journey.

    Attributes:
        name: Step name, shown by reporters.
        callback: Zero-argument callable; may return an awaitable.
        index: 1-based position within the journey.
        location: Where the step was registered.
    """

    name: str
    callback: StepCallback
    index: int
    location: Location | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "index": self.index,
            "location": str(self.location) if self.location else None,
        }


class MonitorConfig(BaseModel):
    """Monitor metadata for a journey or for all journeys of a run."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str | None = None
    name: str | None = None
    schedule: int | None = Field(default=None, ge=1, description="Interval in minutes")
    enabled: bool | None = None
    tags: list[str] | None = None
    locations: list[str] | None = None
    private_locations: list[str] | None = None
    throttling: dict[str, Any] | None = None
    params: dict[str, Any] | None = None

    def merged_with(self, override: MonitorConfig | None) -> MonitorConfig:
        """Return a copy where values explicitly set on ``override`` win."""
        if override is None:
            return self.model_copy()
        return self.model_copy(update=override.model_dump(exclude_unset=True))


class Journey:
    """A named scenario made of ordered steps.

    Attributes:
        name: Journey name; also the key of its entry in the run result.
        id: Unique identifier, defaults to ``name``.
        callback: Builder invoked at the start of each run to register steps.
        tags: Tags used by the ``tags`` run filter.
        location: Where the journey was defined.
        steps: Steps registered by the most recent build.
        hooks: Journey-scoped ``before``/``after`` hooks.
        monitor: Journey-level monitor settings.
    """

    def __init__(
        self,
        name: str,
        callback: JourneyCallback,
        *,
        id: str | None = None,
        tags: list[str] | None = None,
        location: Location | None = None,
        monitor: MonitorConfig | None = None,
    ) -> None:
        if not name or not name.strip():
            raise JourneyDefinitionError(message="Journey name cannot be empty")
        if not callable(callback):
            raise JourneyDefinitionError(
                message="Journey callback must be callable",
                context=ErrorContext(journey_name=name),
            )
        self.name = name
        self.id = id or name
        self.callback = callback
        self.tags = list(tags or [])
        self.location = location
        self.monitor = monitor
        self.steps: list[Step] = []
        self.hooks = HookRegistry(HookScope.JOURNEY, owner=name)

    def __repr__(self) -> str:
        return f"Journey(name={self.name!r}, id={self.id!r}, steps={len(self.steps)})"

    def add_step(
        self,
        name: str,
        callback: StepCallback,
        location: Location | None = None,
    ) -> Step:
        if not callable(callback):
            raise JourneyDefinitionError(
                message=f"Step '{name}' callback must be callable",
                context=ErrorContext(journey_name=self.name, step_name=name),
            )
        step = Step(name=name, callback=callback, index=len(self.steps) + 1, location=location)
        self.steps.append(step)
        return step

    def add_hook(self, kind: HookKind | str, callback: HookCallback) -> None:
        self.hooks.add_hook(kind, callback)

    def update_monitor(self, config: MonitorConfig | dict[str, Any]) -> None:
        if isinstance(config, dict):
            config = MonitorConfig(**config)
        self.monitor = config if self.monitor is None else self.monitor.merged_with(config)

    def effective_monitor(self, defaults: MonitorConfig | None = None) -> MonitorConfig:
        """Global monitor defaults overlaid with this journey's settings."""
        base = defaults or MonitorConfig()
        merged = base.merged_with(self.monitor)
        if merged.id is None:
            merged.id = self.id
        if merged.name is None:
            merged.name = self.name
        return merged

    def reset(self) -> None:
        """Drop steps and hooks registered by a previous build."""
        self.steps.clear()
        self.hooks.clear()

    def is_match(self, match: str | None, tags: list[str] | None) -> bool:
        return is_match(self.name, self.tags, match, tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "tags": self.tags,
            "location": str(self.location) if self.location else None,
        }


class RunOptions(BaseModel):
    """Immutable options for a single run.

    Attributes:
        environment: Environment name handed to hooks.
        params: Run parameters handed to hooks and journey builders.
        match: Glob (or substring) filter on journey names.
        tags: Glob filters on journey tags.
        dry_run: Register journeys with reporters without executing anything.
        pause_on_error: Wait for a signal after each failed step.
        screenshots: Screenshot capture mode.
        metrics: Attach performance metrics to succeeded steps.
        reporter: Built-in reporter name or a reporter class.
        output: Text stream reporters write to (stdout when unset).
        driver_options: Opaque options passed through to the Gatherer.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    environment: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    match: str | None = None
    tags: list[str] | None = None
    dry_run: bool = False
    pause_on_error: bool = False
    screenshots: ScreenshotMode = ScreenshotMode.ON
    metrics: bool = False
    reporter: Any = None
    output: Any = None
    driver_options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("params", "driver_options", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class StepResult(BaseModel):
    """Outcome of one step.

    ``end`` is the monotonic time at which the step body finished, taken
    before any screenshot is captured.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: StepStatus = StepStatus.SUCCEEDED
    url: str | None = None
    metrics: Any = None
    error: BaseException | None = None
    end: float | None = None


class JourneyResult(BaseModel):
    """Outcome of one journey."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: JourneyStatus = JourneyStatus.SUCCEEDED
    error: BaseException | None = None


RunResult = dict[str, JourneyResult]

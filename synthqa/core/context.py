"""Execution and build contexts for a single journey run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from synthqa.core.hooks import HookCallback, HookKind
from synthqa.core.models import Journey, MonitorConfig, Step, StepCallback
from synthqa.helpers import get_caller_location

if TYPE_CHECKING:
    from synthqa.core.gatherer import Driver, PluginManager


@dataclass
class JourneyContext:
    """Everything a journey needs while it executes.

    Attributes:
        start: Monotonic start time of the journey.
        driver: Automation handles supplied by the Gatherer.
        plugin_manager: Instrumentation collector for this journey.
        params: Run parameters.
    """

    start: float
    driver: Driver
    plugin_manager: PluginManager
    params: dict[str, Any] = field(default_factory=dict)


class JourneyBuilder:
    """Handed to a journey's builder callback.

    Exposes the driver handles and run params, and is the only way to
    register steps and journey-scoped hooks. A builder is created for one
    build of one journey, so registrations can never leak into another
    journey or another run.

    Example:
        >>> def login(j):
        ...     @j.before
        ...     async def seed(args):
        ...         ...
        ...
        ...     @j.step("open login page")
        ...     async def _():
        ...         await j.page.goto(j.params["url"])
    """

    def __init__(self, journey: Journey, driver: Driver, params: dict[str, Any]) -> None:
        self.journey = journey
        self.driver = driver
        self.params = params

    @property
    def browser(self) -> Any:
        return self.driver.browser

    @property
    def context(self) -> Any:
        return self.driver.context

    @property
    def page(self) -> Any:
        return self.driver.page

    @property
    def request(self) -> Any:
        return self.driver.request

    def step(
        self,
        name: str,
        callback: StepCallback | None = None,
    ) -> Step | Callable[[StepCallback], StepCallback]:
        """Register a step, directly or as a decorator."""
        location = get_caller_location()
        if callback is not None:
            return self.journey.add_step(name, callback, location)

        def decorator(func: StepCallback) -> StepCallback:
            self.journey.add_step(name, func, location)
            return func

        return decorator

    def before(self, callback: HookCallback) -> HookCallback:
        self.journey.add_hook(HookKind.BEFORE, callback)
        return callback

    def after(self, callback: HookCallback) -> HookCallback:
        self.journey.add_hook(HookKind.AFTER, callback)
        return callback

    def monitor(self, config: MonitorConfig | dict[str, Any] | None = None, **kwargs: Any) -> None:
        """Override monitor settings for this journey."""
        if config is None:
            config = MonitorConfig(**kwargs)
        self.journey.update_monitor(config)

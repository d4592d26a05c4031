"""Run controller: registration, global hooks and the run lifecycle.

A ``RunController`` owns the journeys and run-global hooks registered on it
and executes them with ``run()``:

    >>> controller = RunController(gatherer)
    >>>
    >>> @controller.journey("checkout", tags=["shop"])
    ... def checkout(j):
    ...     j.step("open store", lambda: j.page.goto("https://shop.example.com"))
    >>>
    >>> results = await controller.run(RunOptions(reporter="json"))
    >>> results["checkout"].status
    <JourneyStatus.SUCCEEDED: 'succeeded'>

Only one run can be active on a controller at a time. A second ``run()``
call while one is in progress returns an empty result without side effects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from synthqa.core.events import End, EventBus, JourneyRegister, Start
from synthqa.core.hooks import HookArgs, HookCallback, HookKind, HookRegistry, HookScope
from synthqa.core.models import (
    Journey,
    JourneyCallback,
    JourneyResult,
    MonitorConfig,
    RunOptions,
    RunResult,
)
from synthqa.helpers import get_caller_location
from synthqa.reporters import resolve_reporter
from synthqa.runner.cache import RunCache
from synthqa.runner.journey_executor import JourneyExecutor
from synthqa.runner.step_executor import PauseSignal, StepExecutor

if TYPE_CHECKING:
    from synthqa.config.settings import SynthQAConfig
    from synthqa.core.gatherer import Gatherer
    from synthqa.reporters.base import BaseReporter

logger = logging.getLogger(__name__)


class RunController:
    """Sequences a run of every registered journey.

    Attributes:
        gatherer: Factory of drivers and plugin managers.
        bus: Event stream reporters subscribe to.
        cache: Run-scoped artifact cache.
        journeys: Registered journeys, in registration order.
        hooks: Run-global ``before_all``/``after_all`` hooks.
        monitor: Global monitor defaults.
        active: Whether a run is in progress.
        hook_error: First ``before_all`` failure of the current run.
    """

    def __init__(
        self,
        gatherer: Gatherer,
        *,
        cache: RunCache | None = None,
        cache_path: str | Path | None = None,
        pause: PauseSignal | None = None,
    ) -> None:
        self.gatherer = gatherer
        self.bus = EventBus()
        self.cache = cache or RunCache(cache_path)
        self.journeys: list[Journey] = []
        self.hooks = HookRegistry(HookScope.RUN)
        self.monitor: MonitorConfig | None = None
        self.active = False
        self.hook_error: BaseException | None = None
        self.reporter: BaseReporter | None = None
        self.executor = JourneyExecutor(
            gatherer,
            self.bus,
            StepExecutor(self.bus, self.cache, pause=pause),
        )

    @classmethod
    def from_config(
        cls,
        gatherer: Gatherer,
        config: SynthQAConfig,
        *,
        pause: PauseSignal | None = None,
    ) -> RunController:
        """Create a controller using the configured cache root and monitor defaults."""
        controller = cls(gatherer, cache_path=config.cache_dir, pause=pause)
        if config.monitor is not None:
            controller.update_monitor(config.monitor)
        return controller

    @property
    def current_journey(self) -> Journey | None:
        """Journey being built or executed; None outside a journey's window."""
        return self.executor.current_journey

    def add_journey(self, journey: Journey) -> Journey:
        self.journeys.append(journey)
        logger.debug(f"Registered journey: {journey.name}")
        return journey

    def journey(
        self,
        name: str,
        *,
        id: str | None = None,
        tags: list[str] | None = None,
    ) -> Callable[[JourneyCallback], Journey]:
        """Decorator registering a builder function as a journey.

        Example:
            >>> @controller.journey("login", tags=["auth"])
            ... def login(j):
            ...     j.step("open page", open_page)
        """
        location = get_caller_location()

        def decorator(callback: JourneyCallback) -> Journey:
            return self.add_journey(
                Journey(name, callback, id=id, tags=tags, location=location)
            )

        return decorator

    def add_hook(self, kind: HookKind | str, callback: HookCallback) -> None:
        self.hooks.add_hook(kind, callback)

    def before_all(self, callback: HookCallback) -> HookCallback:
        self.add_hook(HookKind.BEFORE_ALL, callback)
        return callback

    def after_all(self, callback: HookCallback) -> HookCallback:
        self.add_hook(HookKind.AFTER_ALL, callback)
        return callback

    def update_monitor(self, config: MonitorConfig | dict[str, Any]) -> None:
        """Merge ``config`` into the global monitor defaults."""
        if isinstance(config, dict):
            config = MonitorConfig(**config)
        self.monitor = config if self.monitor is None else self.monitor.merged_with(config)

    def init_reporter(self, options: RunOptions) -> BaseReporter:
        reporter_cls = resolve_reporter(options.reporter)
        reporter = reporter_cls(self.bus, output=options.output, cache=self.cache)
        self.executor.requires_ack = reporter.requires_ack
        return reporter

    async def run(self, options: RunOptions | None = None) -> RunResult:
        """Run every registered journey that passes the run filters.

        Returns:
            Journey results keyed by journey name. Empty in dry-run mode and
            when a run is already active.

        Raises:
            Exception: Any failure of the ``after_all`` hooks, after the
                controller has been reset.
        """
        if self.active:
            logger.warning("Runner: a run is already active, ignoring run request")
            return {}

        options = options or RunOptions()
        result: RunResult = {}
        self.active = True
        try:
            self.cache.create()
            self.reporter = self.init_reporter(options)
            logger.debug(f"Runner: run {len(self.journeys)} journeys")
            self.bus.emit(Start(num_journeys=len(self.journeys)))

            hook_args = HookArgs(env=options.environment, params=dict(options.params))
            if not options.dry_run:
                await self.run_before_all(hook_args)

            for journey in self.journeys:
                if options.dry_run:
                    self.bus.emit(JourneyRegister(journey=journey))
                    continue
                if not journey.is_match(options.match, options.tags):
                    logger.debug(f"Runner: skip journey ({journey.name}), filtered out")
                    continue
                result[journey.name] = await self.run_journey(journey, options)

            await self.gatherer.stop()
            if not options.dry_run:
                await self.hooks.run_batch(HookKind.AFTER_ALL, hook_args)
        finally:
            self.reset()
        return result

    async def run_before_all(self, args: HookArgs) -> None:
        try:
            await self.hooks.run_batch(HookKind.BEFORE_ALL, args)
        except Exception as e:
            logger.error(f"Runner: before_all hook failed, every journey will be reported as failed: {e}")
            self.hook_error = e

    async def run_journey(self, journey: Journey, options: RunOptions) -> JourneyResult:
        if self.hook_error is not None:
            return await self.executor.run_fake_journey(journey, options, self.hook_error)
        return await self.executor.run_journey(journey, options)

    def reset(self) -> None:
        """Return the controller to its idle state.

        Removes the run cache, forgets registered journeys and the sticky
        hook error, emits ``end`` and detaches the reporter.
        """
        logger.debug("Runner: reset")
        try:
            self.cache.remove()
            self.journeys = []
            self.executor.current_journey = None
            self.hook_error = None
            self.active = False
            self.bus.emit(End())
        finally:
            if self.reporter is not None:
                self.reporter.detach()
                self.reporter = None

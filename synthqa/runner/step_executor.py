"""Step execution with instrumentation and the step sequencing policy."""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from synthqa.core.events import EventBus, StepEnd, StepStart
from synthqa.core.gatherer import PluginKind
from synthqa.core.models import ScreenshotMode, StepResult, StepStatus
from synthqa.helpers import monotonic_time_in_seconds

if TYPE_CHECKING:
    from synthqa.core.context import JourneyContext
    from synthqa.core.models import Journey, RunOptions, Step
    from synthqa.runner.cache import RunCache

logger = logging.getLogger(__name__)

PauseSignal = Callable[[], Awaitable[Any]]


async def wait_for_stdin_line() -> None:
    """Block until a line is entered on stdin."""
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, sys.stdin.readline)


class StepExecutor:
    """Runs steps and converts their failures into results.

    A step never raises out of ``run_step``: errors become
    ``StepResult.error``. ``run_steps`` skips every step after the first
    failure and still reports each skipped step.
    """

    def __init__(
        self,
        bus: EventBus,
        cache: RunCache,
        pause: PauseSignal | None = None,
    ) -> None:
        self.bus = bus
        self.cache = cache
        self.pause = pause or wait_for_stdin_line

    async def run_step(
        self,
        step: Step,
        context: JourneyContext,
        options: RunOptions,
    ) -> StepResult:
        data = StepResult(status=StepStatus.SUCCEEDED)
        logger.debug(f"Runner: start step ({step.name})")
        page = context.driver.page
        plugin_manager = context.plugin_manager

        # The first navigation request is the step's URL, even when the
        # navigation itself fails and the page stays on about:blank.
        def capture_url(request: Any) -> None:
            if data.url is None and request.is_navigation_request():
                data.url = request.url
                page.remove_listener("request", capture_url)

        page.on("request", capture_url)
        try:
            plugin_manager.on_step(step)
            outcome = step.callback()
            if inspect.isawaitable(outcome):
                await outcome
            if options.metrics:
                performance = plugin_manager.get(PluginKind.PERFORMANCE)
                data.metrics = await performance.get_metrics()
        except Exception as e:
            logger.debug(f"Runner: step ({step.name}) failed: {e!r}")
            data.status = StepStatus.FAILED
            data.error = e
        finally:
            data.end = monotonic_time_in_seconds()
            if data.url is None:
                page.remove_listener("request", capture_url)
                data.url = page.url
            if options.screenshots is not ScreenshotMode.OFF:
                await self.capture_screenshot(page, step)
        logger.debug(f"Runner: end step ({step.name})")
        return data

    async def capture_screenshot(self, page: Any, step: Step) -> None:
        """Capture the page and persist it to the run cache.

        A page that cannot be captured (closed, crashed) yields no
        screenshot rather than failing the step.
        """
        try:
            await page.wait_for_load_state("load")
            buffer = await page.screenshot(type="jpeg", quality=80)
        except Exception as e:
            logger.debug(f"Runner: screenshot for step ({step.name}) unavailable: {e!r}")
            return
        if buffer:
            self.cache.write_screenshot(step, buffer)

    async def run_steps(
        self,
        journey: Journey,
        context: JourneyContext,
        options: RunOptions,
    ) -> list[StepResult]:
        results: list[StepResult] = []
        skip = False
        for step in journey.steps:
            start = monotonic_time_in_seconds()
            self.bus.emit(StepStart(journey=journey, step=step))
            if skip:
                data = StepResult(status=StepStatus.SKIPPED)
            else:
                data = await self.run_step(step, context, options)
                if data.error is not None:
                    skip = True
            end = data.end if data.end is not None else monotonic_time_in_seconds()
            self.bus.emit(
                StepEnd(
                    journey=journey,
                    step=step,
                    status=data.status,
                    start=start,
                    end=end,
                    url=data.url,
                    metrics=data.metrics,
                    error=data.error,
                )
            )
            if options.pause_on_error and data.error is not None:
                logger.info(f"Paused after failed step ({step.name}), waiting for signal")
                await self.pause()
            results.append(data)
        return results

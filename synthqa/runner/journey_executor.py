"""Journey lifecycle: context setup, hooks, steps, reporting and teardown."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from synthqa.core.context import JourneyBuilder, JourneyContext
from synthqa.core.events import Delivery, EventBus, JourneyEnd, JourneyStart
from synthqa.core.hooks import HookArgs, HookKind
from synthqa.core.models import JourneyResult, JourneyStatus, StepStatus
from synthqa.helpers import get_timestamp, monotonic_time_in_seconds
from synthqa.observability.logging import log_context
from synthqa.runner.step_executor import StepExecutor

if TYPE_CHECKING:
    from synthqa.core.gatherer import Gatherer
    from synthqa.core.models import Journey, RunOptions

logger = logging.getLogger(__name__)


class JourneyExecutor:
    """Executes one journey at a time.

    Two paths exist. ``run_journey`` is the full lifecycle. ``run_fake_journey``
    reports a journey as failed without touching the driver, and is used
    once a ``before_all`` hook has failed so every journey still gets exactly
    one reported result.

    Attributes:
        current_journey: The journey being built or executed, if any.
        requires_ack: Wait for ``journey:end:reported`` after each
            ``journey:end`` (set when the active reporter asks for it).
    """

    def __init__(
        self,
        gatherer: Gatherer,
        bus: EventBus,
        steps: StepExecutor,
        requires_ack: bool = False,
    ) -> None:
        self.gatherer = gatherer
        self.bus = bus
        self.steps = steps
        self.requires_ack = requires_ack
        self.current_journey: Journey | None = None

    @property
    def _end_delivery(self) -> Delivery:
        return Delivery.FLUSH_AND_WAIT if self.requires_ack else Delivery.FIRE_AND_FORGET

    async def create_context(self, options: RunOptions) -> JourneyContext:
        start = monotonic_time_in_seconds()
        driver = await self.gatherer.setup_driver(options)
        try:
            plugin_manager = await self.gatherer.begin_recording(driver, options)
        except Exception:
            await self.gatherer.dispose(driver)
            raise
        return JourneyContext(
            start=start,
            driver=driver,
            plugin_manager=plugin_manager,
            params=dict(options.params),
        )

    def register_journey(self, journey: Journey, context: JourneyContext) -> None:
        """Emit ``journey:start`` and build the journey's steps for this run."""
        self.current_journey = journey
        self.bus.emit(
            JourneyStart(journey=journey, timestamp=get_timestamp(), params=context.params)
        )
        journey.reset()
        journey.callback(JourneyBuilder(journey, context.driver, context.params))

    async def end_journey(
        self,
        journey: Journey,
        context: JourneyContext,
        result: JourneyResult,
        options: RunOptions,
    ) -> None:
        plugin_output = dict(await context.plugin_manager.output())
        browserconsole = plugin_output.pop("browserconsole", None) or []
        await self.bus.deliver(
            JourneyEnd(
                journey=journey,
                status=result.status,
                error=result.error,
                start=context.start,
                end=monotonic_time_in_seconds(),
                options=options,
                plugin_output=plugin_output,
                browserconsole=browserconsole if result.status is JourneyStatus.FAILED else [],
            ),
            self._end_delivery,
        )

    async def run_journey(self, journey: Journey, options: RunOptions) -> JourneyResult:
        with log_context(journey=journey.name):
            return await self._run_journey(journey, options)

    async def _run_journey(self, journey: Journey, options: RunOptions) -> JourneyResult:
        result = JourneyResult(status=JourneyStatus.SUCCEEDED)
        logger.debug(f"Runner: start journey ({journey.name})")
        try:
            context = await self.create_context(options)
        except Exception as e:
            logger.exception(f"Runner: could not set up journey ({journey.name})")
            return await self._report_failure(journey, options, e)

        try:
            self.register_journey(journey, context)
            hook_args = HookArgs(env=options.environment, params=dict(options.params))
            await journey.hooks.run_batch(HookKind.BEFORE, hook_args)
            step_results = await self.steps.run_steps(journey, context, options)
            failed = next((r for r in step_results if r.status is StepStatus.FAILED), None)
            if failed is not None:
                result.status = JourneyStatus.FAILED
                result.error = failed.error
            await journey.hooks.run_batch(HookKind.AFTER, hook_args)
        except Exception as e:
            logger.debug(f"Runner: journey ({journey.name}) failed: {e!r}")
            result.status = JourneyStatus.FAILED
            result.error = e
        finally:
            try:
                await self.end_journey(journey, context, result, options)
            except Exception as e:
                logger.exception(f"Runner: could not report end of journey ({journey.name})")
                result.status = JourneyStatus.FAILED
                result.error = result.error or e
            finally:
                self.current_journey = None
                await self.gatherer.dispose(context.driver)
        logger.debug(f"Runner: end journey ({journey.name})")
        return result

    async def run_fake_journey(
        self,
        journey: Journey,
        options: RunOptions,
        error: BaseException,
    ) -> JourneyResult:
        """Report ``journey`` as failed with ``error`` without executing it."""
        logger.debug(f"Runner: reporting journey ({journey.name}) as failed by hook error")
        return await self._report_failure(journey, options, error)

    async def _report_failure(
        self,
        journey: Journey,
        options: RunOptions,
        error: BaseException,
    ) -> JourneyResult:
        start = monotonic_time_in_seconds()
        self.current_journey = journey
        result = JourneyResult(status=JourneyStatus.FAILED, error=error)
        try:
            self.bus.emit(
                JourneyStart(journey=journey, timestamp=get_timestamp(), params=dict(options.params))
            )
            await self.bus.deliver(
                JourneyEnd(
                    journey=journey,
                    status=result.status,
                    error=result.error,
                    start=start,
                    end=monotonic_time_in_seconds(),
                    options=options,
                ),
                self._end_delivery,
            )
        except Exception:
            logger.exception(f"Runner: could not report failed journey ({journey.name})")
        finally:
            self.current_journey = None
        return result

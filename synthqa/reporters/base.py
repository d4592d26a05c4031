"""Abstract base reporter class for SynthQA.

Reporters consume the run's event stream and render it to an output sink.
A reporter subscribes itself to the ``EventBus`` it is constructed with and
receives every lifecycle event through the ``on_*`` methods.

Reporters that need the runner to wait until a journey's output has been
written set ``requires_ack = True`` and emit ``JourneyEndReported`` after
handling each ``journey:end``.

Example:
    >>> class CountingReporter(BaseReporter):
    ...     def on_journey_end(self, event: JourneyEnd) -> None:
    ...         self.write(f"{event.journey.name}: {event.status.value}\\n")
"""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING, Any, ClassVar, TextIO

from synthqa.core.events import (
    End,
    EventBus,
    EventKind,
    JourneyEnd,
    JourneyRegister,
    JourneyStart,
    Start,
    StepEnd,
    StepStart,
)

if TYPE_CHECKING:
    from synthqa.runner.cache import RunCache


class BaseReporter:
    """Base class for all SynthQA reporters.

    Attributes:
        bus: Event bus the reporter listens to.
        output: Text stream the reporter writes to.
        cache: Run cache holding persisted screenshots, if available.
        requires_ack: Whether the runner must wait for
            ``journey:end:reported`` after each ``journey:end``.
    """

    requires_ack: ClassVar[bool] = False

    def __init__(
        self,
        bus: EventBus,
        output: TextIO | None = None,
        cache: RunCache | None = None,
    ) -> None:
        self.bus = bus
        self.output = output or sys.stdout
        self.cache = cache
        self._subscriptions = [
            (EventKind.START, self.on_start),
            (EventKind.JOURNEY_REGISTER, self.on_journey_register),
            (EventKind.JOURNEY_START, self.on_journey_start),
            (EventKind.STEP_START, self.on_step_start),
            (EventKind.STEP_END, self.on_step_end),
            (EventKind.JOURNEY_END, self.on_journey_end),
            (EventKind.END, self.on_end),
        ]
        for kind, listener in self._subscriptions:
            bus.on(kind, listener)

    def detach(self) -> None:
        """Stop listening to the bus."""
        for kind, listener in self._subscriptions:
            self.bus.off(kind, listener)

    def write(self, text: str) -> None:
        self.output.write(text)

    def on_start(self, event: Start) -> None:
        pass

    def on_journey_register(self, event: JourneyRegister) -> None:
        pass

    def on_journey_start(self, event: JourneyStart) -> None:
        pass

    def on_step_start(self, event: StepStart) -> None:
        pass

    def on_step_end(self, event: StepEnd) -> None:
        pass

    def on_journey_end(self, event: JourneyEnd) -> None:
        pass

    def on_end(self, event: End) -> None:
        pass

    @staticmethod
    def serialize_error(error: BaseException | None) -> dict[str, Any] | None:
        """Render an exception as ``{name, message, stack}``."""
        if error is None:
            return None
        return {
            "name": type(error).__name__,
            "message": str(error),
            "stack": "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
        }

    @staticmethod
    def duration_ms(start: float, end: float) -> int:
        return max(0, int(round((end - start) * 1000)))

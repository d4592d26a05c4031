"""Typed lifecycle event stream.

The runner publishes one event per lifecycle transition. Reporters subscribe
with ``EventBus.on`` and receive events synchronously, in emission order.

Most events are fire-and-forget. ``journey:end`` can be delivered with
``Delivery.FLUSH_AND_WAIT``: the publisher then suspends until a reporter
emits ``journey:end:reported``, which guarantees a reporter has written a
journey's output before the runner tears the journey down.

Example:
    >>> bus = EventBus()
    >>> bus.on(EventKind.STEP_END, lambda e: print(e.step.name, e.status))
    >>> bus.emit(StepEnd(journey=j, step=s, status=StepStatus.SUCCEEDED, start=0, end=1))
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Union

if TYPE_CHECKING:
    from synthqa.core.models import (
        Journey,
        JourneyStatus,
        RunOptions,
        Step,
        StepStatus,
    )

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    START = "start"
    JOURNEY_REGISTER = "journey:register"
    JOURNEY_START = "journey:start"
    JOURNEY_END = "journey:end"
    JOURNEY_END_REPORTED = "journey:end:reported"
    STEP_START = "step:start"
    STEP_END = "step:end"
    END = "end"


class Delivery(str, Enum):
    """How an event is handed to subscribers."""

    FIRE_AND_FORGET = "fire-and-forget"
    FLUSH_AND_WAIT = "flush-and-wait"


@dataclass(frozen=True)
class Start:
    kind: ClassVar[EventKind] = EventKind.START

    num_journeys: int


@dataclass(frozen=True)
class JourneyRegister:
    kind: ClassVar[EventKind] = EventKind.JOURNEY_REGISTER

    journey: Journey


@dataclass(frozen=True)
class JourneyStart:
    kind: ClassVar[EventKind] = EventKind.JOURNEY_START

    journey: Journey
    timestamp: int
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class JourneyEnd:
    """Journey finished.

    ``browserconsole`` holds captured console messages and is only filled
    for failed journeys; every other plugin artifact is in ``plugin_output``.
    """

    kind: ClassVar[EventKind] = EventKind.JOURNEY_END

    journey: Journey
    status: JourneyStatus
    start: float
    end: float
    options: RunOptions
    error: BaseException | None = None
    plugin_output: dict[str, Any] = field(default_factory=dict)
    browserconsole: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class JourneyEndReported:
    kind: ClassVar[EventKind] = EventKind.JOURNEY_END_REPORTED


@dataclass(frozen=True)
class StepStart:
    kind: ClassVar[EventKind] = EventKind.STEP_START

    journey: Journey
    step: Step


@dataclass(frozen=True)
class StepEnd:
    kind: ClassVar[EventKind] = EventKind.STEP_END

    journey: Journey
    step: Step
    status: StepStatus
    start: float
    end: float
    url: str | None = None
    metrics: Any = None
    error: BaseException | None = None


@dataclass(frozen=True)
class End:
    kind: ClassVar[EventKind] = EventKind.END


Event = Union[
    Start,
    JourneyRegister,
    JourneyStart,
    JourneyEnd,
    JourneyEndReported,
    StepStart,
    StepEnd,
    End,
]

Listener = Callable[[Any], None]


class EventBus:
    """Ordered, synchronous publish/subscribe channel for run events."""

    def __init__(self) -> None:
        self._listeners: dict[EventKind, list[Listener]] = defaultdict(list)
        self._waiters: dict[EventKind, list[asyncio.Future[Any]]] = defaultdict(list)

    def on(self, kind: EventKind | str, listener: Listener) -> Listener:
        """Subscribe ``listener`` to events of ``kind``."""
        self._listeners[EventKind(kind)].append(listener)
        return listener

    def off(self, kind: EventKind | str, listener: Listener) -> None:
        listeners = self._listeners.get(EventKind(kind), [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, kind: EventKind | str) -> int:
        return len(self._listeners.get(EventKind(kind), []))

    def emit(self, event: Event) -> None:
        """Deliver ``event`` to pending waiters, then to every listener.

        Listener exceptions propagate to the emitter.
        """
        for waiter in self._waiters.pop(event.kind, []):
            if not waiter.done():
                waiter.set_result(event)

        for listener in list(self._listeners.get(event.kind, [])):
            listener(event)

    def wait_for(self, kind: EventKind | str) -> asyncio.Future[Any]:
        """Future resolved with the next event of ``kind``."""
        waiter: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._waiters[EventKind(kind)].append(waiter)
        return waiter

    async def deliver(
        self,
        event: Event,
        delivery: Delivery = Delivery.FIRE_AND_FORGET,
        ack: EventKind = EventKind.JOURNEY_END_REPORTED,
    ) -> None:
        """Emit ``event``; with FLUSH_AND_WAIT also wait for an ``ack`` event.

        The waiter is registered before emitting so an acknowledgment sent
        synchronously from inside a listener is not missed.
        """
        if delivery is Delivery.FIRE_AND_FORGET:
            self.emit(event)
            return

        waiter = self.wait_for(ack)
        try:
            self.emit(event)
        except BaseException:
            self._discard_waiter(ack, waiter)
            raise
        logger.debug(f"Runner: waiting for {ack.value}")
        await waiter

    def _discard_waiter(self, kind: EventKind, waiter: asyncio.Future[Any]) -> None:
        waiters = self._waiters.get(kind, [])
        if waiter in waiters:
            waiters.remove(waiter)
        waiter.cancel()

    def clear(self) -> None:
        """Remove every listener and cancel pending waiters."""
        self._listeners.clear()
        for waiters in self._waiters.values():
            for waiter in waiters:
                waiter.cancel()
        self._waiters.clear()

"""NDJSON reporter for machine consumption.

Writes one JSON document per line as the run progresses. Each line carries a
``type`` and an ``@timestamp`` (microseconds since the epoch):

    {"type": "journey/start", "@timestamp": 1700000000000000, "journey": {...}}
    {"type": "step/end", "@timestamp": ..., "step": {...}, "status": "failed", ...}
    {"type": "step/screenshot", "@timestamp": ..., "step": {...}, "data": "<base64>"}
    {"type": "journey/end", "@timestamp": ..., "journey": {...}, "status": "failed"}

After each ``journey:end`` the reporter flushes its output and emits
``journey:end:reported`` so the runner can tear the journey down.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, TextIO

from synthqa.core.events import JourneyEndReported
from synthqa.core.models import ScreenshotMode, StepStatus
from synthqa.helpers import get_timestamp
from synthqa.reporters.base import BaseReporter

if TYPE_CHECKING:
    from synthqa.core.events import (
        End,
        EventBus,
        JourneyEnd,
        JourneyRegister,
        JourneyStart,
        Start,
        StepEnd,
    )
    from synthqa.runner.cache import RunCache


class JSONReporter(BaseReporter):
    """Stream run events as newline-delimited JSON.

    Attributes:
        failed_steps: Indexes of failed steps in the current journey, used to
            keep only failing screenshots in ``only-on-failure`` mode.
    """

    requires_ack: ClassVar[bool] = True

    def __init__(
        self,
        bus: EventBus,
        output: TextIO | None = None,
        cache: RunCache | None = None,
    ) -> None:
        super().__init__(bus, output, cache)
        self.failed_steps: set[int] = set()

    def write_json(self, type_: str, payload: dict[str, Any]) -> None:
        document = {"type": type_, "@timestamp": get_timestamp(), **payload}
        self.write(json.dumps(document, default=self._json_serializer) + "\n")

    def on_start(self, event: Start) -> None:
        self.write_json("synthetics/metadata", {"num_journeys": event.num_journeys})

    def on_journey_register(self, event: JourneyRegister) -> None:
        self.write_json("journey/register", {"journey": event.journey.to_dict()})

    def on_journey_start(self, event: JourneyStart) -> None:
        self.failed_steps.clear()
        self.write_json(
            "journey/start",
            {"journey": event.journey.to_dict(), "params": event.params},
        )

    def on_step_end(self, event: StepEnd) -> None:
        if event.status is StepStatus.FAILED:
            self.failed_steps.add(event.step.index)
        self.write_json(
            "step/end",
            {
                "journey": {"name": event.journey.name, "id": event.journey.id},
                "step": event.step.to_dict(),
                "status": event.status.value,
                "url": event.url,
                "duration_ms": self.duration_ms(event.start, event.end),
                "metrics": event.metrics,
                "error": self.serialize_error(event.error),
            },
        )

    def on_journey_end(self, event: JourneyEnd) -> None:
        self.write_screenshots(event)
        self.write_json(
            "journey/end",
            {
                "journey": event.journey.to_dict(),
                "status": event.status.value,
                "duration_ms": self.duration_ms(event.start, event.end),
                "error": self.serialize_error(event.error),
                "plugin_output": event.plugin_output,
                "browserconsole": event.browserconsole,
            },
        )
        self.output.flush()
        self.bus.emit(JourneyEndReported())

    def write_screenshots(self, event: JourneyEnd) -> None:
        """Emit the journey's persisted screenshots, honoring the capture mode."""
        if self.cache is None or event.options.screenshots is ScreenshotMode.OFF:
            return
        only_failed = event.options.screenshots is ScreenshotMode.ONLY_ON_FAILURE
        for screenshot in self.cache.read_screenshots():
            step = screenshot["step"]
            if only_failed and step["index"] not in self.failed_steps:
                continue
            self.write_json(
                "step/screenshot",
                {
                    "journey": {"name": event.journey.name, "id": event.journey.id},
                    "step": step,
                    "data": screenshot["data"],
                },
            )
        self.cache.clear_screenshots()

    def on_end(self, event: End) -> None:
        self.output.flush()

    @staticmethod
    def _json_serializer(obj: Any) -> Any:
        """Serialize values ``json`` does not handle natively."""
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        if isinstance(obj, BaseException):
            return BaseReporter.serialize_error(obj)
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return str(obj)

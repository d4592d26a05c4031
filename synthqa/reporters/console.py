"""Rich console reporter, the default output of a run."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from synthqa.core.models import JourneyStatus, StepStatus
from synthqa.reporters.base import BaseReporter

if TYPE_CHECKING:
    from synthqa.core.events import (
        End,
        EventBus,
        JourneyEnd,
        JourneyRegister,
        JourneyStart,
        StepEnd,
    )
    from synthqa.runner.cache import RunCache


class ConsoleReporter(BaseReporter):
    """Prints journeys and their steps as they finish, then a summary.

    Example output::

        Journey: checkout
           ✓  Step: 'open store' succeeded (312 ms)
           ✗  Step: 'add to cart' failed (1204 ms)
              TimeoutError: locator not found
           -  Step: 'pay' skipped

         1 failed, 1 succeeded, 1 skipped
    """

    SYMBOLS = {
        StepStatus.SUCCEEDED: ("✓", "green"),
        StepStatus.FAILED: ("✗", "red"),
        StepStatus.SKIPPED: ("-", "cyan"),
    }

    def __init__(
        self,
        bus: EventBus,
        output: TextIO | None = None,
        cache: RunCache | None = None,
    ) -> None:
        super().__init__(bus, output, cache)
        self.console = Console(file=self.output, highlight=False, soft_wrap=True)
        self.step_counts: dict[StepStatus, int] = {status: 0 for status in StepStatus}
        self.journey_counts: dict[JourneyStatus, int] = {status: 0 for status in JourneyStatus}
        self.registered: list[str] = []
        self._step_failed = False

    def _format_duration(self, duration_ms: int) -> str:
        if duration_ms < 1000:
            return f"{duration_ms} ms"
        return f"{duration_ms / 1000:.2f} s"

    def on_journey_register(self, event: JourneyRegister) -> None:
        self.registered.append(event.journey.name)
        self.console.print(Text(f"Journey: {event.journey.name}", style="dim"))

    def on_journey_start(self, event: JourneyStart) -> None:
        self._step_failed = False
        self.console.print(Text(f"\nJourney: {event.journey.name}", style="bold"))

    def on_step_end(self, event: StepEnd) -> None:
        self.step_counts[event.status] += 1
        if event.status is StepStatus.FAILED:
            self._step_failed = True
        symbol, style = self.SYMBOLS[event.status]
        line = Text(f"   {symbol}  ", style=style)
        line.append(f"Step: '{event.step.name}' {event.status.value}")
        if event.status is not StepStatus.SKIPPED:
            duration = self.duration_ms(event.start, event.end)
            line.append(f" ({self._format_duration(duration)})", style="dim")
        self.console.print(line)
        if event.error is not None:
            self.console.print(
                Text(f"      {type(event.error).__name__}: {event.error}", style="red")
            )

    def on_journey_end(self, event: JourneyEnd) -> None:
        self.journey_counts[event.status] += 1
        # Journeys failing outside of steps (hooks, setup) have no step line yet.
        if event.status is JourneyStatus.FAILED and not self._step_failed and event.error is not None:
            self.console.print(
                Text(f"   ✗  {type(event.error).__name__}: {event.error}", style="red")
            )

    def on_end(self, event: End) -> None:
        if self.registered:
            self.console.print(Text(f"\n {len(self.registered)} journeys registered", style="bold"))
            return

        table = Table(show_header=False, box=None, padding=(0, 1))
        parts = []
        for status in (StepStatus.FAILED, StepStatus.SUCCEEDED, StepStatus.SKIPPED):
            count = self.step_counts[status]
            if count:
                style = self.SYMBOLS[status][1]
                parts.append(Text(f"{count} {status.value}", style=style))
        if not parts:
            parts.append(Text("No tests found!", style="yellow"))
        table.add_row(*parts)
        self.console.print()
        self.console.print(table)

"""Contracts of the external automation collaborators.

The runner never talks to a browser directly. A Gatherer creates a Driver
(browser, context, page and API request handles) for every journey and a
PluginManager that records side-channel data (network, console, metrics)
while the journey runs. These protocols describe only the surface the runner
uses; any Playwright-based implementation satisfies them.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from synthqa.core.models import RunOptions, Step


class PluginKind(str, Enum):
    """Instrumentation plugins a PluginManager can provide."""

    PERFORMANCE = "performance"
    NETWORK = "network"
    BROWSER_CONSOLE = "browserconsole"
    TRACE = "trace"


@runtime_checkable
class Request(Protocol):
    url: str

    def is_navigation_request(self) -> bool: ...


@runtime_checkable
class Page(Protocol):
    """The subset of a Playwright page used by the runner."""

    @property
    def url(self) -> str: ...

    def on(self, event: str, handler: Callable[..., Any]) -> None: ...

    def remove_listener(self, event: str, handler: Callable[..., Any]) -> None: ...

    async def wait_for_load_state(self, state: str = "load") -> None: ...

    async def screenshot(self, **kwargs: Any) -> bytes: ...


@runtime_checkable
class Driver(Protocol):
    browser: Any
    context: Any
    page: Page
    request: Any


@runtime_checkable
class PerformancePlugin(Protocol):
    async def get_metrics(self) -> Any: ...


@runtime_checkable
class PluginManager(Protocol):
    def on_step(self, step: Step) -> None: ...

    def get(self, kind: PluginKind) -> Any: ...

    async def output(self) -> dict[str, Any]: ...


@runtime_checkable
class Gatherer(Protocol):
    async def setup_driver(self, options: RunOptions) -> Driver: ...

    async def begin_recording(self, driver: Driver, options: RunOptions) -> PluginManager: ...

    async def dispose(self, driver: Driver) -> None: ...

    async def stop(self) -> None: ...

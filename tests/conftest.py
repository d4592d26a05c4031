"""Pytest fixtures for SynthQA tests."""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO
from pathlib import Path
from typing import Any

import pytest

from synthqa.core.context import JourneyContext
from synthqa.core.events import EventBus, EventKind
from synthqa.core.gatherer import PluginKind
from synthqa.core.models import RunOptions, ScreenshotMode
from synthqa.helpers import monotonic_time_in_seconds
from synthqa.runner.cache import RunCache
from synthqa.runner.controller import RunController


class MockRequest:
    """Mock network request."""

    def __init__(self, url: str, navigation: bool = True) -> None:
        self.url = url
        self._navigation = navigation

    def is_navigation_request(self) -> bool:
        return self._navigation


class MockPage:
    """Mock page with a request channel and screenshot support."""

    def __init__(self) -> None:
        self.url = "about:blank"
        self._listeners: dict[str, list[Callable[..., Any]]] = {}
        self.screenshot_calls: list[dict[str, Any]] = []
        self.screenshot_error: Exception | None = None
        self.load_states: list[str] = []

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def request(self, url: str, navigation: bool = True) -> None:
        for handler in list(self._listeners.get("request", [])):
            handler(MockRequest(url, navigation))

    def goto(self, url: str) -> None:
        self.request(url)
        self.url = url

    async def wait_for_load_state(self, state: str = "load") -> None:
        self.load_states.append(state)

    async def screenshot(self, **kwargs: Any) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        self.screenshot_calls.append(kwargs)
        return b"\xff\xd8jpeg"


class MockDriver:
    """Mock driver bundling browser handles."""

    def __init__(self) -> None:
        self.browser = object()
        self.context = object()
        self.page = MockPage()
        self.request = object()


class MockPerformancePlugin:
    def __init__(self, metrics: Any = None) -> None:
        self.metrics = metrics if metrics is not None else {"fcp": {"us": 1200}}

    async def get_metrics(self) -> Any:
        return self.metrics


class MockPluginManager:
    """Mock plugin manager recording step notifications."""

    def __init__(self, output: dict[str, Any] | None = None) -> None:
        self.steps: list[Any] = []
        self.performance = MockPerformancePlugin()
        self.output_error: Exception | None = None
        self._output = output if output is not None else {
            "browserconsole": [{"type": "error", "text": "Uncaught TypeError"}],
            "network": [{"url": "https://example.com/", "status": 200}],
        }

    def on_step(self, step: Any) -> None:
        self.steps.append(step)

    def get(self, kind: PluginKind) -> Any:
        if kind is PluginKind.PERFORMANCE:
            return self.performance
        return None

    async def output(self) -> dict[str, Any]:
        if self.output_error is not None:
            raise self.output_error
        return dict(self._output)


class MockGatherer:
    """Mock gatherer handing out mock drivers and plugin managers."""

    def __init__(self) -> None:
        self.drivers: list[MockDriver] = []
        self.plugin_managers: list[MockPluginManager] = []
        self.disposed: list[MockDriver] = []
        self.stopped = False
        self.setup_error: Exception | None = None
        self.recording_error: Exception | None = None
        self.output_error: Exception | None = None

    @property
    def driver(self) -> MockDriver:
        return self.drivers[-1]

    @property
    def plugin_manager(self) -> MockPluginManager:
        return self.plugin_managers[-1]

    async def setup_driver(self, options: RunOptions) -> MockDriver:
        if self.setup_error is not None:
            raise self.setup_error
        driver = MockDriver()
        self.drivers.append(driver)
        return driver

    async def begin_recording(self, driver: MockDriver, options: RunOptions) -> MockPluginManager:
        if self.recording_error is not None:
            raise self.recording_error
        plugin_manager = MockPluginManager()
        plugin_manager.output_error = self.output_error
        self.plugin_managers.append(plugin_manager)
        return plugin_manager

    async def dispose(self, driver: MockDriver) -> None:
        self.disposed.append(driver)

    async def stop(self) -> None:
        self.stopped = True


class EventRecorder:
    """Records every event published on a bus."""

    def __init__(self, bus: EventBus) -> None:
        self.events: list[Any] = []
        for kind in EventKind:
            bus.on(kind, self.events.append)

    def kinds(self) -> list[str]:
        return [event.kind.value for event in self.events]

    def of(self, kind: EventKind) -> list[Any]:
        return [event for event in self.events if event.kind is kind]


class PauseSignal:
    """Pause signal that returns immediately and counts calls."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def gatherer() -> MockGatherer:
    return MockGatherer()


@pytest.fixture
def pause() -> PauseSignal:
    return PauseSignal()


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def cache(cache_path: Path) -> RunCache:
    run_cache = RunCache(cache_path)
    run_cache.create()
    yield run_cache
    run_cache.remove()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(bus: EventBus) -> EventRecorder:
    return EventRecorder(bus)


@pytest.fixture
def output() -> StringIO:
    return StringIO()


@pytest.fixture
def options(output: StringIO) -> RunOptions:
    return RunOptions(output=output, screenshots=ScreenshotMode.OFF)


@pytest.fixture
def controller(gatherer: MockGatherer, cache_path: Path, pause: PauseSignal) -> RunController:
    return RunController(gatherer, cache_path=cache_path, pause=pause)


@pytest.fixture
def controller_events(controller: RunController) -> EventRecorder:
    return EventRecorder(controller.bus)


@pytest.fixture
def driver() -> MockDriver:
    return MockDriver()


@pytest.fixture
def plugin_manager() -> MockPluginManager:
    return MockPluginManager()


@pytest.fixture
def journey_context(driver: MockDriver, plugin_manager: MockPluginManager) -> JourneyContext:
    return JourneyContext(
        start=monotonic_time_in_seconds(),
        driver=driver,
        plugin_manager=plugin_manager,
        params={"url": "https://example.com"},
    )

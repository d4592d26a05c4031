"""Core models, hooks, events and collaborator contracts."""

from synthqa.core.context import JourneyBuilder, JourneyContext
from synthqa.core.events import (
    Delivery,
    End,
    Event,
    EventBus,
    EventKind,
    JourneyEnd,
    JourneyEndReported,
    JourneyRegister,
    JourneyStart,
    Start,
    StepEnd,
    StepStart,
)
from synthqa.core.gatherer import Driver, Gatherer, Page, PluginKind, PluginManager
from synthqa.core.hooks import Hook, HookArgs, HookKind, HookRegistry, HookScope
from synthqa.core.models import (
    Journey,
    JourneyResult,
    JourneyStatus,
    MonitorConfig,
    RunOptions,
    RunResult,
    ScreenshotMode,
    Step,
    StepResult,
    StepStatus,
)

__all__ = [
    "Delivery",
    "Driver",
    "End",
    "Event",
    "EventBus",
    "EventKind",
    "Gatherer",
    "Hook",
    "HookArgs",
    "HookKind",
    "HookRegistry",
    "HookScope",
    "Journey",
    "JourneyBuilder",
    "JourneyContext",
    "JourneyEnd",
    "JourneyEndReported",
    "JourneyRegister",
    "JourneyResult",
    "JourneyStart",
    "JourneyStatus",
    "MonitorConfig",
    "Page",
    "PluginKind",
    "PluginManager",
    "RunOptions",
    "RunResult",
    "ScreenshotMode",
    "Start",
    "Step",
    "StepEnd",
    "StepResult",
    "StepStart",
    "StepStatus",
]

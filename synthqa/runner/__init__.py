"""Run execution: controller, journey and step executors, run cache."""

from synthqa.runner.cache import RunCache, default_cache_path
from synthqa.runner.controller import RunController
from synthqa.runner.journey_executor import JourneyExecutor
from synthqa.runner.step_executor import StepExecutor, wait_for_stdin_line

__all__ = [
    "JourneyExecutor",
    "RunCache",
    "RunController",
    "StepExecutor",
    "default_cache_path",
    "wait_for_stdin_line",
]

"""Tests for journey and run models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from synthqa.core.context import JourneyBuilder
from synthqa.core.hooks import HookKind
from synthqa.core.models import (
    Journey,
    MonitorConfig,
    RunOptions,
    ScreenshotMode,
    StepResult,
    StepStatus,
)
from synthqa.errors import HookRegistrationError, JourneyDefinitionError


class TestJourney:
    """Tests for journey definition."""

    def test_id_defaults_to_name(self) -> None:
        journey = Journey("checkout", lambda j: None)

        assert journey.id == "checkout"
        assert journey.steps == []
        assert journey.tags == []

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, name: str) -> None:
        with pytest.raises(JourneyDefinitionError):
            Journey(name, lambda j: None)

    def test_callback_must_be_callable(self) -> None:
        with pytest.raises(JourneyDefinitionError):
            Journey("checkout", "not callable")  # type: ignore[arg-type]

    def test_steps_are_indexed_from_one(self) -> None:
        journey = Journey("checkout", lambda j: None)
        first = journey.add_step("open", lambda: None)
        second = journey.add_step("pay", lambda: None)

        assert (first.index, second.index) == (1, 2)

    def test_step_callback_must_be_callable(self) -> None:
        journey = Journey("checkout", lambda j: None)

        with pytest.raises(JourneyDefinitionError) as exc_info:
            journey.add_step("open", None)  # type: ignore[arg-type]

        assert exc_info.value.context.step_name == "open"

    def test_reset_clears_steps_and_hooks(self) -> None:
        journey = Journey("checkout", lambda j: None)
        journey.add_step("open", lambda: None)
        journey.add_hook(HookKind.BEFORE, lambda args: None)

        journey.reset()

        assert journey.steps == []
        assert len(journey.hooks) == 0

    def test_global_hook_rejected(self) -> None:
        journey = Journey("checkout", lambda j: None)

        with pytest.raises(HookRegistrationError):
            journey.add_hook(HookKind.AFTER_ALL, lambda args: None)

    def test_effective_monitor(self) -> None:
        journey = Journey("checkout", lambda j: None, id="shop-checkout")
        journey.update_monitor({"schedule": 5})
        defaults = MonitorConfig(schedule=10, locations=["eu-west"], enabled=True)

        monitor = journey.effective_monitor(defaults)

        assert monitor.schedule == 5
        assert monitor.locations == ["eu-west"]
        assert monitor.enabled is True
        assert monitor.id == "shop-checkout"
        assert monitor.name == "checkout"
        assert defaults.id is None

    def test_to_dict(self) -> None:
        journey = Journey("checkout", lambda j: None, tags=["shop"])

        assert journey.to_dict() == {
            "name": "checkout",
            "id": "checkout",
            "tags": ["shop"],
            "location": None,
        }


class TestJourneyBuilder:
    """Tests for the build context handed to journey callbacks."""

    def test_step_direct_and_decorator(self, driver) -> None:
        journey = Journey("checkout", lambda j: None)
        builder = JourneyBuilder(journey, driver, {})

        def open_store() -> None:
            pass

        builder.step("open", open_store)

        @builder.step("pay")
        def pay() -> None:
            pass

        assert [s.name for s in journey.steps] == ["open", "pay"]
        assert journey.steps[1].callback is pay
        assert journey.steps[0].location.file.endswith("test_models.py")

    def test_monitor_kwargs(self, driver) -> None:
        journey = Journey("checkout", lambda j: None)
        builder = JourneyBuilder(journey, driver, {})

        builder.monitor(schedule=3, tags=["critical"])

        assert journey.monitor.schedule == 3
        assert journey.monitor.tags == ["critical"]

    def test_exposes_driver_handles(self, driver) -> None:
        builder = JourneyBuilder(Journey("j", lambda j: None), driver, {"a": 1})

        assert builder.page is driver.page
        assert builder.context is driver.context
        assert builder.request is driver.request
        assert builder.params == {"a": 1}


class TestRunOptions:
    """Tests for immutable run options."""

    def test_defaults(self) -> None:
        options = RunOptions()

        assert options.screenshots is ScreenshotMode.ON
        assert options.params == {}
        assert options.dry_run is False

    def test_frozen(self) -> None:
        options = RunOptions()

        with pytest.raises(ValidationError):
            options.dry_run = True  # type: ignore[misc]

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RunOptions(headless=True)

    def test_none_params_become_empty(self) -> None:
        assert RunOptions(params=None).params == {}

    def test_screenshot_mode_from_string(self) -> None:
        assert RunOptions(screenshots="only-on-failure").screenshots is ScreenshotMode.ONLY_ON_FAILURE


class TestStepResult:
    def test_defaults(self) -> None:
        result = StepResult()

        assert result.status is StepStatus.SUCCEEDED
        assert result.url is None
        assert result.error is None

    def test_holds_exception(self) -> None:
        error = ValueError("x")

        assert StepResult(status=StepStatus.FAILED, error=error).error is error

"""Tests for shared helpers."""

from __future__ import annotations

import pytest

from synthqa.helpers import (
    Location,
    get_caller_location,
    get_timestamp,
    is_match,
    monotonic_time_in_seconds,
)


class TestIsMatch:
    """Tests for the journey filter predicate."""

    @pytest.mark.parametrize(
        ("name", "tags", "match", "patterns", "expected"),
        [
            ("login", [], None, None, True),
            ("login", [], "log*", None, True),
            ("login", [], "out", None, False),
            ("logout", [], "out", None, True),
            ("login", [], "Login", None, False),
            ("login", ["auth"], None, ["auth"], True),
            ("login", ["auth"], None, ["a*"], True),
            ("login", ["auth"], None, ["smoke", "auth"], True),
            ("login", ["auth"], None, ["smoke"], False),
            ("login", [], None, ["smoke"], False),
            ("login", ["smoke"], "log*", ["smoke"], True),
            ("search", ["smoke"], "log*", ["smoke"], False),
            ("login", [], None, [], True),
        ],
    )
    def test_is_match(
        self,
        name: str,
        tags: list[str],
        match: str | None,
        patterns: list[str] | None,
        expected: bool,
    ) -> None:
        assert is_match(name, tags, match, patterns) is expected


class TestLocation:
    """Tests for source locations."""

    def test_str(self) -> None:
        assert str(Location(file="journeys/login.py", line=12, column=4)) == "journeys/login.py:12"

    def test_caller_location(self) -> None:
        def register() -> Location | None:
            return get_caller_location()

        location = register()

        assert location is not None
        assert location.file.endswith("test_helpers.py")

    def test_caller_location_beyond_stack(self) -> None:
        assert get_caller_location(depth=10_000) is None


class TestClocks:
    def test_monotonic(self) -> None:
        assert monotonic_time_in_seconds() <= monotonic_time_in_seconds()

    def test_timestamp_is_microseconds(self) -> None:
        assert len(str(get_timestamp())) == 16

"""Tests for src.core.calendar_resolution — target calendar precedence."""

import pytest

from src.core.calendar_resolution import resolve_calendar
from src.ports.calendar_port import CalendarNotFoundError, NoDefaultCalendarError

_NAMES = ["Home", "Work", "roxana@example.com"]


def _resolve(requested=None, preferred="", default="Home", names=_NAMES):
    return resolve_calendar(
        names, name_of=lambda n: n, requested=requested, preferred=preferred, default=default
    )


class TestResolveCalendar:
    def test_explicit_name_wins(self):
        assert _resolve(requested="Work", preferred="roxana@example.com") == "Work"

    def test_explicit_missing_raises(self):
        with pytest.raises(CalendarNotFoundError, match="Calendar 'Nope' not found."):
            _resolve(requested="Nope")

    def test_explicit_missing_does_not_fall_back(self):
        with pytest.raises(CalendarNotFoundError):
            _resolve(requested="Nope", preferred="Work", default="Home")

    def test_preferred_used_when_present(self):
        assert _resolve(preferred="roxana@example.com") == "roxana@example.com"

    def test_preferred_absent_falls_back_to_default(self):
        assert _resolve(preferred="Missing") == "Home"

    def test_empty_preferred_skipped(self):
        assert _resolve(preferred="") == "Home"

    def test_no_default_raises(self):
        with pytest.raises(NoDefaultCalendarError, match="No default calendar."):
            _resolve(default=None)

    def test_works_with_objects(self):
        class Cal:
            def __init__(self, name):
                self.name = name

        cals = [Cal("A"), Cal("B")]
        found = resolve_calendar(
            cals, name_of=lambda c: c.name, requested="B", preferred=None, default=cals[0]
        )
        assert found is cals[1]

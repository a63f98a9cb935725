"""
Mac Calendar Tools — Target calendar selection for new events.

Both backends resolve the calendar for `create_event` the same way:
explicit name, then the preferred calendar, then the backend default.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, TypeVar

from src.ports.calendar_port import CalendarNotFoundError, NoDefaultCalendarError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_calendar(
    calendars: Iterable[T],
    name_of: Callable[[T], str],
    requested: str | None,
    preferred: str | None,
    default: T | None,
) -> T:
    """Pick the calendar a new event should go to.

    Args:
        calendars: Every calendar the backend can write to.
        name_of: Returns a calendar's display name.
        requested: Name given by the caller, if any.
        preferred: Configured fallback name; skipped when empty or absent.
        default: The backend's own default calendar, may be None.

    Raises:
        CalendarNotFoundError: `requested` was given but doesn't exist.
        NoDefaultCalendarError: Nothing requested, no preferred, no default.
    """
    by_name: dict[str, T] = {}
    for cal in calendars:
        by_name.setdefault(name_of(cal), cal)

    if requested is not None:
        if requested not in by_name:
            raise CalendarNotFoundError(requested)
        return by_name[requested]

    if preferred and preferred in by_name:
        logger.debug("Using preferred calendar '%s'", preferred)
        return by_name[preferred]

    if default is None:
        raise NoDefaultCalendarError()
    return default

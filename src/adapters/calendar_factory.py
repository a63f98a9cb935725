"""Calendar adapter factory — creates the right adapter based on config."""

from __future__ import annotations

from src.config import settings
from src.ports.calendar_port import CalendarPort


def create_calendar_adapter(backend: str | None = None) -> CalendarPort:
    """Return the calendar adapter matching the CALENDAR_BACKEND setting.

    For EventKit this also runs the one-time authorization check, so it may
    block on the system permission prompt.

    Args:
        backend: Overrides CALENDAR_BACKEND when given.

    Raises:
        CalendarAccessError: EventKit access was not granted.
    """
    name = (backend or settings.CALENDAR_BACKEND).lower()

    if name == "eventkit":
        from src.adapters.eventkit_calendar import EventKitCalendarAdapter
        from src.integrations.eventkit_auth import request_calendar_access

        return EventKitCalendarAdapter(request_calendar_access())

    if name == "applescript":
        from src.adapters.applescript_calendar import AppleScriptCalendarAdapter

        return AppleScriptCalendarAdapter()

    raise ValueError(f"Unknown CALENDAR_BACKEND: {name!r}")

"""Calendar port — abstract interface for calendar operations.

The tool service depends on this protocol, never on a specific backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.data.models import Event, QuerySpec


class CalendarError(Exception):
    """Raised when any calendar backend operation fails."""


class CalendarNotFoundError(CalendarError):
    """Raised when an explicitly named calendar doesn't exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Calendar '{name}' not found.")
        self.name = name


class NoDefaultCalendarError(CalendarError):
    """Raised when no calendar was named and the backend has no default."""

    def __init__(self) -> None:
        super().__init__("No default calendar.")


class CalendarAccessError(CalendarError):
    """Raised when the user hasn't granted access to the calendar store."""


class CalendarPort(Protocol):
    """Abstract calendar interface used by the tool service."""

    def list_events(self, spec: QuerySpec) -> list[Event]: ...

    def create_event(
        self,
        title: str,
        start: datetime,
        end: datetime,
        calendar_name: str | None = None,
        notes: str | None = None,
    ) -> str: ...

    def delete_events(self, title: str, day: datetime) -> int: ...

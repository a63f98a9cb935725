"""
Mac Calendar Tools — Data Models.

Events are read-only snapshots of the calendar store. Nothing here is cached:
every query re-fetches from the backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Event:
    """A single calendar event as seen by the tools."""

    title: str                  # may be empty
    start: datetime             # local wall-clock time
    end: datetime
    calendar_name: str
    notes: str | None = None


@dataclass(frozen=True)
class QuerySpec:
    """Time window and filters for one listing or search.

    Built by the tool service from a tool call, consumed once by a backend.
    """

    start_bound: datetime
    end_bound: datetime
    calendar_filter: str | None = None   # exact calendar name
    keyword_filter: str | None = None    # case-insensitive title substring

    def __post_init__(self) -> None:
        if self.start_bound > self.end_bound:
            raise ValueError("start_bound must not be after end_bound")

    def matches(self, event: Event) -> bool:
        """Apply the window and both filters to an already-fetched event."""
        if not (self.start_bound <= event.start <= self.end_bound):
            return False
        if self.calendar_filter is not None and event.calendar_name != self.calendar_filter:
            return False
        if self.keyword_filter is not None:
            return self.keyword_filter.casefold() in event.title.casefold()
        return True


def sort_events(events: list[Event]) -> list[Event]:
    """Ascending by start; ties keep enumeration order (sorted() is stable)."""
    return sorted(events, key=lambda e: e.start)

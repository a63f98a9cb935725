"""
Mac Calendar Tools — Event formatter.

Renders event listings into the pipe-delimited text the tools return.
"""

from __future__ import annotations

from typing import Iterable

from src.core.dates import format_datetime
from src.data.models import Event

NO_UPCOMING_EVENTS = "No upcoming events found."


def no_matches_message(query: str) -> str:
    return f"No events found matching '{query}'."


def format_upcoming(events: Iterable[Event]) -> str:
    """`<start> | <end> | <title> [<calendar>]` per line."""
    lines = [
        f"{format_datetime(e.start)} | {format_datetime(e.end)} | {e.title} [{e.calendar_name}]"
        for e in events
    ]
    return "\n".join(lines) if lines else NO_UPCOMING_EVENTS


def format_search(events: Iterable[Event], query: str) -> str:
    """`<start> | <title> [<calendar>]` per line."""
    lines = [
        f"{format_datetime(e.start)} | {e.title} [{e.calendar_name}]"
        for e in events
    ]
    return "\n".join(lines) if lines else no_matches_message(query)

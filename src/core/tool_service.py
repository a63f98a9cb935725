"""
Mac Calendar Tools — Tool service.

Stateless dispatcher between the transport and the calendar backend:
validate the loosely-typed argument bag into a typed request, apply
defaults, build the backend call, and render the result as text.

Every outcome is text. Domain errors come back as `ERROR: ...` strings so
the transport never sees an exception for a bad argument or a missing
calendar.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, Field, ValidationError

from src.core.dates import parse_date, parse_datetime
from src.core.formatter import format_search, format_upcoming
from src.data.models import QuerySpec
from src.ports.calendar_port import CalendarError

if TYPE_CHECKING:
    from src.ports.calendar_port import CalendarPort

logger = logging.getLogger(__name__)


class ToolArgumentError(Exception):
    """A tool argument is missing or malformed. Caught before the backend runs."""


# ---------------------------------------------------------------------------
# Typed requests — one per tool
# ---------------------------------------------------------------------------


class GetUpcomingEventsRequest(BaseModel):
    days: int = Field(default=7, ge=0)
    calendar: str | None = None


class SearchEventsRequest(BaseModel):
    query: str
    days: int = Field(default=30, ge=0)


class CreateEventRequest(BaseModel):
    title: str
    start: str          # YYYY-MM-DD HH:MM
    end_time: str       # YYYY-MM-DD HH:MM
    calendar: str | None = None
    notes: str | None = None


class DeleteEventRequest(BaseModel):
    title: str
    date: str           # YYYY-MM-DD


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    request_model: type[BaseModel]


TOOLS: dict[str, ToolDefinition] = {
    tool.name: tool
    for tool in (
        ToolDefinition(
            "get_upcoming_events",
            "Get upcoming calendar events from macOS Calendar",
            GetUpcomingEventsRequest,
        ),
        ToolDefinition(
            "search_events",
            "Search macOS Calendar events by keyword",
            SearchEventsRequest,
        ),
        ToolDefinition(
            "create_event",
            "Create a new event in macOS Calendar",
            CreateEventRequest,
        ),
        ToolDefinition(
            "delete_event",
            "Delete a calendar event by title and date",
            DeleteEventRequest,
        ),
    )
}


@dataclass
class ToolResult:
    ok: bool
    text: str


def _validate(model: type[BaseModel], args: Any) -> BaseModel:
    """Coerce an argument bag into `model`, mapping failures to tool errors.

    None-valued arguments count as absent, so optional fields get defaults.
    """
    if not isinstance(args, dict):
        raise ToolArgumentError("Arguments must be a JSON object")

    present = {key: value for key, value in args.items() if value is not None}
    try:
        return model.model_validate(present)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else "arguments"
        if first["type"] == "missing":
            raise ToolArgumentError(f"{field} required") from exc
        raise ToolArgumentError(f"Invalid {field}: {present.get(field)}") from exc


def _require_datetime(value: str, field: str) -> datetime:
    parsed = parse_datetime(value)
    if parsed is None:
        raise ToolArgumentError(f"Invalid {field}: {value}")
    return parsed


def _window(now: datetime, days: int, *, back: bool) -> tuple[datetime, datetime]:
    try:
        delta = timedelta(days=days)
        return (now - delta if back else now), now + delta
    except OverflowError as exc:
        raise ToolArgumentError(f"Invalid days: {days}") from exc


class ToolService:
    """Runs one tool call to completion against a CalendarPort."""

    def __init__(
        self,
        calendar: CalendarPort,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._calendar = calendar
        self._clock = clock
        self._handlers: dict[str, Callable[[Any], str]] = {
            "get_upcoming_events": self._get_upcoming_events,
            "search_events": self._search_events,
            "create_event": self._create_event,
            "delete_event": self._delete_event,
        }

    def call(self, name: str, args: Any = None) -> ToolResult:
        """Dispatch a tool call. Never raises for domain errors."""
        tool = TOOLS.get(name)
        if tool is None:
            return ToolResult(ok=False, text=f"ERROR: Unknown tool '{name}'")

        logger.info("Tool call: %s", name)
        try:
            request = _validate(tool.request_model, {} if args is None else args)
            text = self._handlers[name](request)
        except ToolArgumentError as exc:
            logger.info("Rejected %s call: %s", name, exc)
            return ToolResult(ok=False, text=f"ERROR: {exc}")
        except CalendarError as exc:
            logger.warning("Calendar error during %s: %s", name, exc)
            return ToolResult(ok=False, text=f"ERROR: {exc}")
        return ToolResult(ok=True, text=text)

    # -----------------------------------------------------------------------
    # Handlers
    # -----------------------------------------------------------------------

    def _get_upcoming_events(self, request: GetUpcomingEventsRequest) -> str:
        start, end = _window(self._clock(), request.days, back=False)
        spec = QuerySpec(start_bound=start, end_bound=end, calendar_filter=request.calendar)
        return format_upcoming(self._calendar.list_events(spec))

    def _search_events(self, request: SearchEventsRequest) -> str:
        start, end = _window(self._clock(), request.days, back=True)
        spec = QuerySpec(start_bound=start, end_bound=end, keyword_filter=request.query)
        return format_search(self._calendar.list_events(spec), request.query)

    def _create_event(self, request: CreateEventRequest) -> str:
        start = _require_datetime(request.start, "start")
        end = _require_datetime(request.end_time, "end_time")
        if end < start:
            raise ToolArgumentError("end_time must not be before start")

        used = self._calendar.create_event(
            request.title,
            start,
            end,
            calendar_name=request.calendar,
            notes=request.notes,
        )
        logger.info("Created '%s' in calendar '%s'", request.title, used)
        return f"Event '{request.title}' created successfully."

    def _delete_event(self, request: DeleteEventRequest) -> str:
        day = parse_date(request.date)
        if day is None:
            raise ToolArgumentError(f"Invalid date: {request.date}")

        deleted = self._calendar.delete_events(request.title, day)
        return f"Deleted {deleted} event(s) titled '{request.title}' on {day.date().isoformat()}."

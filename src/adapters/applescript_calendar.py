"""AppleScript calendar adapter — implements CalendarPort by scripting Calendar.app.

Each operation generates an AppleScript program and runs it through
`osascript`. User-supplied strings only ever enter a script through
`applescript_string()`, and dates are rebuilt from integer components inside
the script rather than coerced from locale-dependent `date "..."` literals.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from src.config import settings
from src.core.calendar_resolution import resolve_calendar
from src.core.dates import parse_datetime
from src.data.models import Event, QuerySpec, sort_events
from src.integrations.osascript import run_osascript
from src.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)

# Non-whitespace control characters, so trimming stdout never eats a field.
FIELD_SEP = "\x01"
RECORD_SEP = "\x02"

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_HELPERS = """\
on makeDate(y, m, d, hh, mm)
\tset dt to current date
\tset day of dt to 1
\tset year of dt to y
\tset month of dt to m
\tset day of dt to d
\tset time of dt to (hh * hours) + (mm * minutes)
\treturn dt
end makeDate

on pad(n)
\treturn text -2 thru -1 of ("0" & (n as integer))
end pad

on fmtDate(dt)
\treturn ((year of dt) as string) & "-" & my pad(month of dt as integer) & "-" & my pad(day of dt) & " " & my pad(hours of dt) & ":" & my pad(minutes of dt)
end fmtDate
"""


def applescript_string(value: str) -> str:
    """Return `value` as a double-quoted AppleScript string literal."""
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in value) + '"'


def _date_expr(dt: datetime) -> str:
    return f"my makeDate({dt.year}, {dt.month}, {dt.day}, {dt.hour}, {dt.minute})"


def _list_script(spec: QuerySpec) -> str:
    if spec.calendar_filter is not None:
        calendars = f"(every calendar whose name is {applescript_string(spec.calendar_filter)})"
    else:
        calendars = "every calendar"

    predicate = "start date >= startDate and start date <= endDate"
    if spec.keyword_filter:
        predicate += f" and summary contains {applescript_string(spec.keyword_filter)}"

    return f"""{_HELPERS}
set startDate to {_date_expr(spec.start_bound)}
set endDate to {_date_expr(spec.end_bound)}
set fieldSep to character id 1
set recordSep to character id 2
set output to ""
tell application "Calendar"
\trepeat with cal in {calendars}
\t\tset calName to name of cal
\t\tset calEvents to (every event of cal whose {predicate})
\t\trepeat with ev in calEvents
\t\t\tset evTitle to summary of ev
\t\t\tif evTitle is missing value then set evTitle to ""
\t\t\tset output to output & my fmtDate(start date of ev) & fieldSep & my fmtDate(end date of ev) & fieldSep & evTitle & fieldSep & calName & recordSep
\t\tend repeat
\tend repeat
end tell
return output
"""


_CALENDAR_NAMES_SCRIPT = """\
set recordSep to character id 2
set output to ""
tell application "Calendar"
\trepeat with cal in every calendar
\t\tset output to output & (name of cal) & recordSep
\tend repeat
end tell
return output
"""


def _create_script(
    title: str,
    start: datetime,
    end: datetime,
    calendar_name: str,
    notes: str | None,
) -> str:
    notes_line = ""
    if notes is not None:
        notes_line = f"\tset description of newEvent to {applescript_string(notes)}\n"
    return f"""{_HELPERS}
set startDate to {_date_expr(start)}
set endDate to {_date_expr(end)}
tell application "Calendar"
\tconsidering case
\t\tset targetCal to first calendar whose name is {applescript_string(calendar_name)}
\tend considering
\tset newEvent to make new event at end of events of targetCal with properties {{summary:{applescript_string(title)}, start date:startDate, end date:endDate}}
{notes_line}\tset createdIn to name of targetCal
\tsave
end tell
return createdIn
"""


def _delete_script(title: str, day: datetime) -> str:
    return f"""{_HELPERS}
set dayStart to {_date_expr(day)}
set dayEnd to {_date_expr(day + timedelta(days=1))}
set deletedCount to 0
tell application "Calendar"
\tconsidering case
\t\trepeat with cal in every calendar
\t\t\tset matches to (every event of cal whose summary is {applescript_string(title)} and start date >= dayStart and start date < dayEnd)
\t\t\trepeat with ev in matches
\t\t\t\tdelete ev
\t\t\t\tset deletedCount to deletedCount + 1
\t\t\tend repeat
\t\tend repeat
\tend considering
\tif deletedCount > 0 then save
end tell
return deletedCount as string
"""


def _parse_records(output: str) -> list[Event]:
    """Turn the listing script's output back into Event values."""
    events = []
    for record in output.split(RECORD_SEP):
        if not record:
            continue
        fields = record.split(FIELD_SEP)
        if len(fields) != 4:
            raise CalendarError(f"Unexpected calendar script output: {record!r}")
        start_text, end_text, title, calendar_name = fields
        start = parse_datetime(start_text)
        end = parse_datetime(end_text)
        if start is None or end is None:
            raise CalendarError(f"Unexpected date in calendar script output: {record!r}")
        events.append(Event(title=title, start=start, end=end, calendar_name=calendar_name))
    return events


class AppleScriptCalendarAdapter:
    """Calendar.app (AppleScript) implementation of CalendarPort."""

    def __init__(
        self,
        executable: str | None = None,
        timeout: float | None = None,
        preferred_calendar: str | None = None,
    ) -> None:
        self._executable = executable or settings.OSASCRIPT_PATH
        self._timeout = timeout or settings.OSASCRIPT_TIMEOUT_SECONDS
        self._preferred = (
            preferred_calendar if preferred_calendar is not None else settings.PREFERRED_CALENDAR
        )

    def _run(self, script: str) -> str:
        return run_osascript(script, executable=self._executable, timeout=self._timeout)

    def calendar_names(self) -> list[str]:
        output = self._run(_CALENDAR_NAMES_SCRIPT)
        return [name for name in output.split(RECORD_SEP) if name]

    def list_events(self, spec: QuerySpec) -> list[Event]:
        output = self._run(_list_script(spec))
        # The script's `contains` is only a prefilter; spec.matches is authoritative.
        events = [e for e in _parse_records(output) if spec.matches(e)]
        logger.info(
            "Found %d Calendar.app event(s) between %s and %s",
            len(events),
            spec.start_bound,
            spec.end_bound,
        )
        return sort_events(events)

    def create_event(
        self,
        title: str,
        start: datetime,
        end: datetime,
        calendar_name: str | None = None,
        notes: str | None = None,
    ) -> str:
        names = self.calendar_names()
        target = resolve_calendar(
            names,
            name_of=lambda name: name,
            requested=calendar_name,
            preferred=self._preferred,
            default=names[0] if names else None,
        )
        created_in = self._run(_create_script(title, start, end, target, notes))
        logger.info("Calendar.app event created: '%s' at %s in '%s'", title, start, target)
        return created_in or target

    def delete_events(self, title: str, day: datetime) -> int:
        day_start = datetime(day.year, day.month, day.day)
        output = self._run(_delete_script(title, day_start))
        try:
            deleted = int(output or "0")
        except ValueError as exc:
            raise CalendarError(f"Unexpected calendar script output: {output!r}") from exc
        logger.info(
            "Deleted %d Calendar.app event(s) titled '%s' on %s",
            deleted,
            title,
            day_start.date().isoformat(),
        )
        return deleted

"""EventKit calendar adapter — implements CalendarPort on the native macOS store.

Talks to EKEventStore in-process through PyObjC. The adapter can only be
built from a CalendarAccess, so every call happens after authorization.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from src.config import settings
from src.core.calendar_resolution import resolve_calendar
from src.data.models import Event, QuerySpec, sort_events
from src.integrations.eventkit_auth import CalendarAccess
from src.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)


def _to_nsdate(dt: datetime) -> Any:
    import Foundation

    # Naive datetimes are local time; timestamp() converts accordingly.
    return Foundation.NSDate.dateWithTimeIntervalSince1970_(dt.timestamp())


def _from_nsdate(ns: Any) -> datetime:
    return datetime.fromtimestamp(float(ns.timeIntervalSince1970()))


def _calendar_title(calendar: Any) -> str:
    return str(calendar.title() or "") if calendar is not None else ""


def _to_event(ek_event: Any) -> Event:
    notes = ek_event.notes()
    return Event(
        title=str(ek_event.title() or ""),
        start=_from_nsdate(ek_event.startDate()),
        end=_from_nsdate(ek_event.endDate()),
        calendar_name=_calendar_title(ek_event.calendar()),
        notes=str(notes) if notes is not None else None,
    )


def _error_text(error: Any, fallback: str) -> str:
    if error is None:
        return fallback
    return str(error.localizedDescription())


class EventKitCalendarAdapter:
    """EventKit implementation of CalendarPort."""

    def __init__(self, access: CalendarAccess, preferred_calendar: str | None = None) -> None:
        self._store = access.store
        self._preferred = (
            preferred_calendar if preferred_calendar is not None else settings.PREFERRED_CALENDAR
        )

    def _calendars(self) -> list[Any]:
        import EventKit

        return list(self._store.calendarsForEntityType_(EventKit.EKEntityTypeEvent) or [])

    def _events_between(self, start: datetime, end: datetime, calendars: list[Any] | None) -> list[Any]:
        predicate = self._store.predicateForEventsWithStartDate_endDate_calendars_(
            _to_nsdate(start), _to_nsdate(end), calendars
        )
        return list(self._store.eventsMatchingPredicate_(predicate) or [])

    def list_events(self, spec: QuerySpec) -> list[Event]:
        try:
            calendars = None
            if spec.calendar_filter is not None:
                calendars = [
                    c for c in self._calendars() if _calendar_title(c) == spec.calendar_filter
                ]
                if not calendars:
                    logger.info("No calendar named '%s'", spec.calendar_filter)
                    return []

            raw = self._events_between(spec.start_bound, spec.end_bound, calendars)
            # The store matches overlapping events; keep only those starting in the window.
            events = [e for e in map(_to_event, raw) if spec.matches(e)]
            logger.info(
                "Found %d EventKit event(s) between %s and %s",
                len(events),
                spec.start_bound,
                spec.end_bound,
            )
            return sort_events(events)
        except CalendarError:
            raise
        except Exception as exc:
            logger.error("EventKit error (list_events): %s", exc)
            raise CalendarError(f"Failed to list events: {exc}") from exc

    def create_event(
        self,
        title: str,
        start: datetime,
        end: datetime,
        calendar_name: str | None = None,
        notes: str | None = None,
    ) -> str:
        import EventKit

        try:
            target = resolve_calendar(
                self._calendars(),
                name_of=_calendar_title,
                requested=calendar_name,
                preferred=self._preferred,
                default=self._store.defaultCalendarForNewEvents(),
            )

            ek_event = EventKit.EKEvent.eventWithEventStore_(self._store)
            ek_event.setTitle_(title)
            ek_event.setStartDate_(_to_nsdate(start))
            ek_event.setEndDate_(_to_nsdate(end))
            ek_event.setCalendar_(target)
            ek_event.setNotes_(notes)

            ok, error = self._store.saveEvent_span_commit_error_(
                ek_event, EventKit.EKSpanThisEvent, True, None
            )
            if not ok:
                raise CalendarError(_error_text(error, "Failed to save event."))

            target_name = _calendar_title(target)
            logger.info("EventKit event created: '%s' at %s in '%s'", title, start, target_name)
            return target_name
        except CalendarError:
            raise
        except Exception as exc:
            logger.error("EventKit error (create_event): %s", exc)
            raise CalendarError(f"Failed to create event: {exc}") from exc

    def delete_events(self, title: str, day: datetime) -> int:
        import EventKit

        day_start = datetime(day.year, day.month, day.day)
        day_end = day_start + timedelta(days=1)

        try:
            matches = [
                ev
                for ev in self._events_between(day_start, day_end, None)
                if str(ev.title() or "") == title
                and day_start <= _from_nsdate(ev.startDate()) < day_end
            ]

            for ev in matches:
                ok, error = self._store.removeEvent_span_commit_error_(
                    ev, EventKit.EKSpanThisEvent, False, None
                )
                if not ok:
                    # Drop the removals staged so far; nothing is committed.
                    self._store.reset()
                    raise CalendarError(_error_text(error, "Failed to delete event."))

            if matches:
                ok, error = self._store.commit_(None)
                if not ok:
                    self._store.reset()
                    raise CalendarError(_error_text(error, "Failed to commit deletions."))

            logger.info(
                "Deleted %d EventKit event(s) titled '%s' on %s",
                len(matches),
                title,
                day_start.date().isoformat(),
            )
            return len(matches)
        except CalendarError:
            raise
        except Exception as exc:
            logger.error("EventKit error (delete_events): %s", exc)
            raise CalendarError(f"Failed to delete event: {exc}") from exc

"""Shared test fixtures and configuration.

Sets up environment variables before any src imports, provides an in-memory
CalendarPort, and fake EventKit/Foundation modules so the EventKit code runs
on any OS.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("CALENDAR_BACKEND", "applescript")
os.environ.setdefault("PREFERRED_CALENDAR", "")
os.environ.setdefault("OSASCRIPT_TIMEOUT_SECONDS", "5")

import sys
import types
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from src.core.calendar_resolution import resolve_calendar
from src.data.models import Event, sort_events


# ---------------------------------------------------------------------------
# In-memory calendar backend
# ---------------------------------------------------------------------------


class FakeCalendar:
    """In-memory CalendarPort with the same selection rules as real backends."""

    def __init__(self, calendars=("Calendar", "Work"), default="Calendar", preferred=""):
        self.calendars = list(calendars)
        self.default = default
        self.preferred = preferred
        self.events: list[Event] = []
        self.commits = 0

    def list_events(self, spec):
        return sort_events([e for e in self.events if spec.matches(e)])

    def create_event(self, title, start, end, calendar_name=None, notes=None):
        target = resolve_calendar(
            self.calendars,
            name_of=lambda name: name,
            requested=calendar_name,
            preferred=self.preferred,
            default=self.default,
        )
        self.events.append(
            Event(title=title, start=start, end=end, calendar_name=target, notes=notes)
        )
        return target

    def delete_events(self, title, day):
        day_end = day + timedelta(days=1)
        keep = [e for e in self.events if not (e.title == title and day <= e.start < day_end)]
        deleted = len(self.events) - len(keep)
        if deleted:
            self.events = keep
            self.commits += 1
        return deleted


@pytest.fixture
def fake_calendar():
    return FakeCalendar()


# ---------------------------------------------------------------------------
# Fake EventKit / Foundation (PyObjC surface used by the app)
# ---------------------------------------------------------------------------


class FakeNSDate:
    def __init__(self, ts):
        self._ts = float(ts)

    @classmethod
    def dateWithTimeIntervalSince1970_(cls, ts):
        return cls(ts)

    def timeIntervalSince1970(self):
        return self._ts


def nsdate(dt: datetime) -> FakeNSDate:
    return FakeNSDate(dt.timestamp())


class FakeEKCalendar:
    def __init__(self, title):
        self._title = title

    def title(self):
        return self._title


class FakeEKEvent:
    def __init__(self, title=None, start=None, end=None, calendar=None, notes=None):
        self._title = title
        self._start = nsdate(start) if start else None
        self._end = nsdate(end) if end else None
        self._calendar = calendar
        self._notes = notes

    @classmethod
    def eventWithEventStore_(cls, store):
        return cls()

    def title(self):
        return self._title

    def startDate(self):
        return self._start

    def endDate(self):
        return self._end

    def calendar(self):
        return self._calendar

    def notes(self):
        return self._notes

    def setTitle_(self, value):
        self._title = value

    def setStartDate_(self, value):
        self._start = value

    def setEndDate_(self, value):
        self._end = value

    def setCalendar_(self, value):
        self._calendar = value

    def setNotes_(self, value):
        self._notes = value


class FakeEKEventStore:
    """Enough of EKEventStore for the adapter and the authorization gate."""

    authorization_status = 3  # full access

    def __init__(self, calendars=(), default=None, grant=True):
        self.calendars = [FakeEKCalendar(name) for name in calendars]
        self.default = next((c for c in self.calendars if c.title() == default), None)
        self.events: list[FakeEKEvent] = []
        self.pending_removals: list[FakeEKEvent] = []
        self.commits = 0
        self.resets = 0
        self.grant = grant
        self.access_requests = 0
        self.fail_save = None

    @classmethod
    def authorizationStatusForEntityType_(cls, entity_type):
        return cls.authorization_status

    def requestFullAccessToEventsWithCompletion_(self, completion):
        self.access_requests += 1
        completion(self.grant, None)

    def calendar_named(self, name):
        return next(c for c in self.calendars if c.title() == name)

    def add(self, title, start, end, calendar, notes=None):
        ev = FakeEKEvent(title, start, end, self.calendar_named(calendar), notes)
        self.events.append(ev)
        return ev

    def calendarsForEntityType_(self, entity_type):
        return list(self.calendars)

    def defaultCalendarForNewEvents(self):
        return self.default

    def predicateForEventsWithStartDate_endDate_calendars_(self, start, end, calendars):
        return (start.timeIntervalSince1970(), end.timeIntervalSince1970(), calendars)

    def eventsMatchingPredicate_(self, predicate):
        start, end, calendars = predicate
        # EventKit returns events that overlap the range.
        return [
            ev
            for ev in self.events
            if ev.startDate().timeIntervalSince1970() < end
            and ev.endDate().timeIntervalSince1970() > start
            and (calendars is None or ev.calendar() in calendars)
        ]

    def saveEvent_span_commit_error_(self, event, span, commit, error):
        if self.fail_save:
            return False, FakeNSError(self.fail_save)
        self.events.append(event)
        return True, None

    def removeEvent_span_commit_error_(self, event, span, commit, error):
        self.pending_removals.append(event)
        return True, None

    def commit_(self, error):
        for ev in self.pending_removals:
            self.events.remove(ev)
        self.pending_removals = []
        self.commits += 1
        return True, None

    def reset(self):
        self.pending_removals = []
        self.resets += 1


class FakeNSError:
    def __init__(self, message):
        self._message = message

    def localizedDescription(self):
        return self._message


@pytest.fixture
def eventkit_modules():
    """Install fake EventKit and Foundation modules for the test's duration."""

    class _StoreClass(FakeEKEventStore):
        pass

    eventkit = types.SimpleNamespace(
        EKEntityTypeEvent=0,
        EKSpanThisEvent=0,
        EKAuthorizationStatusNotDetermined=0,
        EKAuthorizationStatusRestricted=1,
        EKAuthorizationStatusDenied=2,
        EKAuthorizationStatusFullAccess=3,
        EKAuthorizationStatusAuthorized=3,
        EKAuthorizationStatusWriteOnly=4,
        EKEvent=FakeEKEvent,
        EKEventStore=_StoreClass,
    )
    foundation = types.SimpleNamespace(NSDate=FakeNSDate)

    with patch.dict(sys.modules, {"EventKit": eventkit, "Foundation": foundation}):
        yield eventkit


@pytest.fixture
def ek_store(eventkit_modules):
    """A fake EKEventStore with 'Home' (the default) and 'Work' calendars."""
    return eventkit_modules.EKEventStore(calendars=("Home", "Work"), default="Home")

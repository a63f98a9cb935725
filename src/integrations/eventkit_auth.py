"""
Mac Calendar Tools — EventKit authorization.

macOS only lets a process read or write the calendar store after the user
grants access. This runs once per process, before the EventKit adapter is
built: the adapter can only be constructed from the CalendarAccess it returns.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from src.ports.calendar_port import CalendarAccessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarAccess:
    """Proof that the user granted full access to `store`."""

    store: Any  # EventKit.EKEventStore


def create_event_store() -> Any:
    import EventKit

    return EventKit.EKEventStore.alloc().init()


def _request_access(store: Any) -> bool:
    """Show the system prompt and block until the user answers."""
    import EventKit

    done = threading.Event()
    box: dict[str, Any] = {"granted": False, "error": None}

    def completion(granted, error):
        box["granted"] = bool(granted)
        box["error"] = error
        done.set()

    # macOS 14 split calendar access into full and write-only.
    if hasattr(store, "requestFullAccessToEventsWithCompletion_"):
        store.requestFullAccessToEventsWithCompletion_(completion)
    else:
        store.requestAccessToEntityType_completion_(EventKit.EKEntityTypeEvent, completion)

    done.wait()
    if box["error"] is not None:
        logger.warning("Calendar access request returned an error: %s", box["error"])
    return box["granted"]


def request_calendar_access(store: Any | None = None) -> CalendarAccess:
    """Check (and if needed request) full calendar access.

    Flow:
    1. Full access already granted → done.
    2. Denied, restricted or write-only → fail; the user must change it in
       System Settings.
    3. Not determined yet → prompt and wait for the decision.

    Raises:
        CalendarAccessError: Access was not granted.
    """
    import EventKit

    store = store if store is not None else create_event_store()
    status = EventKit.EKEventStore.authorizationStatusForEntityType_(EventKit.EKEntityTypeEvent)
    full_access = getattr(
        EventKit, "EKAuthorizationStatusFullAccess", EventKit.EKAuthorizationStatusAuthorized
    )

    if status == full_access:
        logger.debug("Calendar access already granted")
        return CalendarAccess(store=store)

    if status != EventKit.EKAuthorizationStatusNotDetermined:
        logger.error("Calendar access denied or restricted (status=%s)", status)
        raise CalendarAccessError("Calendar access not authorized.")

    logger.info("Requesting calendar access from the user...")
    if not _request_access(store):
        logger.error("User declined calendar access")
        raise CalendarAccessError("Calendar access not authorized.")

    logger.info("Calendar access granted")
    return CalendarAccess(store=store)

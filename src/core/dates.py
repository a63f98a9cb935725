"""
Mac Calendar Tools — Date/Time codec.

The two literal formats used by every tool, evaluated in the host's local
time zone. Timestamps are naive datetimes meaning local wall-clock time.
"""

from __future__ import annotations

from datetime import datetime

DATETIME_FORMAT = "%Y-%m-%d %H:%M"
DATE_FORMAT = "%Y-%m-%d"


def _parse(value: object, fmt: str) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.strptime(value, fmt)
    except ValueError:
        return None
    # strptime also accepts unpadded fields ("2026-3-1 9:0"); only the exact form counts.
    return parsed if parsed.strftime(fmt) == value else None


def parse_datetime(value: object) -> datetime | None:
    """Parse 'YYYY-MM-DD HH:MM'. Returns None when the text doesn't match."""
    return _parse(value, DATETIME_FORMAT)


def parse_date(value: object) -> datetime | None:
    """Parse 'YYYY-MM-DD' as local midnight of that day."""
    return _parse(value, DATE_FORMAT)


def format_datetime(dt: datetime) -> str:
    return dt.strftime(DATETIME_FORMAT)

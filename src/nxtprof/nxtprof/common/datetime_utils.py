from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError

DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError("Date must be in YYYY-MM-DD format")


def session_id_for(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def now_utc() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def at_local_time(day: date, at: time, tz_name: str) -> datetime:
    """Combine a calendar day and wall-clock time in the organization timezone."""
    return datetime.combine(day, at, tzinfo=ZoneInfo(tz_name))


def to_local(value: datetime, tz_name: str) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name))


def format_clock_12h(value: Optional[datetime], tz_name: str) -> str:
    """Render a timestamp as e.g. ``9:00 AM`` in the organization timezone."""
    if value is None:
        return "N/A"
    local = to_local(value, tz_name)
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"


def format_local_date(value: datetime, tz_name: str) -> str:
    return to_local(value, tz_name).strftime(DATE_FORMAT)

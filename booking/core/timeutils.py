"""
Clock helpers. Slots are whole hours on the wall clock of settings.timezone;
everything returned is timezone-aware UTC.
"""
from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from babel.dates import format_datetime

from booking.config import settings
from booking.core.constants import SLOT_FORMATS


def now() -> datetime:
    return datetime.now(timezone.utc)


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def ensure_utc(dt: datetime) -> datetime:
    """Values read back from SQLite lose their offset; they were written as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp or date. Naive values are local wall-clock time.

    Raises ValueError on malformed input.
    """
    dt = datetime.fromisoformat(value.strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=local_zone())
    return dt.astimezone(timezone.utc)


def start_of_hour(dt: datetime) -> datetime:
    local = dt.astimezone(local_zone())
    return local.replace(minute=0, second=0, microsecond=0).astimezone(timezone.utc)


def start_of_day(dt: datetime) -> datetime:
    day = dt.astimezone(local_zone()).date()
    return datetime.combine(day, time.min, tzinfo=local_zone()).astimezone(timezone.utc)


def end_of_day(dt: datetime) -> datetime:
    day = dt.astimezone(local_zone()).date()
    return datetime.combine(day, time.max, tzinfo=local_zone()).astimezone(timezone.utc)


def is_before(dt: datetime, ref: datetime | None = None) -> bool:
    return dt < (ref if ref is not None else now())


def sub_hours(dt: datetime, hours: int) -> datetime:
    return dt - timedelta(hours=hours)


def format_slot(dt: datetime, locale: str | None = None) -> str:
    """Human-readable slot, e.g. pt_BR: 'dia 19 de outubro, às 15:00h'."""
    loc = locale or settings.locale
    pattern = SLOT_FORMATS.get(loc.split("_")[0], "medium")
    return format_datetime(ensure_utc(dt), pattern, tzinfo=local_zone(), locale=loc)

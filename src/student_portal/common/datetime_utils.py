from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_REFERENCE_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def to_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def from_millis(ms: float) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def try_from_millis(ms: float) -> Optional[datetime]:
    """Like ``from_millis`` but ``None`` for values outside the datetime range."""
    try:
        return from_millis(ms)
    except (OverflowError, OSError, ValueError):
        return None


def local_date(now: Optional[datetime] = None, *, tz_name: str = DEFAULT_REFERENCE_TIMEZONE) -> date:
    """Calendar date in the reference zone, independent of the server zone."""
    now = now or now_utc()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).date()


def date_key(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def today_key(now: Optional[datetime] = None, *, tz_name: str = DEFAULT_REFERENCE_TIMEZONE) -> str:
    """``YYYY-MM-DD`` for *now* in the reference zone.

    Every student shares one day boundary regardless of device settings.
    """
    return date_key(local_date(now, tz_name=tz_name))


def tomorrow_key(now: Optional[datetime] = None, *, tz_name: str = DEFAULT_REFERENCE_TIMEZONE) -> str:
    return date_key(local_date(now, tz_name=tz_name) + timedelta(days=1))


def format_clock(value: datetime, *, tz_name: str = DEFAULT_REFERENCE_TIMEZONE) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name)).strftime("%H:%M")

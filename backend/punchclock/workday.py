"""
Calendar-day boundaries for attendance.

A punch belongs to the calendar day of its timestamp in the attendance time
zone (settings.ATTENDANCE_TIMEZONE, UTC midnight by default). Both the punch
type toggle and the daily summary use these functions, so they always agree
on which punches share a day.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from punchclock.core.config import settings


def attendance_zone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or settings.ATTENDANCE_TIMEZONE)


def ensure_utc(ts: datetime) -> datetime:
    """Normalise to an aware UTC datetime. Naive values are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def calendar_day(ts: datetime, tz_name: str | None = None) -> date:
    return ensure_utc(ts).astimezone(attendance_zone(tz_name)).date()


def day_bounds(day: date, tz_name: str | None = None) -> tuple[datetime, datetime]:
    """Half-open UTC interval [start, end) covering the given calendar day."""
    zone = attendance_zone(tz_name)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

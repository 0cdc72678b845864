"""
Punch type resolution and calendar-day tests.

Tests:
  - toggle law: first punch of the day is "in", then out/in alternate
  - explicit direction is used verbatim
  - punches of a previous day do not influence today's toggle
  - calendar_day / day_bounds under UTC and a facility-local zone
  - the toggle follows the configured zone across UTC midnight
  - unknown ATTENDANCE_TIMEZONE is rejected when settings load
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from punchclock.core.config import Settings
from punchclock.services.punches import record_punch, resolve_punch_type
from punchclock.workday import calendar_day, day_bounds, ensure_utc

DAY = datetime(2026, 1, 13, tzinfo=timezone.utc)


def _at(hour: int, minute: int = 0, day: datetime = DAY) -> datetime:
    return day.replace(hour=hour, minute=minute)


class TestToggle:
    async def test_toggle_sequence(self, db: AsyncSession, make_card) -> None:
        employee_id = await make_card("TOGGLE-1")
        expected = ["in", "out", "in", "out"]

        for i, want in enumerate(expected):
            at = _at(9 + i)
            punch_type = await resolve_punch_type(employee_id, at, None, db)
            assert punch_type == want, f"punch #{i} expected {want}, got {punch_type}"
            await record_punch(employee_id, at, punch_type, "TOGGLE-1", db)
            await db.commit()

    async def test_explicit_type_is_trusted(self, db: AsyncSession, make_card) -> None:
        employee_id = await make_card("TOGGLE-2")
        await record_punch(employee_id, _at(9), "in", "TOGGLE-2", db)
        await db.commit()

        # Auto-detection would say "out"; the reader's label wins.
        assert await resolve_punch_type(employee_id, _at(10), "in", db) == "in"

    async def test_previous_day_is_ignored(self, db: AsyncSession, make_card) -> None:
        employee_id = await make_card("TOGGLE-3")
        yesterday = DAY - timedelta(days=1)
        await record_punch(employee_id, _at(22, day=yesterday), "in", "TOGGLE-3", db)
        await db.commit()

        assert await resolve_punch_type(employee_id, _at(8), None, db) == "in"

    async def test_uses_latest_punch_of_day_not_latest_inserted(
        self, db: AsyncSession, make_card
    ) -> None:
        employee_id = await make_card("TOGGLE-4")
        await record_punch(employee_id, _at(12), "out", "TOGGLE-4", db)
        # Backdated punch arrives later but happened earlier
        await record_punch(employee_id, _at(9), "in", "TOGGLE-4", db)
        await db.commit()

        assert await resolve_punch_type(employee_id, _at(13), None, db) == "in"


class TestWorkday:
    def test_utc_midnight_boundary(self) -> None:
        assert calendar_day(datetime(2026, 1, 13, 23, 59, tzinfo=timezone.utc), "UTC") == date(2026, 1, 13)
        assert calendar_day(datetime(2026, 1, 14, 0, 0, tzinfo=timezone.utc), "UTC") == date(2026, 1, 14)

    def test_offset_timestamp_is_converted_to_utc_day(self) -> None:
        ts = datetime(2026, 1, 14, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        assert calendar_day(ts, "UTC") == date(2026, 1, 13)

    def test_naive_timestamp_is_utc(self) -> None:
        assert ensure_utc(datetime(2026, 1, 13, 9, 0)) == datetime(2026, 1, 13, 9, 0, tzinfo=timezone.utc)

    def test_day_bounds_utc(self) -> None:
        start, end = day_bounds(date(2026, 1, 13), "UTC")
        assert start == datetime(2026, 1, 13, tzinfo=timezone.utc)
        assert end == datetime(2026, 1, 14, tzinfo=timezone.utc)

    def test_facility_local_zone(self) -> None:
        start, end = day_bounds(date(2026, 1, 13), "Europe/Moscow")
        assert start == datetime(2026, 1, 12, 21, 0, tzinfo=timezone.utc)
        assert end - start == timedelta(hours=24)
        assert calendar_day(datetime(2026, 1, 12, 22, 0, tzinfo=timezone.utc), "Europe/Moscow") == date(2026, 1, 13)

    async def test_toggle_follows_configured_zone(self, db: AsyncSession, make_card) -> None:
        employee_id = await make_card("TOGGLE-TZ")
        # 22:00 UTC on the 12th is 01:00 on the 13th in Moscow
        await record_punch(employee_id, _at(22, day=DAY - timedelta(days=1)), "in", "TOGGLE-TZ", db)
        await db.commit()

        assert await resolve_punch_type(employee_id, _at(6), None, db, tz_name="Europe/Moscow") == "out"
        assert await resolve_punch_type(employee_id, _at(6), None, db, tz_name="UTC") == "in"

    def test_known_zone_is_accepted(self) -> None:
        assert Settings(ATTENDANCE_TIMEZONE="Europe/Moscow").ATTENDANCE_TIMEZONE == "Europe/Moscow"

    @pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "not a zone"])
    def test_unknown_zone_is_rejected(self, zone: str) -> None:
        with pytest.raises(ValidationError, match="Unknown time zone"):
            Settings(ATTENDANCE_TIMEZONE=zone)

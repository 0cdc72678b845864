"""
Daily attendance aggregation.

Keeps exactly one daily_attendance row per (employee, calendar day):
- the first "in" of the day becomes check_in and is never overwritten;
- every "out" overwrites check_out;
- every "out" recomputes work_hours from the whole day's punch list.

The row is created or updated through a single INSERT ... ON CONFLICT DO
UPDATE and then re-read under a row lock, so two requests touching the same
employee and day cannot both insert or interleave their hour updates.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from punchclock.core.errors import RecordFailure
from punchclock.db.models import AttendancePunch, DailyAttendance
from punchclock.services.punches import list_day_punches
from punchclock.workday import calendar_day, ensure_utc

logger = logging.getLogger(__name__)

_HOURS_QUANT = Decimal("0.01")


def compute_worked_hours(punches: Iterable[tuple[datetime, str]]) -> float:
    """
    Sum the worked time of one day's punches, in hours rounded to 2 decimals.

    Punches are replayed in chronological order. An "in" opens an interval
    unless one is already open; the next "out" closes it. An "out" with no
    open interval and a trailing unmatched "in" add nothing.
    """
    ordered = sorted(((ensure_utc(ts), kind) for ts, kind in punches), key=lambda p: p[0])

    total = timedelta(0)
    opened: datetime | None = None
    for ts, kind in ordered:
        if kind == "in":
            if opened is None:
                opened = ts
        elif kind == "out" and opened is not None:
            total += ts - opened
            opened = None

    hours = Decimal(str(total.total_seconds())) / Decimal(3600)
    return float(hours.quantize(_HOURS_QUANT, rounding=ROUND_HALF_UP))


def _dialect_insert(db: AsyncSession):
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert
    return pg_insert


async def _lock_summary(employee_id: uuid.UUID, day: date, db: AsyncSession) -> DailyAttendance:
    result = await db.execute(
        select(DailyAttendance)
        .where(DailyAttendance.employee_id == employee_id, DailyAttendance.work_date == day)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def update_daily_summary(
    employee_id: uuid.UUID,
    at: datetime,
    punch_type: str,
    db: AsyncSession,
    tz_name: str | None = None,
) -> DailyAttendance:
    """Fold an already recorded punch into the employee's summary for its day."""
    ts = ensure_utc(at)
    day = calendar_day(ts, tz_name)

    insert = _dialect_insert(db)
    stmt = insert(DailyAttendance).values(
        employee_id=employee_id,
        work_date=day,
        check_in=ts if punch_type == "in" else None,
        check_out=ts if punch_type == "out" else None,
        status="present",
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["employee_id", "work_date"],
        set_={
            "check_in": func.coalesce(DailyAttendance.check_in, stmt.excluded.check_in),
            "check_out": func.coalesce(stmt.excluded.check_out, DailyAttendance.check_out),
            "updated_at": func.now(),
        },
    )

    try:
        await db.execute(stmt)
        summary = await _lock_summary(employee_id, day, db)

        if punch_type == "out":
            punches = await list_day_punches(employee_id, day, db, tz_name)
            summary.work_hours = compute_worked_hours(
                (p.punch_time, p.punch_type) for p in punches
            )
            await db.flush()
            logger.info(
                "Work hours recomputed: employee=%s day=%s punches=%d hours=%.2f",
                employee_id, day, len(punches), summary.work_hours,
            )
    except SQLAlchemyError as exc:
        logger.error("Failed to update daily attendance for employee %s on %s: %s", employee_id, day, exc)
        raise RecordFailure() from exc

    return summary


async def get_daily_attendance(
    employee_id: uuid.UUID, day: date, db: AsyncSession, tz_name: str | None = None
) -> tuple[DailyAttendance, list[AttendancePunch]] | None:
    result = await db.execute(
        select(DailyAttendance).where(
            DailyAttendance.employee_id == employee_id,
            DailyAttendance.work_date == day,
        )
    )
    summary = result.scalar_one_or_none()
    if summary is None:
        return None
    punches = await list_day_punches(employee_id, day, db, tz_name)
    return summary, punches

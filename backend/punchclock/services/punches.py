import logging
import uuid
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from punchclock.core.errors import RecordFailure
from punchclock.db.models import AttendancePunch
from punchclock.workday import calendar_day, day_bounds, ensure_utc

logger = logging.getLogger(__name__)


async def get_last_punch_type(
    employee_id: uuid.UUID, day: date, db: AsyncSession, tz_name: str | None = None
) -> str | None:
    """punch_type of the latest punch the employee has on the given day."""
    start, end = day_bounds(day, tz_name)
    result = await db.execute(
        select(AttendancePunch.punch_type)
        .where(
            AttendancePunch.employee_id == employee_id,
            AttendancePunch.punch_time >= start,
            AttendancePunch.punch_time < end,
        )
        .order_by(AttendancePunch.punch_time.desc(), AttendancePunch.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_day_punches(
    employee_id: uuid.UUID, day: date, db: AsyncSession, tz_name: str | None = None
) -> list[AttendancePunch]:
    """All punches of the employee on the given day, oldest first."""
    start, end = day_bounds(day, tz_name)
    result = await db.execute(
        select(AttendancePunch)
        .where(
            AttendancePunch.employee_id == employee_id,
            AttendancePunch.punch_time >= start,
            AttendancePunch.punch_time < end,
        )
        .order_by(AttendancePunch.punch_time.asc(), AttendancePunch.id.asc())
    )
    return list(result.scalars().all())


async def resolve_punch_type(
    employee_id: uuid.UUID,
    at: datetime,
    explicit: str | None,
    db: AsyncSession,
    tz_name: str | None = None,
) -> str:
    """
    Decide whether a punch is an "in" or an "out".

    An explicit direction from the reader is trusted as is. Otherwise the
    punch toggles the employee's state for the day: after an "in" comes an
    "out", after an "out" (or nothing yet) comes an "in".
    """
    if explicit is not None:
        return explicit

    last = await get_last_punch_type(employee_id, calendar_day(at, tz_name), db, tz_name)
    return "out" if last == "in" else "in"


async def record_punch(
    employee_id: uuid.UUID,
    at: datetime,
    punch_type: str,
    card_id: str,
    db: AsyncSession,
    device_id: str | None = None,
    device_location: str | None = None,
    source: str = "card",
) -> int:
    """Append a punch row and return its id. Replays are stored again."""
    punch = AttendancePunch(
        employee_id=employee_id,
        punch_time=ensure_utc(at),
        punch_type=punch_type,
        card_id=card_id,
        device_id=device_id,
        device_location=device_location,
        source=source,
    )
    try:
        db.add(punch)
        await db.flush()
    except SQLAlchemyError as exc:
        logger.error("Failed to record punch for card %s: %s", card_id, exc)
        raise RecordFailure() from exc

    logger.info("Punch recorded: card=%s employee=%s type=%s id=%d", card_id, employee_id, punch_type, punch.id)
    return punch.id

"""
Batch punch processing.

Every punch runs through card lookup, punch type resolution, recording and
daily aggregation. Punches are handled one after another in arrival order;
an error on one punch is captured in its result and the batch moves on.
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from punchclock.core.config import Settings
from punchclock.core.errors import InvalidPunch, MissingCardId, PunchError, RecordFailure
from punchclock.schemas.punch import PunchBatchResponse, PunchRequest, PunchResult
from punchclock.services.attendance import update_daily_summary
from punchclock.services.cards import resolve_card
from punchclock.services.punches import record_punch, resolve_punch_type
from punchclock.workday import ensure_utc

logger = logging.getLogger(__name__)


def _raw_card_id(raw: Any) -> str | None:
    if isinstance(raw, dict) and isinstance(raw.get("card_id"), str):
        return raw["card_id"]
    return None


def _parse_punch(raw: Any) -> PunchRequest:
    try:
        punch = PunchRequest.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "punch"
        raise InvalidPunch(f"Invalid {field}: {first['msg']}") from exc
    if not punch.card_id or not punch.card_id.strip():
        raise MissingCardId()
    return punch


async def process_punch(
    raw: Any,
    received_at: datetime,
    db: AsyncSession,
    settings: Settings,
) -> PunchResult:
    """Process one punch and commit it, or roll it back and report why."""
    card_id = _raw_card_id(raw)
    try:
        punch = _parse_punch(raw)
        card_id = punch.card_id
        at = ensure_utc(punch.punch_time or received_at)

        employee_id = await resolve_card(punch.card_id, at, db)
        punch_type = await resolve_punch_type(
            employee_id, at, punch.punch_type, db, tz_name=settings.ATTENDANCE_TIMEZONE
        )
        punch_id = await record_punch(
            employee_id,
            at,
            punch_type,
            punch.card_id,
            db,
            device_id=punch.device_id,
            device_location=punch.device_location,
            source=settings.PUNCH_SOURCE,
        )
        await update_daily_summary(
            employee_id, at, punch_type, db, tz_name=settings.ATTENDANCE_TIMEZONE
        )
        await db.commit()
    except PunchError as exc:
        await db.rollback()
        logger.warning("Punch rejected for card %s: %s", card_id, exc.message)
        return PunchResult(card_id=card_id, success=False, error=exc.message)
    except Exception:
        await db.rollback()
        logger.exception("Unexpected error while processing punch for card %s", card_id)
        return PunchResult(card_id=card_id, success=False, error=RecordFailure.message)

    return PunchResult(
        card_id=card_id,
        success=True,
        punch_id=punch_id,
        punch_type=punch_type,
        punch_time=at,
    )


async def process_batch(
    raw_punches: list[Any],
    received_at: datetime,
    db: AsyncSession,
    settings: Settings,
) -> PunchBatchResponse:
    """Run each punch sequentially; results keep the order of the request."""
    results: list[PunchResult] = []
    for raw in raw_punches:
        results.append(await process_punch(raw, received_at, db, settings))

    response = PunchBatchResponse.from_results(results)
    logger.info(
        "Punch batch processed: processed=%d, successful=%d, failed=%d",
        response.processed, response.successful, response.failed,
    )
    return response

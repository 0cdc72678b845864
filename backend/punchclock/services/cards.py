"""
Card directory lookup.

Maps a badge id to the employee it is bound to and checks that the badge
may still be used at the time of the punch. The directory itself is owned by
badge tooling elsewhere; this module never writes to it.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from punchclock.core.errors import CardExpired, CardInactive, CardNotRegistered
from punchclock.db.models import EmployeeCard
from punchclock.workday import ensure_utc

logger = logging.getLogger(__name__)


async def resolve_card(card_id: str, at: datetime, db: AsyncSession) -> uuid.UUID:
    """
    Return the employee_id bound to card_id.

    Args:
        card_id: Badge identifier as sent by the reader.
        at: Effective time of the punch; the card must not have expired before it.
        db: Active async database session.

    Raises:
        CardNotRegistered, CardInactive, CardExpired.
    """
    result = await db.execute(
        select(EmployeeCard.employee_id, EmployeeCard.is_active, EmployeeCard.expires_at)
        .where(EmployeeCard.card_id == card_id)
    )
    row = result.one_or_none()

    if row is None:
        logger.warning("Card not found: %s", card_id)
        raise CardNotRegistered()

    employee_id, is_active, expires_at = row

    if not is_active:
        logger.warning("Card inactive: %s", card_id)
        raise CardInactive()

    if expires_at is not None and ensure_utc(expires_at) < ensure_utc(at):
        logger.warning("Card expired: %s (expires_at=%s, punch at %s)", card_id, expires_at, at)
        raise CardExpired()

    return employee_id

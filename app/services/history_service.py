"""
Health History Service
Append-only writes and newest-first reads of a user's diagnoses
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_handling import StorageError
from app.models import HealthHistory

logger = logging.getLogger(__name__)

DISPLAY_FORMAT = "%d/%m/%Y %H.%M.%S"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def append(
    db: AsyncSession,
    user_id: str,
    symptoms: Any,
    diagnosis: str,
    timestamp: Optional[datetime] = None,
    clock: Callable[[], datetime] = utcnow,
) -> int:
    """
    Record one diagnosis for a user

    Args:
        db: Database session
        user_id: Owner of the record
        symptoms: The submitted symptom list, stored as-is
        diagnosis: Resolved disease name
        timestamp: When the diagnosis happened; clock() is used if omitted
        clock: Source of the current time

    Returns:
        ID of the new record

    Raises:
        StorageError: If the write fails
    """
    if timestamp is None:
        timestamp = clock()
    if timestamp.tzinfo is None:
        # Naive datetimes are taken as UTC
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    record = HealthHistory(
        user_id=user_id,
        symptoms=symptoms,
        diagnosis=diagnosis,
        timestamp=timestamp,
    )
    try:
        db.add(record)
        await db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Failed to save health history for user {user_id}: {e}")
        raise StorageError(cause=e)

    logger.info(f"Saved health history {record.id} for user {user_id}")
    return record.id


async def list_by_user(db: AsyncSession, user_id: str) -> List[HealthHistory]:
    """
    All records of a user, newest timestamp first

    Raises:
        StorageError: If the read fails
    """
    query = (
        select(HealthHistory)
        .where(HealthHistory.user_id == user_id)
        .order_by(HealthHistory.timestamp.desc(), HealthHistory.id.desc())
    )
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Failed to read health history for user {user_id}: {e}")
        raise StorageError("Health history could not be loaded", cause=e)
    return list(result.scalars().all())


def format_timestamp(value: datetime, tz_name: str = "Asia/Jakarta") -> str:
    """Render a timestamp for display in the given timezone"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name)).strftime(DISPLAY_FORMAT)

"""
Health History Endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from app.core.auth import ensure_same_user, get_current_user
from app.models import User
from app.schemas.common import success_response
from app.schemas.health import HistoryCreateRequest, HistoryRecordResponse
from app.services import history_service

router = APIRouter(prefix="/history", tags=["Health History"])


@router.post("")
async def create_history(
    history_data: HistoryCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Save one health history record

    The timestamp defaults to the time of the request when omitted.
    """
    ensure_same_user(current_user, history_data.user_id)
    record_id = await history_service.append(
        db,
        user_id=history_data.user_id,
        symptoms=history_data.symptoms,
        diagnosis=history_data.diagnosis,
        timestamp=history_data.timestamp,
    )
    return success_response("Health history saved successfully", {"id": record_id})


@router.get("/{user_id}")
async def get_history(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """A user's health history, newest first"""
    ensure_same_user(current_user, user_id)
    records = await history_service.list_by_user(db, user_id)
    return success_response(
        "Health history fetched successfully",
        [HistoryRecordResponse.from_record(record) for record in records],
    )

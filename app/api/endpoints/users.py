"""
User profile endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from app.core.auth import ensure_same_user, get_current_user
from app.models import User
from app.schemas.auth import UserResponse, UserUpdateRequest
from app.schemas.common import success_response
from app.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get a user's profile"""
    ensure_same_user(current_user, user_id)
    user = await user_service.get_user(db, user_id)
    return success_response("User data fetched successfully", UserResponse.model_validate(user))


async def _update(user_id: str, user_data: UserUpdateRequest, db: AsyncSession) -> UserResponse:
    user = await user_service.update_user(
        db,
        user_id,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
    )
    return UserResponse.model_validate(user)


@router.post("/{user_id}")
async def save_user(
    user_id: str,
    user_data: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save profile fields for a user"""
    ensure_same_user(current_user, user_id)
    user = await _update(user_id, user_data, db)
    return success_response("User data saved successfully", user)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    user_data: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Edit profile fields for a user"""
    ensure_same_user(current_user, user_id)
    user = await _update(user_id, user_data, db)
    return success_response("User data updated successfully", user)

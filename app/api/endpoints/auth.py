"""
Authentication Endpoints
Handles user registration and login
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.common import success_response
from app.services import user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_200_OK)
async def register(
    user_data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    User Registration Endpoint

    Creates a new account and returns its opaque user ID.

    Raises:
        ConflictException: If the email is already registered
    """
    user = await user_service.register_user(
        db,
        email=user_data.email,
        password=user_data.password,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
    )
    return success_response("Registration successful", {"userId": user.user_id})


@router.post("/login")
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    User Login Endpoint

    Authenticates with email and password and returns a bearer token.

    Raises:
        UnauthorizedException: If credentials are invalid
    """
    user, token = await user_service.login_user(db, login_data.email, login_data.password)
    return success_response("Login successful", {"userId": user.user_id, "token": token})

"""
Authentication dependencies
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from app.core.error_handling import ForbiddenException, UnauthorizedException
from app.core.security import decode_access_token
from app.models import User

bearer_scheme = HTTPBearer(auto_error=False)


async def resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession,
) -> Optional[User]:
    """Resolve bearer credentials to a user; None when no token was sent"""
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    result = await db.execute(select(User).where(User.user_id == payload["sub"]))
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthorizedException("User no longer exists")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    return await resolve_user(credentials, db)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Require a valid bearer token"""
    if user is None:
        raise UnauthorizedException("Not authenticated")
    return user


def ensure_same_user(current_user: User, user_id: str) -> None:
    """Users may only act on their own records"""
    if current_user.user_id != user_id:
        raise ForbiddenException("You can only access your own data")

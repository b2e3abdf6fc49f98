"""
User Service
Registration, login and profile updates backed by the users table
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_handling import ConflictException, NotFoundException, UnauthorizedException
from app.core.security import create_access_token, generate_user_id, hash_password, verify_password
from app.models import User

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.user_id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundException("User not found")
    return user


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> User:
    """
    Create a new account

    Raises:
        ConflictException: If the email is already registered
    """
    if await get_user_by_email(db, email):
        raise ConflictException("Email is already registered")

    user = User(
        user_id=generate_user_id(),
        email=email,
        first_name=first_name,
        last_name=last_name,
        hashed_password=hash_password(password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        raise ConflictException("Email is already registered")

    logger.info(f"Registered user {user.user_id}")
    return user


async def login_user(db: AsyncSession, email: str, password: str) -> Tuple[User, str]:
    """
    Check credentials and issue an access token

    Returns:
        (user, token)

    Raises:
        UnauthorizedException: If the email is unknown or the password is wrong
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        raise UnauthorizedException("Incorrect email or password")

    token = create_access_token({"sub": user.user_id})
    return user, token


async def update_user(
    db: AsyncSession,
    user_id: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    """Update the given profile fields; fields left as None are kept"""
    user = await get_user(db, user_id)

    if email is not None and email != user.email:
        if await get_user_by_email(db, email):
            raise ConflictException("Email is already registered")
        user.email = email
    if first_name is not None:
        user.first_name = first_name
    if last_name is not None:
        user.last_name = last_name

    await db.flush()
    await db.refresh(user)
    return user

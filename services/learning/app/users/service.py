"""
Users service: account creation and password login.

Rules:
  - Zero FastAPI imports.
  - Passwords are stored only as argon2 hashes.
  - No token is issued; callers get the user record back.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import InvalidCredentialsError, UserAlreadyExistsError, UserNotFoundError
from app.models.user import User
from app.users.utils import hash_password, verify_password

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(str(user_id))
    return user


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    *,
    first_name: str,
    last_name: str,
    avatar_url: str | None = None,
) -> User:
    if await get_user_by_email(db, email) is not None:
        raise UserAlreadyExistsError()

    user = User(
        email=email.lower(),
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        avatar_url=avatar_url,
        is_active=True,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise UserAlreadyExistsError() from exc
    await db.refresh(user)
    logger.info("User %s registered", user.user_id)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    # Same error for unknown email, wrong password and disabled account.
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()

    user.last_login = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(user)
    return user

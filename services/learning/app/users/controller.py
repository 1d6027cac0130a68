"""Users controller: maps service results to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import InvalidCredentialsError, UserAlreadyExistsError, UserNotFoundError
from app.users import service
from app.users.schemas import CreateUserRequest, LoginRequest, UserResponse

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, UserNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, UserAlreadyExistsError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered.")
    if isinstance(exc, InvalidCredentialsError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )
    logger.exception("Unexpected users error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def create_user(db: AsyncSession, body: CreateUserRequest) -> UserResponse:
    try:
        user = await service.create_user(
            db, body.email, body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            avatar_url=body.avatar_url,
        )
        return UserResponse.model_validate(user)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def login(db: AsyncSession, body: LoginRequest) -> UserResponse:
    try:
        user = await service.authenticate_user(db, body.email, body.password)
        return UserResponse.model_validate(user)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_user(db: AsyncSession, user_id: UUID) -> UserResponse:
    try:
        user = await service.get_user(db, user_id)
        return UserResponse.model_validate(user)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

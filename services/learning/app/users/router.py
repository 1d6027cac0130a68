"""Users router: registration, login and profile lookup."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.users import controller
from app.users.schemas import CreateUserRequest, LoginRequest, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def create_user(
    body: CreateUserRequest,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.create_user(db, body)


@router.post(
    "/login",
    response_model=UserResponse,
    summary="Check email and password",
    description="Verifies the password and stamps last_login. No session or token is issued.",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.login(db, body)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user profile",
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return await controller.get_user(db, user_id)

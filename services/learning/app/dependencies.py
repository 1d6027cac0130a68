"""Request-scoped dependencies shared by the routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.progress.repository import ProgressRepository, SqlProgressRepository


async def get_progress_repository(
    db: AsyncSession = Depends(get_db),
) -> ProgressRepository:
    return SqlProgressRepository(db)

"""Progress controller: maps service results to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status

from app.exceptions import DuplicateStateError, MalformedInputError, NotFoundError
from app.progress import service
from app.progress.repository import ProgressRepository
from app.progress.schemas import (
    CourseProgressResponse,
    MarkLessonCompleteRequest,
    UserProgressResponse,
)

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, MalformedInputError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, DuplicateStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.exception("Unexpected progress error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def mark_lesson_complete(
    repo: ProgressRepository,
    lesson_id: UUID,
    body: MarkLessonCompleteRequest,
) -> UserProgressResponse:
    try:
        progress = await service.mark_lesson_complete(
            repo, body.user_id, lesson_id, watch_time=body.watch_time,
        )
        return UserProgressResponse.model_validate(progress)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_user_progress(
    repo: ProgressRepository,
    user_id: UUID,
    course_id: UUID | None,
) -> list[UserProgressResponse]:
    try:
        records = await service.get_user_progress(repo, user_id, course_id)
        return [UserProgressResponse.model_validate(r) for r in records]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_course_progress(
    repo: ProgressRepository,
    user_id: UUID,
    course_id: UUID,
) -> CourseProgressResponse:
    try:
        result = await service.evaluate_course_progress(repo, user_id, course_id)
        return CourseProgressResponse.model_validate(result)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

"""Progress router: lesson completion and progress reads."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_progress_repository
from app.progress import controller
from app.progress.repository import ProgressRepository
from app.progress.schemas import (
    CourseProgressResponse,
    MarkLessonCompleteRequest,
    UserProgressResponse,
)

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.post(
    "/lessons/{lesson_id}/complete",
    response_model=UserProgressResponse,
    summary="Mark a lesson complete",
    description="Creates or updates the user's progress record for the lesson, "
    "then recomputes the enrollment progress of the lesson's course. "
    "Calling it again only updates watch time.",
)
async def mark_lesson_complete(
    lesson_id: UUID,
    body: MarkLessonCompleteRequest,
    repo: ProgressRepository = Depends(get_progress_repository),
) -> UserProgressResponse:
    return await controller.mark_lesson_complete(repo, lesson_id, body)


@router.get(
    "/users/{user_id}",
    response_model=list[UserProgressResponse],
    summary="List a user's lesson progress",
)
async def get_user_progress(
    user_id: UUID,
    course_id: UUID | None = Query(default=None, description="Limit to one course."),
    repo: ProgressRepository = Depends(get_progress_repository),
) -> list[UserProgressResponse]:
    return await controller.get_user_progress(repo, user_id, course_id)


@router.get(
    "/users/{user_id}/courses/{course_id}",
    response_model=CourseProgressResponse,
    summary="Compute a user's progress through a course",
)
async def get_course_progress(
    user_id: UUID,
    course_id: UUID,
    repo: ProgressRepository = Depends(get_progress_repository),
) -> CourseProgressResponse:
    return await controller.get_course_progress(repo, user_id, course_id)

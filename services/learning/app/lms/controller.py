"""LMS controller: maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyEnrolledError,
    CourseSlugTakenError,
    DuplicateLessonOrderError,
    NotFoundError,
)
from app.lms import service
from app.lms.schemas import (
    CourseResponse,
    CreateCourseRequest,
    CreateLessonRequest,
    EnrollmentResponse,
    EnrollRequest,
    LessonResponse,
)

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AlreadyEnrolledError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already enrolled in this course.")
    if isinstance(exc, (CourseSlugTakenError, DuplicateLessonOrderError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.exception("Unexpected LMS error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def create_course(db: AsyncSession, body: CreateCourseRequest) -> CourseResponse:
    try:
        course = await service.create_course(db, **body.model_dump())
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_courses(db: AsyncSession) -> list[CourseResponse]:
    try:
        courses = await service.get_courses(db)
        return [CourseResponse.model_validate(c) for c in courses]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_course(db: AsyncSession, course_id: UUID) -> CourseResponse:
    try:
        course = await service.get_course_by_id(db, course_id)
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def publish_course(db: AsyncSession, course_id: UUID) -> CourseResponse:
    try:
        course = await service.publish_course(db, course_id)
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Lessons
# ---------------------------------------------------------------------------


async def create_lesson(db: AsyncSession, body: CreateLessonRequest) -> LessonResponse:
    try:
        fields = body.model_dump(exclude={"course_id"})
        lesson = await service.create_lesson(db, body.course_id, **fields)
        return LessonResponse.model_validate(lesson)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_course_lessons(db: AsyncSession, course_id: UUID) -> list[LessonResponse]:
    try:
        lessons = await service.get_course_lessons(db, course_id)
        return [LessonResponse.model_validate(lesson) for lesson in lessons]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def publish_lesson(db: AsyncSession, lesson_id: UUID) -> LessonResponse:
    try:
        lesson = await service.publish_lesson(db, lesson_id)
        return LessonResponse.model_validate(lesson)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------


async def enroll(db: AsyncSession, body: EnrollRequest) -> EnrollmentResponse:
    try:
        enrollment = await service.enroll_user_in_course(db, body.user_id, body.course_id)
        return EnrollmentResponse.model_validate(enrollment)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_user_enrollments(db: AsyncSession, user_id: UUID) -> list[EnrollmentResponse]:
    try:
        enrollments = await service.get_user_enrollments(db, user_id)
        return [EnrollmentResponse.model_validate(e) for e in enrollments]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

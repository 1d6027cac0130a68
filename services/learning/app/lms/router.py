"""LMS router: HTTP layer only.

Defines endpoints for the course catalog, lessons, and enrollment.
Delegates to controller for business logic orchestration.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.lms import controller
from app.lms.schemas import (
    CourseResponse,
    CreateCourseRequest,
    CreateLessonRequest,
    EnrollmentResponse,
    EnrollRequest,
    LessonResponse,
)

router = APIRouter(prefix="/lms", tags=["LMS"])


# ======================================================================
# Course endpoints
# ======================================================================


@router.get(
    "/courses",
    response_model=list[CourseResponse],
    summary="List published courses",
    description="Published courses ordered by category, then by order_index.",
)
async def get_courses(
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    return await controller.get_courses(db)


@router.post(
    "/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course",
    description="New courses are unpublished. Slug is generated from the title if omitted.",
)
async def create_course(
    body: CreateCourseRequest,
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.create_course(db, body)


@router.get(
    "/courses/{course_id}",
    response_model=CourseResponse,
    summary="Get a course",
)
async def get_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.get_course(db, course_id)


@router.post(
    "/courses/{course_id}/publish",
    response_model=CourseResponse,
    summary="Publish a course",
)
async def publish_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.publish_course(db, course_id)


@router.get(
    "/courses/{course_id}/lessons",
    response_model=list[LessonResponse],
    summary="List the lessons of a course",
    description="All lessons in order_index order, published or not.",
)
async def get_course_lessons(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[LessonResponse]:
    return await controller.get_course_lessons(db, course_id)


# ======================================================================
# Lesson endpoints
# ======================================================================


@router.post(
    "/lessons",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a lesson to a course",
)
async def create_lesson(
    body: CreateLessonRequest,
    db: AsyncSession = Depends(get_db),
) -> LessonResponse:
    return await controller.create_lesson(db, body)


@router.post(
    "/lessons/{lesson_id}/publish",
    response_model=LessonResponse,
    summary="Publish a lesson",
)
async def publish_lesson(
    lesson_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> LessonResponse:
    return await controller.publish_lesson(db, lesson_id)


# ======================================================================
# Enrollment endpoints
# ======================================================================


@router.post(
    "/enrollments",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll a user in a course",
    description="Fails with 409 if the user is already enrolled.",
)
async def enroll(
    body: EnrollRequest,
    db: AsyncSession = Depends(get_db),
) -> EnrollmentResponse:
    return await controller.enroll(db, body)


@router.get(
    "/users/{user_id}/enrollments",
    response_model=list[EnrollmentResponse],
    summary="List a user's enrollments",
)
async def get_user_enrollments(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[EnrollmentResponse]:
    return await controller.get_user_enrollments(db, user_id)

"""LMS service: pure business logic, no FastAPI imports.

Handles course and lesson authoring, the published catalog, and
enrollment.
"""

from __future__ import annotations

import logging
import re
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    CourseSlugTakenError,
    DuplicateLessonOrderError,
    LessonNotFoundError,
    UserNotFoundError,
)
from app.models.course import Course
from app.models.enrollment import UserEnrollment
from app.models.enums import Difficulty
from app.models.lesson import Lesson
from app.models.user import User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Slug generation
# ---------------------------------------------------------------------------


def slugify(title: str) -> str:
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    return slug.strip("-")


async def _unique_course_slug(db: AsyncSession, base_slug: str) -> str:
    slug = base_slug
    counter = 1
    while await db.scalar(select(func.count()).where(Course.slug == slug)):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def create_course(
    db: AsyncSession,
    *,
    title: str,
    description: str,
    slug: str | None,
    thumbnail_url: str | None,
    difficulty: Difficulty,
    estimated_duration: int,
    category: str,
    order_index: int,
) -> Course:
    if slug:
        if await db.scalar(select(func.count()).where(Course.slug == slug)):
            raise CourseSlugTakenError(slug)
    else:
        slug = await _unique_course_slug(db, slugify(title) or "course")

    course = Course(
        title=title,
        description=description,
        slug=slug,
        thumbnail_url=thumbnail_url,
        difficulty=difficulty,
        estimated_duration=estimated_duration,
        is_published=False,
        category=category,
        order_index=order_index,
    )
    db.add(course)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise CourseSlugTakenError(slug) from exc
    await db.refresh(course)
    return course


async def get_course_by_id(db: AsyncSession, course_id: UUID) -> Course:
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError(str(course_id))
    return course


async def get_courses(db: AsyncSession) -> list[Course]:
    """Published catalog, grouped by category then ordered within it."""
    stmt = (
        select(Course)
        .where(Course.is_published.is_(True))
        .order_by(Course.category, Course.order_index)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def publish_course(db: AsyncSession, course_id: UUID) -> Course:
    course = await get_course_by_id(db, course_id)
    if not course.is_published:
        course.is_published = True
        await db.flush()
        await db.refresh(course)
        logger.info("Course %s published", course_id)
    return course


# ---------------------------------------------------------------------------
# Lessons
# ---------------------------------------------------------------------------


async def create_lesson(
    db: AsyncSession,
    course_id: UUID,
    *,
    title: str,
    description: str,
    slug: str | None,
    video_url: str | None,
    video_duration: int | None,
    text_content: str | None,
    code_examples: str | None,
    order_index: int,
) -> Lesson:
    await get_course_by_id(db, course_id)

    taken = await db.scalar(
        select(func.count()).select_from(Lesson).where(
            Lesson.course_id == course_id,
            Lesson.order_index == order_index,
        )
    )
    if taken:
        raise DuplicateLessonOrderError(order_index)

    lesson = Lesson(
        course_id=course_id,
        title=title,
        description=description,
        slug=slug or slugify(title),
        video_url=video_url,
        video_duration=video_duration,
        text_content=text_content,
        code_examples=code_examples,
        order_index=order_index,
        is_published=False,
    )
    db.add(lesson)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise DuplicateLessonOrderError(order_index) from exc
    await db.refresh(lesson)
    return lesson


async def get_lesson_by_id(db: AsyncSession, lesson_id: UUID) -> Lesson:
    lesson = await db.get(Lesson, lesson_id)
    if lesson is None:
        raise LessonNotFoundError(str(lesson_id))
    return lesson


async def get_course_lessons(db: AsyncSession, course_id: UUID) -> list[Lesson]:
    """All lessons of a course in sequence, published or not."""
    await get_course_by_id(db, course_id)
    stmt = (
        select(Lesson)
        .where(Lesson.course_id == course_id)
        .order_by(Lesson.order_index)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def publish_lesson(db: AsyncSession, lesson_id: UUID) -> Lesson:
    lesson = await get_lesson_by_id(db, lesson_id)
    if not lesson.is_published:
        lesson.is_published = True
        await db.flush()
        await db.refresh(lesson)
    return lesson


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------


async def _get_enrollment(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
) -> UserEnrollment | None:
    stmt = select(UserEnrollment).where(
        UserEnrollment.user_id == user_id,
        UserEnrollment.course_id == course_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def enroll_user_in_course(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
) -> UserEnrollment:
    if await db.get(User, user_id) is None:
        raise UserNotFoundError(str(user_id))
    await get_course_by_id(db, course_id)

    if await _get_enrollment(db, user_id, course_id) is not None:
        raise AlreadyEnrolledError()

    enrollment = UserEnrollment(
        user_id=user_id,
        course_id=course_id,
        progress_percentage=0,
        is_completed=False,
    )
    db.add(enrollment)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise AlreadyEnrolledError() from exc
    await db.refresh(enrollment)
    logger.info("User %s enrolled in course %s", user_id, course_id)
    return enrollment


async def get_user_enrollments(db: AsyncSession, user_id: UUID) -> list[UserEnrollment]:
    stmt = (
        select(UserEnrollment)
        .where(UserEnrollment.user_id == user_id)
        .order_by(UserEnrollment.enrolled_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())

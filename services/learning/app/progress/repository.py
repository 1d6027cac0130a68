"""Persistence seam for progress evaluation.

``ProgressRepository`` is everything the progress service needs from
storage. ``SqlProgressRepository`` implements it over an ``AsyncSession``;
it flushes but never commits, the request dependency owns the transaction.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    CourseNotFoundError,
    DuplicateProgressError,
    DuplicateQuizAttemptError,
    LessonNotFoundError,
    QuizNotFoundError,
    UserNotFoundError,
)
from app.models.course import Course
from app.models.enrollment import UserEnrollment
from app.models.lesson import Lesson
from app.models.quiz import Quiz
from app.models.quiz_attempt import QuizAttempt
from app.models.user import User
from app.models.user_progress import UserProgress


class ProgressRepository(Protocol):
    async def fetch_quiz(self, quiz_id: UUID) -> Quiz: ...

    async def fetch_user(self, user_id: UUID) -> User: ...

    async def fetch_lesson(self, lesson_id: UUID) -> Lesson: ...

    async def fetch_lessons_for_course(self, course_id: UUID) -> list[Lesson]: ...

    async def fetch_progress_for_user(
        self, user_id: UUID, course_id: UUID | None = None,
    ) -> list[UserProgress]: ...

    async def upsert_progress(
        self, user_id: UUID, lesson_id: UUID, completed: bool, watch_time: int | None,
    ) -> UserProgress: ...

    async def upsert_enrollment_progress(
        self, user_id: UUID, course_id: UUID, percent: int, completed: bool,
    ) -> UserEnrollment | None: ...

    async def count_quiz_attempts(self, user_id: UUID, quiz_id: UUID) -> int: ...

    async def record_quiz_attempt(self, attempt: QuizAttempt) -> QuizAttempt: ...


class SqlProgressRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def fetch_quiz(self, quiz_id: UUID) -> Quiz:
        quiz = await self.db.get(Quiz, quiz_id)
        if quiz is None:
            raise QuizNotFoundError(str(quiz_id))
        return quiz

    async def fetch_user(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def fetch_lesson(self, lesson_id: UUID) -> Lesson:
        lesson = await self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise LessonNotFoundError(str(lesson_id))
        return lesson

    async def fetch_lessons_for_course(self, course_id: UUID) -> list[Lesson]:
        if await self.db.get(Course, course_id) is None:
            raise CourseNotFoundError(str(course_id))
        stmt = (
            select(Lesson)
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.order_index)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def fetch_progress_for_user(
        self, user_id: UUID, course_id: UUID | None = None,
    ) -> list[UserProgress]:
        stmt = select(UserProgress).where(UserProgress.user_id == user_id)
        if course_id is not None:
            stmt = stmt.join(Lesson, UserProgress.lesson_id == Lesson.lesson_id).where(
                Lesson.course_id == course_id,
            )
        result = await self.db.execute(stmt.order_by(UserProgress.created_at))
        return list(result.scalars().all())

    async def upsert_progress(
        self, user_id: UUID, lesson_id: UUID, completed: bool, watch_time: int | None,
    ) -> UserProgress:
        stmt = select(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.lesson_id == lesson_id,
        )
        result = await self.db.execute(stmt)
        progress = result.scalar_one_or_none()

        if progress is None:
            progress = UserProgress(
                user_id=user_id,
                lesson_id=lesson_id,
                is_completed=False,
                watch_time=0,
            )
            self.db.add(progress)

        if watch_time:
            progress.watch_time = watch_time

        # Completion is one-way; the first completion time is kept.
        if completed and not progress.is_completed:
            progress.is_completed = True
            progress.completed_at = datetime.now(timezone.utc)

        try:
            await self.db.flush()
        except IntegrityError as exc:
            raise DuplicateProgressError(
                f"Progress for lesson {lesson_id} already recorded",
            ) from exc
        await self.db.refresh(progress)
        return progress

    async def upsert_enrollment_progress(
        self, user_id: UUID, course_id: UUID, percent: int, completed: bool,
    ) -> UserEnrollment | None:
        stmt = select(UserEnrollment).where(
            UserEnrollment.user_id == user_id,
            UserEnrollment.course_id == course_id,
        )
        result = await self.db.execute(stmt)
        enrollment = result.scalar_one_or_none()
        if enrollment is None:
            return None

        now = datetime.now(timezone.utc)
        enrollment.progress_percentage = percent
        enrollment.last_accessed_at = now
        if completed and not enrollment.is_completed:
            enrollment.is_completed = True
            enrollment.completed_at = now

        await self.db.flush()
        await self.db.refresh(enrollment)
        return enrollment

    async def count_quiz_attempts(self, user_id: UUID, quiz_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(QuizAttempt)
            .where(
                QuizAttempt.user_id == user_id,
                QuizAttempt.quiz_id == quiz_id,
            )
        )
        return await self.db.scalar(stmt) or 0

    async def record_quiz_attempt(self, attempt: QuizAttempt) -> QuizAttempt:
        self.db.add(attempt)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            raise DuplicateQuizAttemptError(
                f"Attempt {attempt.attempt_number} already recorded",
            ) from exc
        await self.db.refresh(attempt)
        return attempt

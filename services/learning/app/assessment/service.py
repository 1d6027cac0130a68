"""Assessment service: quiz authoring and attempt history.

Scoring a submission lives in ``app.progress.service``; this module only
creates and reads quizzes and lists stored attempts.

Pure business logic, no FastAPI imports.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import LessonNotFoundError, QuizNotFoundError
from app.models.lesson import Lesson
from app.models.quiz import Quiz
from app.models.quiz_attempt import QuizAttempt
from app.progress.evaluator import parse_questions

logger = logging.getLogger(__name__)


async def create_quiz(
    db: AsyncSession,
    lesson_id: UUID,
    *,
    title: str,
    questions: list[dict],
    passing_score: int,
) -> Quiz:
    lesson = await db.get(Lesson, lesson_id)
    if lesson is None:
        raise LessonNotFoundError(str(lesson_id))

    # Reject anything the scorer could not read back later.
    parse_questions(questions)

    quiz = Quiz(
        lesson_id=lesson_id,
        title=title,
        questions=questions,
        passing_score=passing_score,
    )
    db.add(quiz)
    await db.flush()
    await db.refresh(quiz)
    logger.info("Quiz %s created for lesson %s", quiz.quiz_id, lesson_id)
    return quiz


async def get_quiz_by_id(db: AsyncSession, quiz_id: UUID) -> Quiz:
    quiz = await db.get(Quiz, quiz_id)
    if quiz is None:
        raise QuizNotFoundError(str(quiz_id))
    return quiz


async def get_quizzes_for_lesson(db: AsyncSession, lesson_id: UUID) -> list[Quiz]:
    if await db.get(Lesson, lesson_id) is None:
        raise LessonNotFoundError(str(lesson_id))
    stmt = select(Quiz).where(Quiz.lesson_id == lesson_id).order_by(Quiz.created_at)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_quiz_attempts(
    db: AsyncSession,
    user_id: UUID,
    quiz_id: UUID | None = None,
) -> list[QuizAttempt]:
    """Attempts by a user, newest first, optionally for one quiz."""
    stmt = select(QuizAttempt).where(QuizAttempt.user_id == user_id)
    if quiz_id is not None:
        stmt = stmt.where(QuizAttempt.quiz_id == quiz_id)
    stmt = stmt.order_by(QuizAttempt.attempted_at.desc(), QuizAttempt.attempt_number.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())

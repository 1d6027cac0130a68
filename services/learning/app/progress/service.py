"""Progress service: quiz submissions, lesson completion, course progress.

Pure business logic, no FastAPI imports. Storage is reached only through
a ``ProgressRepository`` so the flow can run against any backend.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from app.models.quiz_attempt import QuizAttempt
from app.models.user_progress import UserProgress
from app.progress.evaluator import (
    CourseProgress,
    aggregate_progress,
    parse_answers,
    parse_questions,
    score_quiz,
)
from app.progress.repository import ProgressRepository

logger = logging.getLogger(__name__)


async def evaluate_quiz_submission(
    repo: ProgressRepository,
    quiz_id: UUID,
    user_id: UUID,
    raw_answers: Any,
) -> QuizAttempt:
    """Score a submission and store it as a new, immutable attempt."""
    quiz = await repo.fetch_quiz(quiz_id)
    await repo.fetch_user(user_id)

    questions = parse_questions(quiz.questions)
    answers = parse_answers(raw_answers)
    result = score_quiz(questions, answers, quiz.passing_score)

    previous = await repo.count_quiz_attempts(user_id, quiz_id)
    now = datetime.now(timezone.utc)
    attempt = await repo.record_quiz_attempt(
        QuizAttempt(
            user_id=user_id,
            quiz_id=quiz_id,
            attempt_number=previous + 1,
            answers=answers,
            score=result.score,
            is_passed=result.passed,
            attempted_at=now,
            completed_at=now,
        )
    )
    logger.info(
        "Quiz %s attempt %d by user %s scored %d (%s)",
        quiz_id, attempt.attempt_number, user_id, result.score,
        "passed" if result.passed else "failed",
    )
    return attempt


async def evaluate_course_progress(
    repo: ProgressRepository,
    user_id: UUID,
    course_id: UUID,
) -> CourseProgress:
    lessons = await repo.fetch_lessons_for_course(course_id)
    records = await repo.fetch_progress_for_user(user_id, course_id)
    return aggregate_progress(lessons, records)


async def mark_lesson_complete(
    repo: ProgressRepository,
    user_id: UUID,
    lesson_id: UUID,
    watch_time: int | None = None,
) -> UserProgress:
    """Complete a lesson, then refresh the enrollment of its course.

    Repeating the call for a completed lesson only updates watch time.
    """
    await repo.fetch_user(user_id)
    lesson = await repo.fetch_lesson(lesson_id)

    progress = await repo.upsert_progress(user_id, lesson_id, True, watch_time)

    course_progress = await evaluate_course_progress(repo, user_id, lesson.course_id)
    enrollment = await repo.upsert_enrollment_progress(
        user_id, lesson.course_id, course_progress.percent, course_progress.completed,
    )
    if enrollment is None:
        logger.debug(
            "User %s not enrolled in course %s; enrollment progress not updated",
            user_id, lesson.course_id,
        )
    elif course_progress.completed:
        logger.info("User %s completed course %s", user_id, lesson.course_id)

    return progress


async def get_user_progress(
    repo: ProgressRepository,
    user_id: UUID,
    course_id: UUID | None = None,
) -> list[UserProgress]:
    return await repo.fetch_progress_for_user(user_id, course_id)

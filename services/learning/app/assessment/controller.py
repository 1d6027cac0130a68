"""Assessment controller: maps service results to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.assessment import service
from app.assessment.schemas import (
    CreateQuizRequest,
    QuizAttemptRequest,
    QuizAttemptResponse,
    QuizResponse,
    QuizStudentResponse,
    StudentQuestion,
)
from app.exceptions import DuplicateStateError, MalformedInputError, NotFoundError
from app.models.quiz import Quiz
from app.progress import service as progress_service
from app.progress.evaluator import parse_questions
from app.progress.repository import ProgressRepository

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, MalformedInputError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, DuplicateStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Attempt already recorded.")
    logger.exception("Unexpected assessment error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


def _student_view(quiz: Quiz) -> QuizStudentResponse:
    questions = parse_questions(quiz.questions)
    return QuizStudentResponse(
        quiz_id=quiz.quiz_id,
        lesson_id=quiz.lesson_id,
        title=quiz.title,
        questions=[StudentQuestion(question=q.prompt, options=list(q.options)) for q in questions],
        passing_score=quiz.passing_score,
    )


async def create_quiz(
    db: AsyncSession,
    body: CreateQuizRequest,
) -> QuizResponse:
    try:
        quiz = await service.create_quiz(
            db, body.lesson_id,
            title=body.title,
            questions=[q.model_dump() for q in body.questions],
            passing_score=body.passing_score,
        )
        return QuizResponse.model_validate(quiz)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_quiz_for_student(
    db: AsyncSession,
    quiz_id: UUID,
) -> QuizStudentResponse:
    try:
        quiz = await service.get_quiz_by_id(db, quiz_id)
        return _student_view(quiz)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_lesson_quizzes(
    db: AsyncSession,
    lesson_id: UUID,
) -> list[QuizStudentResponse]:
    try:
        quizzes = await service.get_quizzes_for_lesson(db, lesson_id)
        return [_student_view(q) for q in quizzes]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def submit_attempt(
    repo: ProgressRepository,
    quiz_id: UUID,
    body: QuizAttemptRequest,
) -> QuizAttemptResponse:
    try:
        attempt = await progress_service.evaluate_quiz_submission(
            repo, quiz_id, body.user_id, body.answers,
        )
        return QuizAttemptResponse.model_validate(attempt)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_quiz_attempts(
    db: AsyncSession,
    user_id: UUID,
    quiz_id: UUID | None,
) -> list[QuizAttemptResponse]:
    try:
        attempts = await service.get_quiz_attempts(db, user_id, quiz_id)
        return [QuizAttemptResponse.model_validate(a) for a in attempts]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

"""Assessment router: quiz authoring, quiz attempts, and attempt history."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.assessment import controller
from app.assessment.schemas import (
    CreateQuizRequest,
    QuizAttemptRequest,
    QuizAttemptResponse,
    QuizResponse,
    QuizStudentResponse,
)
from app.database import get_db
from app.dependencies import get_progress_repository
from app.progress.repository import ProgressRepository

router = APIRouter(prefix="/assessment", tags=["Assessment"])


# ======================================================================
# Quizzes
# ======================================================================


@router.post(
    "/quizzes",
    response_model=QuizResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a quiz for a lesson",
    description="Attach a multiple-choice quiz to a lesson. Each question "
    "names its correct option by 0-based index.",
)
async def create_quiz(
    body: CreateQuizRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizResponse:
    return await controller.create_quiz(db, body)


@router.get(
    "/quizzes/{quiz_id}",
    response_model=QuizStudentResponse,
    summary="Get a quiz (learner view)",
    description="Returns the questions and options without correct answers.",
)
async def get_quiz(
    quiz_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> QuizStudentResponse:
    return await controller.get_quiz_for_student(db, quiz_id)


@router.get(
    "/lessons/{lesson_id}/quizzes",
    response_model=list[QuizStudentResponse],
    summary="List the quizzes of a lesson (learner view)",
)
async def get_lesson_quizzes(
    lesson_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[QuizStudentResponse]:
    return await controller.get_lesson_quizzes(db, lesson_id)


# ======================================================================
# Attempts
# ======================================================================


@router.post(
    "/quizzes/{quiz_id}/attempts",
    response_model=QuizAttemptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a quiz attempt",
    description="Scores the answers against the quiz and stores the attempt. "
    "Missing or out-of-range answers count as wrong.",
)
async def submit_attempt(
    quiz_id: UUID,
    body: QuizAttemptRequest,
    repo: ProgressRepository = Depends(get_progress_repository),
) -> QuizAttemptResponse:
    return await controller.submit_attempt(repo, quiz_id, body)


@router.get(
    "/users/{user_id}/attempts",
    response_model=list[QuizAttemptResponse],
    summary="List a user's quiz attempts",
    description="Newest first. Pass quiz_id to limit to one quiz.",
)
async def get_quiz_attempts(
    user_id: UUID,
    quiz_id: UUID | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[QuizAttemptResponse]:
    return await controller.get_quiz_attempts(db, user_id, quiz_id)

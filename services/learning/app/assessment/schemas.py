"""Assessment domain Pydantic V2 schemas.

Covers quiz creation, the student view of a quiz, and attempt submission.
Questions are single-answer multiple choice.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Sub-objects
# ---------------------------------------------------------------------------


class QuizQuestion(BaseModel):
    """Question with a single correct option."""

    model_config = ConfigDict(str_strip_whitespace=True)

    question: str = Field(min_length=1, description="Question text.")
    options: list[str] = Field(min_length=2, max_length=10, description="Answer choices (2-10).")
    correct_answer: int = Field(ge=0, description="0-based index of the correct option.")

    @model_validator(mode="after")
    def _validate_correct_answer(self) -> QuizQuestion:
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer out of range.")
        return self


class StudentQuestion(BaseModel):
    question: str
    options: list[str]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateQuizRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    lesson_id: UUID
    title: str = Field(min_length=1, max_length=300)
    questions: list[QuizQuestion] = Field(min_length=1)
    passing_score: int = Field(default=70, ge=0, le=100, description="Minimum percentage to pass.")


class QuizAttemptRequest(BaseModel):
    """Request body for submitting a quiz attempt.

    ``answers`` holds one option index per question, in question order.
    A JSON-encoded string of that list is accepted too. Entries are passed
    through uncoerced; anything but a plain integer is rejected when the
    attempt is scored.
    """

    user_id: UUID
    answers: list[Any] | str = Field(description="Option index per question.")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class QuizResponse(BaseModel):
    """Quiz including correct answers (author view)."""

    model_config = ConfigDict(from_attributes=True)

    quiz_id: UUID
    lesson_id: UUID
    title: str
    questions: list[dict]
    passing_score: int
    created_at: datetime
    updated_at: datetime


class QuizStudentResponse(BaseModel):
    """Quiz as seen by a learner (correct answers stripped)."""

    quiz_id: UUID
    lesson_id: UUID
    title: str
    questions: list[StudentQuestion]
    passing_score: int


class QuizAttemptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attempt_id: UUID
    user_id: UUID
    quiz_id: UUID
    attempt_number: int
    answers: list[int]
    score: int = Field(description="Score as a percentage (0-100).")
    is_passed: bool = Field(description="Whether the score meets passing_score.")
    attempted_at: datetime
    completed_at: datetime | None

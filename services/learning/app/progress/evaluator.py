"""Quiz scoring and course-progress derivation.

Pure functions over plain values: no database, no logging, no clock.
Callers fetch the inputs and persist the results.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from app.exceptions import MalformedInputError


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Question:
    prompt: str
    options: tuple[str, ...]
    correct_answer: int


@dataclass(frozen=True)
class QuizScore:
    score: int
    passed: bool
    correct_count: int
    total_questions: int


@dataclass(frozen=True)
class CourseProgress:
    percent: int
    completed: bool
    completed_lessons: int
    total_lessons: int


class LessonLike(Protocol):
    lesson_id: UUID


class ProgressLike(Protocol):
    lesson_id: UUID
    is_completed: bool


def percent_of(part: int, whole: int) -> int:
    """Integer percentage rounded half-up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------


def _decode(raw: Any, what: str) -> Any:
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise MalformedInputError(f"{what} is not valid JSON") from exc
    return raw


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_answers(raw: Any) -> list[int]:
    """Decode a submitted answer payload into option indices."""
    answers = _decode(raw, "Answers")
    if not isinstance(answers, list):
        raise MalformedInputError("Answers must be a list of option indices")
    if not all(_is_int(a) for a in answers):
        raise MalformedInputError("Every answer must be an integer option index")
    return answers


def parse_questions(raw: Any) -> list[Question]:
    """Decode a quiz's stored question list."""
    items = _decode(raw, "Quiz questions")
    if not isinstance(items, list):
        raise MalformedInputError("Quiz questions must be a list")

    questions = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise MalformedInputError(f"Question {i} is not an object")
        correct = item.get("correct_answer")
        if not _is_int(correct):
            raise MalformedInputError(f"Question {i} has no integer correct_answer")
        options = item.get("options")
        if not isinstance(options, list) or len(options) < 2:
            raise MalformedInputError(f"Question {i} needs a list of at least two options")
        questions.append(
            Question(
                prompt=str(item.get("question", "")),
                options=tuple(str(o) for o in options),
                correct_answer=correct,
            )
        )
    return questions


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def score_quiz(
    questions: Sequence[Question],
    answers: Sequence[int],
    passing_score: int,
) -> QuizScore:
    """Score answers position by position against the quiz.

    A missing answer, or one that names another option, is simply wrong;
    answers past the last question are ignored.
    """
    correct_count = sum(
        1
        for i, question in enumerate(questions)
        if i < len(answers) and answers[i] == question.correct_answer
    )
    total = len(questions)
    score = percent_of(correct_count, total)
    return QuizScore(
        score=score,
        passed=score >= passing_score,
        correct_count=correct_count,
        total_questions=total,
    )


def aggregate_progress(
    lessons: Iterable[LessonLike],
    progress_records: Iterable[ProgressLike],
) -> CourseProgress:
    """Fold per-lesson completion into a course percentage.

    Only records for the given lessons count; a course without lessons is
    never complete.
    """
    lesson_ids = {lesson.lesson_id for lesson in lessons}
    done = {
        record.lesson_id
        for record in progress_records
        if record.is_completed and record.lesson_id in lesson_ids
    }
    total = len(lesson_ids)
    return CourseProgress(
        percent=percent_of(len(done), total),
        completed=total > 0 and len(done) == total,
        completed_lessons=len(done),
        total_lessons=total,
    )

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.assessment import service
from app.exceptions import LessonNotFoundError, MalformedInputError, QuizNotFoundError
from app.models import Lesson, Quiz, QuizAttempt, User

QUESTIONS = [
    {"question": "2 + 2?", "options": ["3", "4"], "correct_answer": 1},
    {"question": "Capital of France?", "options": ["Paris", "Rome", "Oslo"], "correct_answer": 0},
]


@pytest.mark.asyncio
async def test_create_quiz(db_session: AsyncSession, lessons: list[Lesson]) -> None:
    quiz = await service.create_quiz(
        db_session, lessons[0].lesson_id,
        title="Warm-up", questions=QUESTIONS, passing_score=70,
    )
    assert quiz.questions == QUESTIONS
    assert quiz.passing_score == 70

    fetched = await service.get_quiz_by_id(db_session, quiz.quiz_id)
    assert fetched.quiz_id == quiz.quiz_id
    assert [q.quiz_id for q in await service.get_quizzes_for_lesson(db_session, lessons[0].lesson_id)] == [quiz.quiz_id]


@pytest.mark.asyncio
async def test_create_quiz_rejects_unreadable_questions(
    db_session: AsyncSession, lessons: list[Lesson],
) -> None:
    with pytest.raises(MalformedInputError):
        await service.create_quiz(
            db_session, lessons[0].lesson_id,
            title="Bad", questions=[{"question": "?", "options": ["a", "b"]}], passing_score=70,
        )


@pytest.mark.asyncio
async def test_quiz_lookups_for_missing_rows(db_session: AsyncSession) -> None:
    with pytest.raises(QuizNotFoundError):
        await service.get_quiz_by_id(db_session, uuid4())
    with pytest.raises(LessonNotFoundError):
        await service.get_quizzes_for_lesson(db_session, uuid4())
    with pytest.raises(LessonNotFoundError):
        await service.create_quiz(db_session, uuid4(), title="x", questions=QUESTIONS, passing_score=0)


@pytest.mark.asyncio
async def test_attempt_history_newest_first(
    db_session: AsyncSession, learner: User, lessons: list[Lesson], quiz: Quiz,
) -> None:
    other = Quiz(lesson_id=lessons[1].lesson_id, title="Other", questions=QUESTIONS, passing_score=50)
    db_session.add(other)
    await db_session.flush()

    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    rows = [
        QuizAttempt(
            user_id=learner.user_id, quiz_id=quiz.quiz_id, attempt_number=n,
            answers=[0, 0], score=0, is_passed=False, attempted_at=start + timedelta(minutes=n),
        )
        for n in (1, 2)
    ]
    rows.append(
        QuizAttempt(
            user_id=learner.user_id, quiz_id=other.quiz_id, attempt_number=1,
            answers=[1, 0], score=100, is_passed=True, attempted_at=start + timedelta(minutes=5),
        )
    )
    db_session.add_all(rows)
    await db_session.flush()

    everything = await service.get_quiz_attempts(db_session, learner.user_id)
    assert [(a.quiz_id, a.attempt_number) for a in everything] == [
        (other.quiz_id, 1), (quiz.quiz_id, 2), (quiz.quiz_id, 1),
    ]
    scoped = await service.get_quiz_attempts(db_session, learner.user_id, quiz.quiz_id)
    assert [a.attempt_number for a in scoped] == [2, 1]

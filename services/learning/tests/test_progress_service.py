from uuid import uuid4

import pytest
from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    CourseNotFoundError,
    DuplicateProgressError,
    DuplicateQuizAttemptError,
    LessonNotFoundError,
    MalformedInputError,
    QuizNotFoundError,
    UserNotFoundError,
)
from app.models import Course, Lesson, Quiz, QuizAttempt, User, UserEnrollment, UserProgress
from app.models.enums import Difficulty
from app.progress import controller
from app.progress.repository import SqlProgressRepository
from app.progress.service import (
    evaluate_course_progress,
    evaluate_quiz_submission,
    get_user_progress,
    mark_lesson_complete,
)


async def _progress_rows(db: AsyncSession, user_id, lesson_id) -> int:
    return await db.scalar(
        select(func.count()).select_from(UserProgress).where(
            UserProgress.user_id == user_id,
            UserProgress.lesson_id == lesson_id,
        )
    )


# ---------------------------------------------------------------------------
# Quiz submissions
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_submission_is_scored_and_stored(
    db_session: AsyncSession, learner: User, quiz: Quiz,
) -> None:
    repo = SqlProgressRepository(db_session)
    attempt = await evaluate_quiz_submission(repo, quiz.quiz_id, learner.user_id, [1, 0])
    assert attempt.score == 50
    assert attempt.is_passed is True
    assert attempt.attempt_number == 1
    assert attempt.answers == [1, 0]
    assert attempt.completed_at is not None


@pytest.mark.asyncio
async def test_resubmission_creates_new_attempt(
    db_session: AsyncSession, learner: User, quiz: Quiz,
) -> None:
    repo = SqlProgressRepository(db_session)
    first = await evaluate_quiz_submission(repo, quiz.quiz_id, learner.user_id, [0, 0])
    second = await evaluate_quiz_submission(repo, quiz.quiz_id, learner.user_id, "[1, 2]")
    assert (first.score, first.is_passed) == (0, False)
    assert (second.score, second.is_passed) == (100, True)
    assert second.attempt_number == 2
    assert first.attempt_id != second.attempt_id


@pytest.mark.asyncio
async def test_submission_for_missing_quiz(db_session: AsyncSession, learner: User) -> None:
    repo = SqlProgressRepository(db_session)
    with pytest.raises(QuizNotFoundError):
        await evaluate_quiz_submission(repo, uuid4(), learner.user_id, [1])


@pytest.mark.asyncio
async def test_submission_for_missing_user(db_session: AsyncSession, quiz: Quiz) -> None:
    repo = SqlProgressRepository(db_session)
    with pytest.raises(UserNotFoundError):
        await evaluate_quiz_submission(repo, quiz.quiz_id, uuid4(), [1])


@pytest.mark.asyncio
async def test_malformed_answers_store_nothing(
    db_session: AsyncSession, learner: User, quiz: Quiz,
) -> None:
    repo = SqlProgressRepository(db_session)
    with pytest.raises(MalformedInputError):
        await evaluate_quiz_submission(repo, quiz.quiz_id, learner.user_id, "1,2")
    assert await repo.count_quiz_attempts(learner.user_id, quiz.quiz_id) == 0


@pytest.mark.asyncio
async def test_malformed_stored_questions(
    db_session: AsyncSession, learner: User, lessons: list[Lesson],
) -> None:
    broken = Quiz(
        lesson_id=lessons[0].lesson_id,
        title="Broken",
        questions=[{"question": "no answer key", "options": ["a", "b"]}],
    )
    db_session.add(broken)
    await db_session.flush()
    repo = SqlProgressRepository(db_session)
    with pytest.raises(MalformedInputError):
        await evaluate_quiz_submission(repo, broken.quiz_id, learner.user_id, [0])


@pytest.mark.asyncio
async def test_duplicate_attempt_number_rejected(
    db_session: AsyncSession, learner: User, quiz: Quiz,
) -> None:
    repo = SqlProgressRepository(db_session)
    await evaluate_quiz_submission(repo, quiz.quiz_id, learner.user_id, [1, 2])
    clash = QuizAttempt(
        user_id=learner.user_id,
        quiz_id=quiz.quiz_id,
        attempt_number=1,
        answers=[0, 0],
        score=0,
        is_passed=False,
    )
    with pytest.raises(DuplicateQuizAttemptError):
        await repo.record_quiz_attempt(clash)


# ---------------------------------------------------------------------------
# Lesson completion and course progress
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_two_of_four_lessons(
    db_session: AsyncSession,
    learner: User,
    course: Course,
    lessons: list[Lesson],
    enrollment: UserEnrollment,
) -> None:
    repo = SqlProgressRepository(db_session)
    await mark_lesson_complete(repo, learner.user_id, lessons[0].lesson_id, watch_time=120)
    await mark_lesson_complete(repo, learner.user_id, lessons[3].lesson_id)

    result = await evaluate_course_progress(repo, learner.user_id, course.course_id)
    assert (result.percent, result.completed) == (50, False)

    await db_session.refresh(enrollment)
    assert enrollment.progress_percentage == 50
    assert enrollment.is_completed is False
    assert enrollment.last_accessed_at is not None


@pytest.mark.asyncio
async def test_completing_every_lesson_completes_enrollment(
    db_session: AsyncSession,
    learner: User,
    course: Course,
    lessons: list[Lesson],
    enrollment: UserEnrollment,
) -> None:
    repo = SqlProgressRepository(db_session)
    for lesson in lessons:
        await mark_lesson_complete(repo, learner.user_id, lesson.lesson_id)

    await db_session.refresh(enrollment)
    assert enrollment.progress_percentage == 100
    assert enrollment.is_completed is True
    assert enrollment.completed_at is not None


@pytest.mark.asyncio
async def test_completed_enrollment_stays_completed(
    db_session: AsyncSession,
    learner: User,
    course: Course,
    lessons: list[Lesson],
    enrollment: UserEnrollment,
) -> None:
    repo = SqlProgressRepository(db_session)
    for lesson in lessons:
        await mark_lesson_complete(repo, learner.user_id, lesson.lesson_id)
    await db_session.refresh(enrollment)
    completed_at = enrollment.completed_at

    # A lesson added later lowers the percentage but not the completion flag.
    extra = Lesson(course_id=course.course_id, title="Bonus", slug="bonus", order_index=4)
    db_session.add(extra)
    await db_session.flush()
    await mark_lesson_complete(repo, learner.user_id, lessons[0].lesson_id)

    await db_session.refresh(enrollment)
    assert enrollment.progress_percentage == 80
    assert enrollment.is_completed is True
    assert enrollment.completed_at == completed_at


@pytest.mark.asyncio
async def test_recompleting_lesson_updates_watch_time_only(
    db_session: AsyncSession,
    learner: User,
    lessons: list[Lesson],
    enrollment: UserEnrollment,
) -> None:
    repo = SqlProgressRepository(db_session)
    lesson_id = lessons[1].lesson_id
    first = await mark_lesson_complete(repo, learner.user_id, lesson_id, watch_time=30)
    first_completed_at = first.completed_at

    again = await mark_lesson_complete(repo, learner.user_id, lesson_id, watch_time=95)
    assert again.progress_id == first.progress_id
    assert again.is_completed is True
    assert again.watch_time == 95
    assert again.completed_at == first_completed_at
    assert await _progress_rows(db_session, learner.user_id, lesson_id) == 1

    kept = await mark_lesson_complete(repo, learner.user_id, lesson_id)
    assert kept.watch_time == 95


@pytest.mark.asyncio
async def test_completion_without_enrollment(
    db_session: AsyncSession,
    learner: User,
    course: Course,
    lessons: list[Lesson],
) -> None:
    repo = SqlProgressRepository(db_session)
    progress = await mark_lesson_complete(repo, learner.user_id, lessons[0].lesson_id)
    assert progress.is_completed is True

    enrollments = await db_session.scalar(select(func.count()).select_from(UserEnrollment))
    assert enrollments == 0
    result = await evaluate_course_progress(repo, learner.user_id, course.course_id)
    assert result.percent == 25


@pytest.mark.asyncio
async def test_completion_for_missing_lesson_or_user(
    db_session: AsyncSession, learner: User, lessons: list[Lesson],
) -> None:
    repo = SqlProgressRepository(db_session)
    with pytest.raises(LessonNotFoundError):
        await mark_lesson_complete(repo, learner.user_id, uuid4())
    with pytest.raises(UserNotFoundError):
        await mark_lesson_complete(repo, uuid4(), lessons[0].lesson_id)


@pytest.mark.asyncio
async def test_course_progress_for_missing_course(db_session: AsyncSession, learner: User) -> None:
    repo = SqlProgressRepository(db_session)
    with pytest.raises(CourseNotFoundError):
        await evaluate_course_progress(repo, learner.user_id, uuid4())


@pytest.mark.asyncio
async def test_course_without_lessons(db_session: AsyncSession, learner: User) -> None:
    empty = Course(
        title="Empty", slug="empty", difficulty=Difficulty.ADVANCED, estimated_duration=5, category="Misc",
    )
    db_session.add(empty)
    await db_session.flush()
    repo = SqlProgressRepository(db_session)
    result = await evaluate_course_progress(repo, learner.user_id, empty.course_id)
    assert (result.percent, result.completed) == (0, False)


@pytest.mark.asyncio
async def test_user_progress_filtered_by_course(
    db_session: AsyncSession,
    learner: User,
    course: Course,
    lessons: list[Lesson],
) -> None:
    other = Course(
        title="Other", slug="other", difficulty=Difficulty.BEGINNER, estimated_duration=5, category="Misc",
    )
    db_session.add(other)
    await db_session.flush()
    outside = Lesson(course_id=other.course_id, title="Elsewhere", slug="elsewhere", order_index=0)
    db_session.add(outside)
    await db_session.flush()

    repo = SqlProgressRepository(db_session)
    await mark_lesson_complete(repo, learner.user_id, lessons[0].lesson_id)
    await mark_lesson_complete(repo, learner.user_id, outside.lesson_id)

    assert len(await get_user_progress(repo, learner.user_id)) == 2
    scoped = await get_user_progress(repo, learner.user_id, course.course_id)
    assert [p.lesson_id for p in scoped] == [lessons[0].lesson_id]


@pytest.mark.asyncio
async def test_concurrent_first_completion_is_duplicate_state(
    db_session: AsyncSession, learner: User, lessons: list[Lesson],
) -> None:
    lesson_id = lessons[0].lesson_id
    # Pending row the lookup cannot see, as if another request inserted it first.
    db_session.add(UserProgress(user_id=learner.user_id, lesson_id=lesson_id, watch_time=0))

    repo = SqlProgressRepository(db_session)
    with pytest.raises(DuplicateProgressError):
        await repo.upsert_progress(learner.user_id, lesson_id, True, None)


def test_duplicate_progress_maps_to_conflict() -> None:
    exc = controller._handle_domain_error(DuplicateProgressError("Progress already recorded"))
    assert exc.status_code == status.HTTP_409_CONFLICT

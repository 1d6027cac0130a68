import json
from types import SimpleNamespace
from uuid import uuid4

import pytest

from app.exceptions import MalformedInputError
from app.progress.evaluator import (
    Question,
    aggregate_progress,
    parse_answers,
    parse_questions,
    percent_of,
    score_quiz,
)


def _questions(*correct: int) -> list[Question]:
    return [Question(prompt=f"q{i}", options=("a", "b", "c", "d"), correct_answer=c) for i, c in enumerate(correct)]


def _lessons(n: int) -> list[SimpleNamespace]:
    return [SimpleNamespace(lesson_id=uuid4()) for _ in range(n)]


def _done(lesson, completed: bool = True) -> SimpleNamespace:
    return SimpleNamespace(lesson_id=lesson.lesson_id, is_completed=completed)


# ---------------------------------------------------------------------------
# score_quiz
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("answers", "score", "passed"),
    [
        ([1, 0], 50, True),
        ([1, 2], 100, True),
        ([0, 0], 0, False),
    ],
)
def test_score_two_question_quiz(answers: list[int], score: int, passed: bool) -> None:
    result = score_quiz(_questions(1, 2), answers, passing_score=50)
    assert result.score == score
    assert result.passed is passed
    assert result.total_questions == 2


@pytest.mark.parametrize("passing_score", [0, 70, 100])
def test_all_correct_scores_100(passing_score: int) -> None:
    questions = _questions(0, 3, 2, 1, 1)
    result = score_quiz(questions, [q.correct_answer for q in questions], passing_score)
    assert result.score == 100
    assert result.passed is True
    assert result.correct_count == 5


@pytest.mark.parametrize("passing_score", [0, 1, 70])
def test_empty_submission_scores_zero(passing_score: int) -> None:
    result = score_quiz(_questions(1, 2, 3), [], passing_score)
    assert result.score == 0
    assert result.passed is (passing_score == 0)


def test_quiz_without_questions() -> None:
    assert score_quiz([], [1, 2], 0) == score_quiz([], [], 0)
    result = score_quiz([], [], 50)
    assert result.score == 0
    assert result.passed is False


def test_out_of_range_answers_count_as_wrong() -> None:
    result = score_quiz(_questions(1, 2), [99, -1], passing_score=0)
    assert result.score == 0
    assert result.correct_count == 0


def test_extra_answers_ignored() -> None:
    result = score_quiz(_questions(1), [1, 2, 3], passing_score=100)
    assert result.score == 100
    assert result.passed is True


def test_score_rounds_half_up() -> None:
    # 1/3 -> 33, 2/3 -> 67, 1/8 -> 12.5 -> 13
    assert score_quiz(_questions(0, 0, 0), [0], 0).score == 33
    assert score_quiz(_questions(0, 0, 0), [0, 0], 0).score == 67
    assert score_quiz(_questions(*[0] * 8), [0], 0).score == 13


def test_passed_matches_threshold_exactly() -> None:
    questions = _questions(0, 0, 0, 0)
    assert score_quiz(questions, [0, 0, 0], 75).passed is True
    assert score_quiz(questions, [0, 0, 0], 76).passed is False


def test_score_is_monotonic() -> None:
    questions = _questions(2, 0, 1, 3, 2, 1)
    answers = [3, 3, 3, 0, 0, 0]
    previous = score_quiz(questions, answers, 0).score
    for i, question in enumerate(questions):
        answers[i] = question.correct_answer
        current = score_quiz(questions, answers, 0).score
        assert current >= previous
        previous = current
    assert previous == 100


def test_percent_of_zero_whole() -> None:
    assert percent_of(0, 0) == 0
    assert percent_of(3, 0) == 0


# ---------------------------------------------------------------------------
# aggregate_progress
# ---------------------------------------------------------------------------


def test_half_of_four_lessons_completed() -> None:
    lessons = _lessons(4)
    result = aggregate_progress(lessons, [_done(lessons[0]), _done(lessons[2])])
    assert (result.percent, result.completed) == (50, False)
    assert result.completed_lessons == 2
    assert result.total_lessons == 4


def test_no_lessons_never_completed() -> None:
    result = aggregate_progress([], [])
    assert (result.percent, result.completed) == (0, False)
    stray = SimpleNamespace(lesson_id=uuid4(), is_completed=True)
    assert aggregate_progress([], [stray]).completed is False


def test_every_lesson_completed() -> None:
    lessons = _lessons(3)
    result = aggregate_progress(lessons, [_done(lesson) for lesson in lessons])
    assert (result.percent, result.completed) == (100, True)


def test_incomplete_and_foreign_records_ignored() -> None:
    lessons = _lessons(2)
    records = [
        _done(lessons[0], completed=False),
        SimpleNamespace(lesson_id=uuid4(), is_completed=True),
        _done(lessons[1]),
    ]
    result = aggregate_progress(lessons, records)
    assert (result.percent, result.completed) == (50, False)


def test_duplicate_records_count_once() -> None:
    lessons = _lessons(2)
    result = aggregate_progress(lessons, [_done(lessons[0]), _done(lessons[0])])
    assert result.completed_lessons == 1
    assert result.percent == 50


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------


def test_parse_answers_accepts_list_and_json() -> None:
    assert parse_answers([1, 0, 2]) == [1, 0, 2]
    assert parse_answers("[1, 0, 2]") == [1, 0, 2]
    assert parse_answers("[]") == []


@pytest.mark.parametrize(
    "raw",
    ["not json", "{\"a\": 1}", '["1", 2]', [1.5], [True, 0], None, 3],
)
def test_parse_answers_rejects_malformed(raw) -> None:
    with pytest.raises(MalformedInputError):
        parse_answers(raw)


def test_parse_questions_from_json() -> None:
    raw = json.dumps([{"question": "Q", "options": ["x", "y"], "correct_answer": 1}])
    (question,) = parse_questions(raw)
    assert question == Question(prompt="Q", options=("x", "y"), correct_answer=1)


@pytest.mark.parametrize(
    "raw",
    [
        "[",
        {"question": "Q"},
        ["Q"],
        [{"question": "Q", "options": ["x"]}],
        [{"question": "Q", "options": ["x"], "correct_answer": "0"}],
        [{"question": "Q", "options": "x,y", "correct_answer": 0}],
        [{"question": "Q", "correct_answer": 0}],
        [{"question": "Q", "options": ["only"], "correct_answer": 0}],
    ],
)
def test_parse_questions_rejects_malformed(raw) -> None:
    with pytest.raises(MalformedInputError):
        parse_questions(raw)

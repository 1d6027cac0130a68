#!/usr/bin/env python3
"""
Seed the learning database with a demo learner and one published course.

Run from repo root: python scripts/seed-data.py
Uses LEARNING_DATABASE_URL from env or .env. Safe to re-run: nothing is
written when the demo user already exists.
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root / "shared"))
sys.path.insert(0, str(repo_root / "services" / "learning"))

from sqlalchemy import func, select  # noqa: E402

from app.config import Settings  # noqa: E402
from app.models import Course, Lesson, Quiz, User, UserEnrollment  # noqa: E402
from app.models.enums import Difficulty  # noqa: E402
from app.users.utils import hash_password  # noqa: E402
from shared.database.postgres import AsyncSessionFactory, get_async_session_factory  # noqa: E402

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password123"

QUESTIONS = [
    {
        "question": "What does a course progress percentage measure?",
        "options": [
            "Time spent watching videos",
            "Share of the course's lessons completed",
            "Number of quiz attempts",
        ],
        "correct_answer": 1,
    },
    {
        "question": "When is a quiz attempt passed?",
        "options": [
            "When its score reaches the passing score",
            "When every answer is correct",
            "After three attempts",
        ],
        "correct_answer": 0,
    },
]


async def seed(database_url: str) -> None:
    factory = get_async_session_factory(database_url)
    try:
        await _seed(factory)
    finally:
        await factory.kw["bind"].dispose()


async def _seed(factory: AsyncSessionFactory) -> None:
    async with factory() as session:
        exists = await session.scalar(
            select(func.count()).select_from(User).where(User.email == DEMO_EMAIL)
        )
        if exists:
            print(f"Learning: {DEMO_EMAIL} already present, nothing to do")
            return

        user = User(
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD),
            first_name="Demo",
            last_name="Learner",
            is_active=True,
        )
        course = Course(
            title="Introduction to Learning",
            description="A short tour of lessons, quizzes and progress tracking.",
            slug="introduction-to-learning",
            difficulty=Difficulty.BEGINNER,
            estimated_duration=30,
            is_published=True,
            category="Getting Started",
            order_index=0,
        )
        session.add_all([user, course])
        await session.flush()

        first = Lesson(
            course_id=course.course_id,
            title="How courses work",
            slug="how-courses-work",
            text_content="Courses are made of ordered lessons.",
            order_index=0,
            is_published=True,
        )
        second = Lesson(
            course_id=course.course_id,
            title="Tracking your progress",
            slug="tracking-your-progress",
            text_content="Completing lessons moves your course progress forward.",
            order_index=1,
            is_published=True,
        )
        session.add_all([first, second])
        await session.flush()

        session.add_all([
            Quiz(
                lesson_id=second.lesson_id,
                title="Progress check",
                questions=QUESTIONS,
                passing_score=70,
            ),
            UserEnrollment(
                user_id=user.user_id,
                course_id=course.course_id,
                progress_percentage=0,
                is_completed=False,
            ),
        ])
        await session.commit()
        print(f"Learning: seeded {DEMO_EMAIL} / {DEMO_PASSWORD} enrolled in '{course.title}'")


def main() -> None:
    asyncio.run(seed(Settings().learning_database_url))
    print("Seed done.")


if __name__ == "__main__":
    main()

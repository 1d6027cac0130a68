from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401 - register with Base
from app.database import set_session_factory
from app.main import create_app
from app.models import Course, Lesson, Quiz, User, UserEnrollment
from app.models.enums import Difficulty
from shared.database.postgres import Base

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    set_session_factory(factory)
    return factory


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(db_ready=True)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Rows for service tests
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def learner(db_session: AsyncSession) -> User:
    user = User(
        email="learner@example.com",
        password_hash="not-a-real-hash",
        first_name="Ada",
        last_name="Learner",
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def course(db_session: AsyncSession) -> Course:
    course = Course(
        title="Data Basics",
        slug="data-basics",
        difficulty=Difficulty.BEGINNER,
        estimated_duration=60,
        is_published=True,
        category="Data",
    )
    db_session.add(course)
    await db_session.flush()
    return course


@pytest_asyncio.fixture
async def lessons(db_session: AsyncSession, course: Course) -> list[Lesson]:
    rows = [
        Lesson(
            course_id=course.course_id,
            title=f"Lesson {i}",
            slug=f"lesson-{i}",
            order_index=i,
        )
        for i in range(4)
    ]
    db_session.add_all(rows)
    await db_session.flush()
    return rows


@pytest_asyncio.fixture
async def enrollment(db_session: AsyncSession, learner: User, course: Course) -> UserEnrollment:
    row = UserEnrollment(user_id=learner.user_id, course_id=course.course_id)
    db_session.add(row)
    await db_session.flush()
    return row


@pytest_asyncio.fixture
async def quiz(db_session: AsyncSession, lessons: list[Lesson]) -> Quiz:
    row = Quiz(
        lesson_id=lessons[0].lesson_id,
        title="Checkpoint",
        questions=[
            {"question": "Pick b", "options": ["a", "b", "c"], "correct_answer": 1},
            {"question": "Pick c", "options": ["a", "b", "c"], "correct_answer": 2},
        ],
        passing_score=50,
    )
    db_session.add(row)
    await db_session.flush()
    return row

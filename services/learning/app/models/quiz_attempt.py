import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from ._columns import utcnow


class QuizAttempt(Base):
    """One scored submission. Written once, never updated."""

    __tablename__ = "quiz_attempts"

    attempt_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    quiz_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quizzes.quiz_id", ondelete="CASCADE"),
        nullable=False,
    )
    attempt_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    # One option index per question, aligned to Quiz.questions
    answers: Mapped[list] = mapped_column(JSON, nullable=False)
    score: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    is_passed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    attempted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    quiz = relationship("Quiz", lazy="select")

    __table_args__ = (
        UniqueConstraint(
            "user_id", "quiz_id", "attempt_number",
            name="uq_quiz_attempt_number",
        ),
        Index("ix_quiz_attempts_user_id", "user_id"),
        Index("ix_quiz_attempts_quiz_id", "quiz_id"),
    )

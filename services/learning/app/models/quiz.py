import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, SmallInteger, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from ._columns import utcnow


class Quiz(Base):
    __tablename__ = "quizzes"

    quiz_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    lesson_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("lessons.lesson_id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # Array of {question, options: [str], correct_answer}
    questions: Mapped[list] = mapped_column(JSON, nullable=False)
    passing_score: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=70)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    lesson = relationship("Lesson", back_populates="quizzes", lazy="select")

    __table_args__ = (
        Index("ix_quizzes_lesson_id", "lesson_id"),
    )

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
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


class UserEnrollment(Base):
    __tablename__ = "user_enrollments"

    enrollment_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    progress_percentage: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    last_accessed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="enrollments", lazy="select")
    course = relationship("Course", back_populates="enrollments", lazy="select")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_user_enrollments_user_course"),
        CheckConstraint(
            "progress_percentage BETWEEN 0 AND 100",
            name="ck_user_enrollments_progress_range",
        ),
        Index("ix_user_enrollments_user_id", "user_id"),
    )

"""Progress domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MarkLessonCompleteRequest(BaseModel):
    user_id: UUID
    watch_time: int | None = Field(
        default=None, ge=0, description="Seconds watched. Omitted or 0 keeps the stored value.",
    )


class UserProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    progress_id: UUID
    user_id: UUID
    lesson_id: UUID
    is_completed: bool
    completed_at: datetime | None
    watch_time: int
    created_at: datetime
    updated_at: datetime


class CourseProgressResponse(BaseModel):
    """Derived progress of one user through one course."""

    model_config = ConfigDict(from_attributes=True)

    percent: int = Field(ge=0, le=100)
    completed: bool
    completed_lessons: int
    total_lessons: int

"""LMS domain Pydantic V2 schemas.

Covers Course, Lesson, and UserEnrollment.
Separate request models from response models.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import Difficulty


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateCourseRequest(BaseModel):
    """Request body for creating a course. Courses start unpublished."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    description: str = Field(default="")
    slug: str | None = Field(
        default=None,
        min_length=1,
        max_length=300,
        description="URL slug. Generated from the title when omitted.",
    )
    thumbnail_url: str | None = Field(default=None, max_length=500)
    difficulty: Difficulty
    estimated_duration: int = Field(gt=0, description="Estimated duration in minutes.")
    category: str = Field(min_length=1, max_length=100)
    order_index: int = Field(default=0, ge=0, description="Position within the category.")


class CreateLessonRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    course_id: UUID
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(default="")
    slug: str | None = Field(default=None, min_length=1, max_length=300)
    video_url: str | None = Field(default=None, max_length=500)
    video_duration: int | None = Field(default=None, gt=0, description="Video length in seconds.")
    text_content: str | None = None
    code_examples: str | None = Field(default=None, description="JSON-encoded code samples.")
    order_index: int = Field(ge=0, description="Position within the course; unique per course.")


class EnrollRequest(BaseModel):
    user_id: UUID
    course_id: UUID


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    title: str
    description: str
    slug: str
    thumbnail_url: str | None
    difficulty: Difficulty
    estimated_duration: int
    is_published: bool
    category: str
    order_index: int
    created_at: datetime
    updated_at: datetime


class LessonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lesson_id: UUID
    course_id: UUID
    title: str
    description: str
    slug: str
    video_url: str | None
    video_duration: int | None
    text_content: str | None
    code_examples: str | None
    order_index: int
    is_published: bool
    created_at: datetime
    updated_at: datetime


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: UUID
    user_id: UUID
    course_id: UUID
    enrolled_at: datetime
    progress_percentage: int = Field(ge=0, le=100)
    last_accessed_at: datetime | None
    is_completed: bool
    completed_at: datetime | None

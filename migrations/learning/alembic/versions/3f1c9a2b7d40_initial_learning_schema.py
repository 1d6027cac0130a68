"""initial learning schema

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '3f1c9a2b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

difficulty = sa.Enum('beginner', 'intermediate', 'advanced', name='difficulty')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('user_id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('longest_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'courses',
        sa.Column('course_id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(length=300), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('slug', sa.String(length=300), nullable=False, unique=True),
        sa.Column('thumbnail_url', sa.String(length=500), nullable=True),
        sa.Column('difficulty', difficulty, nullable=False),
        sa.Column('estimated_duration', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ix_courses_published_category_order', 'courses',
        ['is_published', 'category', 'order_index'],
    )

    op.create_table(
        'lessons',
        sa.Column('lesson_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'course_id', sa.Uuid(),
            sa.ForeignKey('courses.course_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('title', sa.String(length=300), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('slug', sa.String(length=300), nullable=False),
        sa.Column('video_url', sa.String(length=500), nullable=True),
        sa.Column('video_duration', sa.Integer(), nullable=True),
        sa.Column('text_content', sa.Text(), nullable=True),
        sa.Column('code_examples', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('course_id', 'order_index', name='uq_lessons_course_order'),
    )
    op.create_index('ix_lessons_course_id', 'lessons', ['course_id'])

    op.create_table(
        'quizzes',
        sa.Column('quiz_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'lesson_id', sa.Uuid(),
            sa.ForeignKey('lessons.lesson_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('title', sa.String(length=300), nullable=False),
        sa.Column('questions', sa.JSON(), nullable=False),
        sa.Column('passing_score', sa.SmallInteger(), nullable=False, server_default='70'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_quizzes_lesson_id', 'quizzes', ['lesson_id'])

    op.create_table(
        'quiz_attempts',
        sa.Column('attempt_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'user_id', sa.Uuid(),
            sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'quiz_id', sa.Uuid(),
            sa.ForeignKey('quizzes.quiz_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('attempt_number', sa.SmallInteger(), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('score', sa.SmallInteger(), nullable=False),
        sa.Column('is_passed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('attempted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            'user_id', 'quiz_id', 'attempt_number', name='uq_quiz_attempt_number',
        ),
    )
    op.create_index('ix_quiz_attempts_user_id', 'quiz_attempts', ['user_id'])
    op.create_index('ix_quiz_attempts_quiz_id', 'quiz_attempts', ['quiz_id'])

    op.create_table(
        'user_progress',
        sa.Column('progress_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'user_id', sa.Uuid(),
            sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'lesson_id', sa.Uuid(),
            sa.ForeignKey('lessons.lesson_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('watch_time', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('user_id', 'lesson_id', name='uq_user_progress_user_lesson'),
        sa.CheckConstraint('watch_time >= 0', name='ck_user_progress_watch_time'),
    )
    op.create_index('ix_user_progress_user_id', 'user_progress', ['user_id'])

    op.create_table(
        'user_enrollments',
        sa.Column('enrollment_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'user_id', sa.Uuid(),
            sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'course_id', sa.Uuid(),
            sa.ForeignKey('courses.course_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('enrolled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('progress_percentage', sa.SmallInteger(), nullable=False, server_default='0'),
        sa.Column('last_accessed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_user_enrollments_user_course'),
        sa.CheckConstraint(
            'progress_percentage BETWEEN 0 AND 100',
            name='ck_user_enrollments_progress_range',
        ),
    )
    op.create_index('ix_user_enrollments_user_id', 'user_enrollments', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_user_enrollments_user_id', table_name='user_enrollments')
    op.drop_table('user_enrollments')
    op.drop_index('ix_user_progress_user_id', table_name='user_progress')
    op.drop_table('user_progress')
    op.drop_index('ix_quiz_attempts_quiz_id', table_name='quiz_attempts')
    op.drop_index('ix_quiz_attempts_user_id', table_name='quiz_attempts')
    op.drop_table('quiz_attempts')
    op.drop_index('ix_quizzes_lesson_id', table_name='quizzes')
    op.drop_table('quizzes')
    op.drop_index('ix_lessons_course_id', table_name='lessons')
    op.drop_table('lessons')
    op.drop_index('ix_courses_published_category_order', table_name='courses')
    op.drop_table('courses')
    op.drop_table('users')
    difficulty.drop(op.get_bind(), checkfirst=True)

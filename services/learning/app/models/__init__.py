# Import all models so Alembic can discover them via Base.metadata
from .course import Course
from .enrollment import UserEnrollment
from .lesson import Lesson
from .quiz import Quiz
from .quiz_attempt import QuizAttempt
from .user import User
from .user_progress import UserProgress

__all__ = [
    "Course",
    "Lesson",
    "Quiz",
    "QuizAttempt",
    "User",
    "UserEnrollment",
    "UserProgress",
]

"""Domain exception classes for the learning service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses. Three families exist: missing
records, unparseable payloads, and unique-key collisions. None of them
is transient, so nothing is retried.
"""


class NotFoundError(Exception):
    """Base for a referenced record that does not exist."""

    entity = "Record"

    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"{self.entity} not found: {identifier}")


class UserNotFoundError(NotFoundError):
    entity = "User"


class CourseNotFoundError(NotFoundError):
    entity = "Course"


class LessonNotFoundError(NotFoundError):
    entity = "Lesson"


class QuizNotFoundError(NotFoundError):
    entity = "Quiz"


class MalformedInputError(Exception):
    """Raised when an answer or question payload cannot be parsed."""


class DuplicateStateError(Exception):
    """Base for an operation that would violate a unique key."""


class AlreadyEnrolledError(DuplicateStateError):
    """Raised when user tries to enroll in a course they are already enrolled in."""


class UserAlreadyExistsError(DuplicateStateError):
    """Raised when an account with the same email already exists."""


class CourseSlugTakenError(DuplicateStateError):
    def __init__(self, slug: str = ""):
        self.slug = slug
        super().__init__(f"Course slug already in use: {slug}")


class DuplicateLessonOrderError(DuplicateStateError):
    """Raised when a lesson's order_index collides with another lesson of the course."""

    def __init__(self, order_index: int):
        self.order_index = order_index
        super().__init__(f"Lesson order_index already used in this course: {order_index}")


class DuplicateQuizAttemptError(DuplicateStateError):
    """Raised when two submissions race for the same attempt number."""


class InvalidCredentialsError(Exception):
    """Raised when login email/password do not match an active account."""


class DuplicateProgressError(DuplicateStateError):
    """Raised when two first completions race for the same (user, lesson) record."""

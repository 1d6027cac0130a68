import enum

from sqlalchemy import Enum as SqlEnum


class Difficulty(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Persist the lowercase values, not the member names.
difficulty_enum = SqlEnum(
    Difficulty,
    name="difficulty",
    values_callable=lambda members: [m.value for m in members],
)

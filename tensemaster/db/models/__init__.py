# SQLAlchemy models
from .base import Base
from .content import ChallengeRow, CourseRow, CourseTenseRow, QuestionRow
from .profile import ProfileRow

__all__ = [
    "Base",
    "ChallengeRow",
    "CourseRow",
    "CourseTenseRow",
    "ProfileRow",
    "QuestionRow",
]

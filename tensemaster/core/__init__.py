"""
Core Module - Shared domain models and interfaces.

Components:
- models: pydantic records (Question, UserProfile, Course, ...) and derived values
- modes: ChallengeMode enum and the static mode/question-source tables
- errors: exception hierarchy
- stores: ContentStore / ProfileStore protocols (import directly; depends on content)
"""

from tensemaster.core.errors import (
    BackendError,
    NoQuestionsError,
    ProfileNotFoundError,
    TenseMasterError,
)
from tensemaster.core.models import (
    Achievement,
    AnswerRecord,
    Course,
    ProfileUpdate,
    Question,
    QuizResult,
    Tense,
    TenseProgress,
    UserProfile,
)
from tensemaster.core.modes import MODE_TABLE, ChallengeMode, ModeConfig, QuestionSource

__all__ = [
    # Errors
    "TenseMasterError",
    "NoQuestionsError",
    "BackendError",
    "ProfileNotFoundError",
    # Models
    "Achievement",
    "AnswerRecord",
    "Course",
    "ProfileUpdate",
    "Question",
    "QuizResult",
    "Tense",
    "TenseProgress",
    "UserProfile",
    # Modes
    "ChallengeMode",
    "ModeConfig",
    "MODE_TABLE",
    "QuestionSource",
]

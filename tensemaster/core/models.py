"""
Domain models for the Tense Master engine.

Pydantic models describe records that cross the store boundary:
- Question, gauntlet challenges: read-only content rows
- UserProfile, TenseProgress: the learner's persisted state
- Course, Tense: catalog entries used for achievement checks
- Achievement, ShopItem: static catalogs

Dataclasses describe values the engine derives and never persists directly
(AnswerRecord, QuizResult, LeaderboardEntry).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

# Partial profile update as sent to the profile store (JSON-ready values).
ProfileUpdate = dict[str, Any]

DEFAULT_THEME = "deep-space"
DEFAULT_ICON = "BookCopy"

# Icon names the front end can render; anything else falls back to DEFAULT_ICON.
KNOWN_ICONS = frozenset({
    "BookOpen", "History", "Rocket", "BookCopy", "MessageSquareQuote", "Feather", "Brain",
    "Code", "Anchor", "Cloud", "Compass", "Database", "Globe", "Heart", "Key", "Map", "Moon",
    "Star", "Sun", "Target", "Atom", "Beaker", "Bot", "Award", "BarChart", "Bell", "Bookmark",
    "Briefcase", "Building", "Calendar", "Camera", "CheckSquare", "Clipboard", "Cog",
    "CreditCard", "Crop", "Diamond", "Disc", "Dna", "Droplet", "File", "Film", "Filter", "Flag",
    "Folder", "GitBranch", "GitCommit", "GitMerge", "GraduationCap", "Grid", "HardDrive", "Hash",
    "Headphones", "Image", "Inbox", "Info", "Languages", "Layers", "Layout", "LifeBuoy", "Link",
    "Lock", "LogIn", "Mail", "Maximize", "Mic", "Minimize", "MousePointer", "Music", "Package",
    "Paperclip", "Pause", "Phone", "PieChart", "Pin", "Power", "Printer", "Puzzle", "QrCode",
    "Quote", "RefreshCcw", "Rss", "Save", "Search", "Send", "Settings", "Share2", "Shield",
    "ShoppingCart", "Slash", "Smartphone", "Speaker", "Square", "Tag", "ThumbsUp", "Wrench",
    "Train", "Trash", "TrendingUp", "Truck", "Tv", "Type", "Umbrella", "Unlock", "Upload", "User",
    "Video", "Voicemail", "Volume2", "Watch", "Wifi", "Wind", "Zap", "ZoomIn", "ZoomOut",
})


# =============================================================================
# Content
# =============================================================================


class Question(BaseModel):
    """A multiple-choice fill-the-gap question."""

    model_config = ConfigDict(frozen=True)

    id: str
    sentence: str  # e.g. "She ___ to the store every day."
    options: list[str]
    correct_answer: str

    @field_validator("options")
    @classmethod
    def _three_or_four_options(cls, options: list[str]) -> list[str]:
        if not 3 <= len(options) <= 4:
            raise ValueError(f"questions need 3-4 options, got {len(options)}")
        return options

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "Question":
        if self.correct_answer not in self.options:
            raise ValueError(f"correct answer {self.correct_answer!r} is not among the options")
        return self


class ClozeBlank(BaseModel):
    id: int
    options: list[str]
    correct_answer: str


class ClozeChallenge(BaseModel):
    """A story with numbered ___N___ gaps, each with a dropdown of verb forms."""

    id: str
    story_template: str
    blanks: list[ClozeBlank]


class DetectiveError(BaseModel):
    incorrect: str
    correct: str


class DetectiveChallenge(BaseModel):
    """A paragraph with planted grammar errors the learner must click."""

    id: str
    paragraph: str
    errors: list[DetectiveError]


class IdentificationChallenge(BaseModel):
    id: str
    sentence: str
    correct_tense_name: str


class Tense(BaseModel):
    id: str
    name: str
    course_id: str | None = None
    order: int = 0


class Course(BaseModel):
    """A named collection of tenses, built-in or authored by a learner."""

    id: str
    name: str
    description: str = ""
    icon_name: str = DEFAULT_ICON
    user_id: str | None = None
    tenses: list[Tense] = Field(default_factory=list)

    @property
    def display_icon(self) -> str:
        """Icon to render; unknown names fall back to the default icon."""
        if self.icon_name in KNOWN_ICONS:
            return self.icon_name
        return DEFAULT_ICON

    def tense_ids(self) -> list[str]:
        return [t.id for t in self.tenses]


class AchievementReward(BaseModel):
    model_config = ConfigDict(frozen=True)

    xp: int = 0
    ai_coins: int = 0


class Achievement(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    reward: AchievementReward


class ShopItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    type: Literal["theme", "power-up"]
    cost: int
    premium: bool = False


# =============================================================================
# Profile
# =============================================================================


class TenseProgress(BaseModel):
    """Best result for one tense: completion is sticky, score keeps the max."""

    completed: bool = False
    score: float = 0


AllCourseProgress = dict[str, dict[str, TenseProgress]]


class UserProfile(BaseModel):
    """Snapshot of a learner's mutable state as held by the profile store."""

    id: str
    email: str = ""
    username: str = ""
    xp: int = 0
    ai_coins: int = 0
    streak_days: int = 0
    last_login: datetime | None = None
    active_theme: str = DEFAULT_THEME
    achievements: list[str] = Field(default_factory=list)
    purchased_themes: list[str] = Field(default_factory=lambda: [DEFAULT_THEME])
    purchased_power_ups: dict[str, int] = Field(default_factory=dict)
    course_progress: AllCourseProgress = Field(default_factory=dict)
    total_quizzes_completed: int = 0
    total_coins_spent: int = 0
    last_challenge_completed: datetime | None = None
    role: Literal["user", "admin"] = "user"

    @field_validator(
        "achievements", "purchased_themes", "purchased_power_ups", "course_progress",
        mode="before",
    )
    @classmethod
    def _null_collections(cls, value: Any, info: ValidationInfo) -> Any:
        # The hosted table stores these as nullable JSON columns.
        if value is None:
            return [] if info.field_name in ("achievements", "purchased_themes") else {}
        return value

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self.achievements

    def power_up_count(self, key: str) -> int:
        return self.purchased_power_ups.get(key, 0)

    def tense_progress(self, course_id: str, tense_id: str) -> TenseProgress | None:
        return self.course_progress.get(course_id, {}).get(tense_id)

    def with_updates(self, updates: ProfileUpdate) -> "UserProfile":
        """Return the profile as it would read after a partial update."""
        data = self.model_dump(mode="json")
        data.update(updates)
        return UserProfile.model_validate(data)


def dump_progress(progress: AllCourseProgress) -> dict[str, dict[str, dict[str, Any]]]:
    """JSON-ready form of a progress map for a profile update."""
    return {
        course_id: {tense_id: entry.model_dump() for tense_id, entry in tenses.items()}
        for course_id, tenses in progress.items()
    }


# =============================================================================
# Derived values
# =============================================================================


@dataclass
class AnswerRecord:
    """The learner's answer slot for one question."""

    question_id: str
    selected_answer: str | None = None
    skipped: bool = False

    @property
    def is_answered(self) -> bool:
        return self.skipped or self.selected_answer is not None


@dataclass(frozen=True)
class QuizResult:
    """Outcome of scoring one submission."""

    correct_count: int
    total_count: int
    score_percent: int  # 0-100, rounded half up
    answered_count: int
    exact_percent: float  # unrounded; rewards are computed from this

    @property
    def is_perfect(self) -> bool:
        return self.score_percent >= 100


@dataclass(frozen=True)
class LeaderboardEntry:
    id: str
    username: str
    xp: int
    rank: int

"""
Challenge modes and their static configuration.

Every playable mode is a ChallengeMode member mapped to a ModeConfig in
MODE_TABLE. Question tables are resolved through explicit lookup tables so an
unknown tense or course fails loudly instead of producing a table name that
does not exist.

Modes:
- LESSON: 10-question quiz on one tense; updates course progress, power-ups allowed
- REVIEW: 15-question course review
- DAILY_CLASSIC / DAILY_HARD / DAILY_TIME_ATTACK: once-per-day challenges
- CLOZE / IDENTIFICATION / DETECTIVE: the Grammar Gauntlet
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tensemaster.core.errors import UnknownQuestionSourceError


class ChallengeMode(str, Enum):
    """Playable modes."""

    LESSON = "lesson"
    REVIEW = "review"
    DAILY_CLASSIC = "classic"
    DAILY_HARD = "hard"
    DAILY_TIME_ATTACK = "time-attack"
    CLOZE = "cloze"
    IDENTIFICATION = "identification"
    DETECTIVE = "detective"


@dataclass(frozen=True)
class ModeConfig:
    """Static behaviour of one challenge mode."""

    label: str
    question_limit: int | None = None  # None: the whole challenge row
    answered_only: bool = False  # score against answered questions only
    allows_power_ups: bool = False
    updates_progress: bool = False  # lesson quizzes feed course_progress and achievements
    daily: bool = False  # at most one completion per calendar day
    time_limit_seconds: int | None = None


MODE_TABLE: dict[ChallengeMode, ModeConfig] = {
    ChallengeMode.LESSON: ModeConfig(
        label="Lesson Quiz", question_limit=10, allows_power_ups=True, updates_progress=True,
    ),
    ChallengeMode.REVIEW: ModeConfig(label="Review Quiz", question_limit=15),
    ChallengeMode.DAILY_CLASSIC: ModeConfig(label="Classic Challenge", question_limit=10, daily=True),
    ChallengeMode.DAILY_HARD: ModeConfig(label="Hard Mode", question_limit=10, daily=True),
    ChallengeMode.DAILY_TIME_ATTACK: ModeConfig(
        label="Time Attack", question_limit=20, answered_only=True, daily=True, time_limit_seconds=60,
    ),
    ChallengeMode.CLOZE: ModeConfig(label="Context is King"),
    ChallengeMode.IDENTIFICATION: ModeConfig(label="Rapid Identification", question_limit=10),
    ChallengeMode.DETECTIVE: ModeConfig(label="Grammar Detective"),
}

DAILY_MODES = tuple(mode for mode, config in MODE_TABLE.items() if config.daily)


def get_mode_config(mode: ChallengeMode | str) -> ModeConfig:
    """Look up a mode's configuration by enum or value."""
    try:
        return MODE_TABLE[ChallengeMode(mode)]
    except ValueError as e:
        raise UnknownQuestionSourceError(f"Invalid challenge mode: {mode}") from e


# =============================================================================
# Question sources
# =============================================================================


@dataclass(frozen=True)
class QuestionSource:
    """Where a mode's questions live: a table plus an optional tense filter."""

    table: str
    tense_id: str | None = None

    def describe(self) -> str:
        if self.tense_id:
            return f"{self.table} (tense {self.tense_id})"
        return self.table


# Built-in tense id -> multiple-choice table
LESSON_TABLES: dict[str, str] = {
    "simple-present": "quiz_simple_present",
    "present-continuous": "quiz_present_continuous",
    "present-perfect": "quiz_present_perfect",
    "present-perfect-continuous": "quiz_present_perfect_continuous",
    "simple-past": "quiz_simple_past",
    "past-continuous": "quiz_past_continuous",
    "past-perfect": "quiz_past_perfect",
    "past-perfect-continuous": "quiz_past_perfect_continuous",
    "simple-future": "quiz_simple_future",
    "future-continuous": "quiz_future_continuous",
    "future-perfect": "quiz_future_perfect",
    "future-perfect-continuous": "quiz_future_perfect_continuous",
    "passive-present-simple": "quiz_passive_present_simple",
    "passive-past-simple": "quiz_passive_past_simple",
    "passive-future-simple": "quiz_passive_future_simple",
    "reported-statements": "quiz_reported_statements",
    "reported-questions": "quiz_reported_questions",
}

CUSTOM_QUESTIONS_TABLE = "custom_quiz_questions"

# Built-in course id -> review table
REVIEW_TABLES: dict[str, str] = {
    "present": "review_present",
    "past": "review_past",
    "future": "review_future",
    "passive": "review_passive",
    "reported-speech": "review_reported_speech",
}

CHALLENGE_TABLES: dict[ChallengeMode, str] = {
    ChallengeMode.DAILY_CLASSIC: "challenge_classic",
    ChallengeMode.DAILY_HARD: "challenge_hard",
    ChallengeMode.DAILY_TIME_ATTACK: "challenge_time_attack",
    ChallengeMode.CLOZE: "challenge_cloze_test",
    ChallengeMode.IDENTIFICATION: "challenge_tense_identification",
    ChallengeMode.DETECTIVE: "challenge_grammar_detective",
}


def lesson_source(tense_id: str, *, builtin: bool) -> QuestionSource:
    """Question source for a lesson quiz on one tense."""
    if not builtin:
        return QuestionSource(table=CUSTOM_QUESTIONS_TABLE, tense_id=tense_id)
    table = LESSON_TABLES.get(tense_id)
    if table is None:
        raise UnknownQuestionSourceError(f"No quiz table is configured for tense '{tense_id}'")
    return QuestionSource(table=table)


def review_source(course_id: str) -> QuestionSource:
    """Question source for a course review quiz (built-in courses only)."""
    table = REVIEW_TABLES.get(course_id)
    if table is None:
        raise UnknownQuestionSourceError(f"No review quiz is configured for course '{course_id}'")
    return QuestionSource(table=table)


def challenge_source(mode: ChallengeMode) -> QuestionSource:
    """Question source for a daily or gauntlet mode."""
    table = CHALLENGE_TABLES.get(mode)
    if table is None:
        raise UnknownQuestionSourceError(f"Mode '{mode.value}' has no challenge table")
    return QuestionSource(table=table)

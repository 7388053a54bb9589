"""
Achievement Evaluator.

Checks a hypothetical post-submission profile against the achievement rules
and returns the achievements crossed by this submission, in catalog order,
together with the sum of their rewards.

Quiz-time rules:
- first-quiz: total_quizzes_completed == 1
- perfect-score: latest score >= 100
- quiz-master: total_quizzes_completed >= 25
- streak-starter / streak-master: streak_days >= 3 / >= 7
- <course>-master: every tense of the built-in course just played is completed
- first-custom-master: same, for a learner-authored course
- grammar-guru: every course with at least one tense is completed

Purchase-time rule (separate entry point):
- high-roller: total_coins_spent >= 1000

Achievements already on the profile are never returned again. Rules whose
achievement is missing from the catalog are skipped.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from pydantic import ValidationError

from tensemaster.content.achievements import ACHIEVEMENTS
from tensemaster.content.catalog import CourseCatalog
from tensemaster.core.models import Achievement, UserProfile
from tensemaster.engine.progress import is_course_completed
from tensemaster.engine.rewards import Reward

QUIZ_MASTER_COUNT = 25
STREAK_STARTER_DAYS = 3
STREAK_MASTER_DAYS = 7
HIGH_ROLLER_SPEND = 1000


@dataclass
class AchievementAward:
    """Newly unlocked achievements and their combined reward."""

    newly: list[Achievement] = field(default_factory=list)
    total_xp: int = 0
    total_coins: int = 0

    @property
    def ids(self) -> list[str]:
        return [a.id for a in self.newly]

    @property
    def reward(self) -> Reward:
        return Reward(xp=self.total_xp, coins=self.total_coins)

    def __bool__(self) -> bool:
        return bool(self.newly)


def load_achievements(raw: Iterable[dict[str, Any]]) -> tuple[Achievement, ...]:
    """Parse catalog entries, dropping malformed ones."""
    loaded = []
    for entry in raw:
        try:
            loaded.append(Achievement.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping malformed achievement entry {entry.get('id', '?')}: {e.error_count()} errors")
    return tuple(loaded)


def _award(
    earned: set[str],
    profile: UserProfile,
    achievements: Sequence[Achievement],
) -> AchievementAward:
    award = AchievementAward()
    held = set(profile.achievements)
    for achievement in achievements:
        if achievement.id in earned and achievement.id not in held:
            award.newly.append(achievement)
            award.total_xp += achievement.reward.xp
            award.total_coins += achievement.reward.ai_coins
            held.add(achievement.id)

    known = {a.id for a in achievements}
    for missing in sorted(earned - known):
        logger.debug(f"Achievement rule '{missing}' has no catalog entry; skipped")
    return award


def _qualifying_courses(catalog: CourseCatalog):
    return [c for c in catalog.all() if c.tenses]


def evaluate_achievements(
    profile: UserProfile,
    catalog: CourseCatalog,
    course_id: str | None,
    latest_score: float,
    *,
    achievements: Sequence[Achievement] = ACHIEVEMENTS,
) -> AchievementAward:
    """
    Evaluate quiz-time achievement rules.

    Args:
        profile: Hypothetical profile after this submission (quiz count
            incremented, progress merged)
        catalog: Built-in and custom courses
        course_id: Course just played, or None for modes outside a course
        latest_score: Score percent of this submission

    Returns:
        AchievementAward with newly unlocked achievements in catalog order
    """
    earned: set[str] = set()

    if profile.total_quizzes_completed == 1:
        earned.add("first-quiz")
    if latest_score >= 100:
        earned.add("perfect-score")
    if profile.total_quizzes_completed >= QUIZ_MASTER_COUNT:
        earned.add("quiz-master")
    if profile.streak_days >= STREAK_STARTER_DAYS:
        earned.add("streak-starter")
    if profile.streak_days >= STREAK_MASTER_DAYS:
        earned.add("streak-master")

    course = catalog.get(course_id) if course_id else None
    if course and course.tenses and is_course_completed(profile.course_progress, course):
        if catalog.is_builtin(course.id):
            earned.add(f"{course.id}-master")
        else:
            earned.add("first-custom-master")

    qualifying = _qualifying_courses(catalog)
    if qualifying and all(is_course_completed(profile.course_progress, c) for c in qualifying):
        earned.add("grammar-guru")

    return _award(earned, profile, achievements)


def evaluate_purchase_achievements(
    profile: UserProfile,
    *,
    achievements: Sequence[Achievement] = ACHIEVEMENTS,
) -> AchievementAward:
    """Evaluate purchase-time rules against the profile after a purchase."""
    earned: set[str] = set()
    if profile.total_coins_spent >= HIGH_ROLLER_SPEND:
        earned.add("high-roller")
    return _award(earned, profile, achievements)

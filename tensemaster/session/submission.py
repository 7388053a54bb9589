"""
Submission Service.

Coordinates the content and profile stores with the pure engine:

- start_*: load and sample questions for a mode, refusing empty sources and
  a second daily challenge on the same calendar day
- submit_*: score, compute rewards/progress/achievements, and persist one
  partial profile update
- record_login, purchase, apply_theme, leaderboard: the remaining profile
  writes and reads

Persistence is a single awaited update_profile call. A BackendError there is
logged and reported through SubmissionOutcome.saved; the locally computed
result is kept and nothing is retried.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, TypeVar

from loguru import logger

from tensemaster.core.errors import (
    BackendError,
    ChallengeAlreadyCompletedError,
    NoQuestionsError,
    SessionSubmittedError,
    UnknownQuestionSourceError,
)
from tensemaster.core.models import (
    ClozeChallenge,
    DetectiveChallenge,
    IdentificationChallenge,
    ProfileUpdate,
    Question,
    QuizResult,
    UserProfile,
    dump_progress,
)
from tensemaster.core.modes import (
    ChallengeMode,
    QuestionSource,
    challenge_source,
    get_mode_config,
    lesson_source,
    review_source,
)
from tensemaster.core.stores import ContentStore, ProfileStore
from tensemaster.engine.achievements import AchievementAward, evaluate_achievements
from tensemaster.engine.gauntlet import (
    DetectiveResult,
    score_cloze,
    score_detective,
    score_identification,
)
from tensemaster.engine.leaderboard import DEFAULT_LIMIT, rank_leaderboard
from tensemaster.engine.progress import COMPLETION_THRESHOLD, merge_progress
from tensemaster.engine.rewards import Reward, compute_reward
from tensemaster.engine.shop import PurchaseResult, apply_theme, purchase
from tensemaster.engine.streaks import DayBoundaryPolicy
from tensemaster.session.quiz_session import QuizSession

if TYPE_CHECKING:
    from config import Settings
    from tensemaster.core.models import LeaderboardEntry, ShopItem

T = TypeVar("T")


@dataclass
class SubmissionOutcome:
    """What a submission computed and whether it was saved."""

    mode: ChallengeMode
    result: QuizResult | DetectiveResult
    reward: Reward
    achievements: AchievementAward = field(default_factory=AchievementAward)
    updates: ProfileUpdate = field(default_factory=dict)
    saved: bool = True
    error: str | None = None

    @property
    def total_reward(self) -> Reward:
        """Base reward plus achievement bonuses."""
        return self.reward + self.achievements.reward


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionService:
    """Runs quizzes and challenges against a content store and a profile store."""

    def __init__(
        self,
        content: ContentStore,
        profiles: ProfileStore,
        *,
        policy: DayBoundaryPolicy | None = None,
        completion_threshold: float = COMPLETION_THRESHOLD,
        leaderboard_limit: int = DEFAULT_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
        rng: random.Random | None = None,
    ):
        self.content = content
        self.profiles = profiles
        self.policy = policy or DayBoundaryPolicy()
        self.completion_threshold = completion_threshold
        self.leaderboard_limit = leaderboard_limit
        self.clock = clock
        self.rng = rng or random.Random()

    @classmethod
    def from_settings(
        cls,
        content: ContentStore,
        profiles: ProfileStore,
        settings: "Settings",
    ) -> "SubmissionService":
        return cls(
            content,
            profiles,
            policy=DayBoundaryPolicy(settings.streak_timezone),
            completion_threshold=settings.completion_threshold,
            leaderboard_limit=settings.leaderboard_limit,
        )

    # =========================================================================
    # Loading
    # =========================================================================

    def _sample(self, items: Sequence[T], limit: int | None) -> list[T]:
        items = list(items)
        self.rng.shuffle(items)
        return items if limit is None else items[:limit]

    def _shuffle_options(self, question: Question) -> Question:
        options = list(question.options)
        self.rng.shuffle(options)
        return question.model_copy(update={"options": options})

    async def _load_questions(self, source: QuestionSource, limit: int | None) -> list[Question]:
        questions = await self.content.fetch_questions(source)
        if not questions:
            logger.warning(f"No questions in {source.describe()}")
            raise NoQuestionsError(source.describe())
        return [self._shuffle_options(q) for q in self._sample(questions, limit)]

    async def start_quiz(self, user_id: str, course_id: str, tense_id: str) -> QuizSession:
        """Start a lesson quiz on one tense of a built-in or custom course."""
        profile = await self.profiles.get_profile(user_id)
        catalog = await self.content.fetch_catalog()
        source = lesson_source(tense_id, builtin=catalog.is_builtin(course_id))
        questions = await self._load_questions(source, get_mode_config(ChallengeMode.LESSON).question_limit)
        logger.info(f"Lesson quiz {course_id}/{tense_id} started for {user_id} with {len(questions)} questions")
        return QuizSession(
            profile=profile,
            mode=ChallengeMode.LESSON,
            questions=questions,
            course_id=course_id,
            tense_id=tense_id,
            catalog=catalog,
            started_at=self.clock(),
        )

    async def start_review(self, user_id: str, course_id: str) -> QuizSession:
        profile = await self.profiles.get_profile(user_id)
        questions = await self._load_questions(
            review_source(course_id), get_mode_config(ChallengeMode.REVIEW).question_limit,
        )
        return QuizSession(
            profile=profile,
            mode=ChallengeMode.REVIEW,
            questions=questions,
            course_id=course_id,
            started_at=self.clock(),
        )

    async def start_daily(self, user_id: str, mode: ChallengeMode) -> QuizSession:
        """
        Start today's challenge in one of the daily modes.

        Raises:
            ChallengeAlreadyCompletedError: A daily challenge was already
                completed on the current calendar day
        """
        config = get_mode_config(mode)
        if not config.daily:
            raise UnknownQuestionSourceError(f"{mode.value} is not a daily challenge mode")

        profile = await self.profiles.get_profile(user_id)
        now = self.clock()
        if not self.policy.can_take_daily_challenge(profile.last_challenge_completed, now):
            raise ChallengeAlreadyCompletedError(
                "You've already completed today's challenge. Come back tomorrow!"
            )

        questions = await self._load_questions(challenge_source(mode), config.question_limit)
        return QuizSession(profile=profile, mode=mode, questions=questions, started_at=now)

    async def start_cloze(self) -> ClozeChallenge:
        challenges = await self.content.fetch_cloze_challenges()
        if not challenges:
            raise NoQuestionsError(challenge_source(ChallengeMode.CLOZE).describe())
        return self.rng.choice(challenges)

    async def start_detective(self) -> DetectiveChallenge:
        challenges = await self.content.fetch_detective_challenges()
        if not challenges:
            raise NoQuestionsError(challenge_source(ChallengeMode.DETECTIVE).describe())
        return self.rng.choice(challenges)

    async def start_identification(self) -> list[IdentificationChallenge]:
        challenges = await self.content.fetch_identification_challenges()
        if not challenges:
            raise NoQuestionsError(challenge_source(ChallengeMode.IDENTIFICATION).describe())
        return self._sample(challenges, get_mode_config(ChallengeMode.IDENTIFICATION).question_limit)

    # =========================================================================
    # Submitting
    # =========================================================================

    async def _persist(self, user_id: str, updates: ProfileUpdate) -> tuple[bool, str | None]:
        try:
            await self.profiles.update_profile(user_id, updates)
        except BackendError as e:
            logger.error(f"Failed to save rewards for {user_id}: {e}")
            return False, str(e)
        return True, None

    async def _finish(
        self,
        user_id: str,
        mode: ChallengeMode,
        result: QuizResult | DetectiveResult,
        reward: Reward,
        updates: ProfileUpdate,
        achievements: AchievementAward | None = None,
    ) -> SubmissionOutcome:
        outcome = SubmissionOutcome(
            mode=mode,
            result=result,
            reward=reward,
            achievements=achievements or AchievementAward(),
            updates=updates,
        )
        outcome.saved, outcome.error = await self._persist(user_id, updates)
        if outcome.saved:
            total = outcome.total_reward
            logger.info(f"{mode.value} saved for {user_id}: +{total.xp} XP, +{total.coins} coins")
        return outcome

    async def submit_quiz(self, session: QuizSession) -> SubmissionOutcome:
        """
        Score a multiple-choice session and persist its effects.

        Lesson quizzes also merge course progress, count the quiz, evaluate
        achievements, and commit power-up usage. Daily modes stamp
        last_challenge_completed.
        """
        if session.submitted:
            raise SessionSubmittedError("This quiz has already been submitted")

        config = session.config
        profile = session.profile
        result = session.result()
        reward = compute_reward(session.mode, result.exact_percent, double_xp=session.double_xp)
        award = AchievementAward()
        updates: ProfileUpdate = {}

        if config.updates_progress:
            progress = merge_progress(
                profile.course_progress,
                session.course_id,
                session.tense_id,
                result.score_percent,
                threshold=self.completion_threshold,
            )
            quizzes = profile.total_quizzes_completed + 1
            hypothetical = profile.model_copy(
                update={"total_quizzes_completed": quizzes, "course_progress": progress}
            )
            if session.catalog is None:
                session.catalog = await self.content.fetch_catalog()
            award = evaluate_achievements(hypothetical, session.catalog, session.course_id, result.score_percent)
            updates.update(
                course_progress=dump_progress(progress),
                achievements=[*profile.achievements, *award.ids],
                total_quizzes_completed=quizzes,
            )

        if config.allows_power_ups:
            updates["purchased_power_ups"] = session.usage.deduct_from(profile.purchased_power_ups)

        if config.daily:
            updates["last_challenge_completed"] = self.clock().isoformat()

        total = reward + award.reward
        updates["xp"] = profile.xp + total.xp
        updates["ai_coins"] = profile.ai_coins + total.coins

        session.mark_submitted()
        return await self._finish(profile.id, session.mode, result, reward, updates, award)

    async def _submit_gauntlet(
        self,
        user_id: str,
        mode: ChallengeMode,
        result: QuizResult | DetectiveResult,
        score: float,
    ) -> SubmissionOutcome:
        profile = await self.profiles.get_profile(user_id)
        reward = compute_reward(mode, score)
        updates = {"xp": profile.xp + reward.xp, "ai_coins": profile.ai_coins + reward.coins}
        return await self._finish(user_id, mode, result, reward, updates)

    async def submit_cloze(
        self,
        user_id: str,
        challenge: ClozeChallenge,
        answers: Mapping[int, str],
    ) -> SubmissionOutcome:
        result = score_cloze(challenge, answers)
        return await self._submit_gauntlet(user_id, ChallengeMode.CLOZE, result, result.exact_percent)

    async def submit_detective(
        self,
        user_id: str,
        challenge: DetectiveChallenge,
        selections: Iterable[str],
    ) -> SubmissionOutcome:
        result = score_detective(challenge, selections)
        return await self._submit_gauntlet(user_id, ChallengeMode.DETECTIVE, result, result.net_score)

    async def submit_identification(
        self,
        user_id: str,
        challenges: Sequence[IdentificationChallenge],
        answers: Sequence[str | None],
    ) -> SubmissionOutcome:
        result = score_identification(challenges, answers)
        return await self._submit_gauntlet(user_id, ChallengeMode.IDENTIFICATION, result, result.exact_percent)

    # =========================================================================
    # Profile
    # =========================================================================

    async def record_login(self, user_id: str) -> int:
        """
        Update the login streak. A second login on the same day writes nothing.

        Returns:
            Streak after this login
        """
        profile = await self.profiles.get_profile(user_id)
        now = self.clock()
        streak = self.policy.next_streak(profile.last_login, now, profile.streak_days)
        if streak is None:
            return profile.streak_days

        await self.profiles.update_profile(user_id, {"last_login": now.isoformat(), "streak_days": streak})
        logger.info(f"Login streak for {user_id}: {streak}")
        return streak

    async def purchase(self, user_id: str, item: "ShopItem | str") -> PurchaseResult:
        profile = await self.profiles.get_profile(user_id)
        result = purchase(profile, item)
        await self.profiles.update_profile(user_id, result.updates)
        logger.info(f"{user_id} bought {result.item.id} for {result.item.cost} coins")
        return result

    async def apply_theme(self, user_id: str, theme_id: str) -> None:
        profile = await self.profiles.get_profile(user_id)
        await self.profiles.update_profile(user_id, apply_theme(profile, theme_id))

    async def get_profile(self, user_id: str) -> UserProfile:
        return await self.profiles.get_profile(user_id)

    async def leaderboard(self, limit: int | None = None) -> list["LeaderboardEntry"]:
        limit = limit or self.leaderboard_limit
        profiles = await self.profiles.list_profiles(limit)
        return rank_leaderboard(profiles, limit=limit)

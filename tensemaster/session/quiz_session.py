"""
Quiz Session: in-memory state of one multiple-choice quiz.

The session is an explicit object handed to the submission service; nothing
here touches a store. It holds a snapshot of the profile taken when the quiz
started, the questions in presentation order, one answer slot per question,
and the power-ups used so far.

Answer flow:
- select_answer locks the question; a locked answer cannot change
- second chance unlocks a locked question once
- skip marks the question as answered and correct
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from loguru import logger

from tensemaster.content.catalog import CourseCatalog
from tensemaster.core.errors import (
    AnswerLockedError,
    AnswerMismatchError,
    PowerUpNotAllowedError,
    SessionSubmittedError,
)
from tensemaster.core.models import AnswerRecord, Question, QuizResult, UserProfile
from tensemaster.core.modes import ChallengeMode, ModeConfig, get_mode_config
from tensemaster.engine.powerups import PowerUp, PowerUpUsage
from tensemaster.engine.scoring import score_answers


@dataclass
class QuizSession:
    """One quiz in progress."""

    profile: UserProfile
    mode: ChallengeMode
    questions: list[Question]
    course_id: str | None = None
    tense_id: str | None = None
    catalog: CourseCatalog | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    answers: list[AnswerRecord] = field(default_factory=list)
    locked: set[str] = field(default_factory=set)
    hinted: set[str] = field(default_factory=set)
    halved: set[str] = field(default_factory=set)
    usage: PowerUpUsage = field(default_factory=PowerUpUsage)
    double_xp: bool = False
    submitted: bool = False

    def __post_init__(self):
        if not self.answers:
            self.answers = [AnswerRecord(question_id=q.id) for q in self.questions]
        self._index = {q.id: i for i, q in enumerate(self.questions)}

    @property
    def config(self) -> ModeConfig:
        return get_mode_config(self.mode)

    @property
    def user_id(self) -> str:
        return self.profile.id

    # =========================================================================
    # Lookup
    # =========================================================================

    def _position(self, question_id: str) -> int:
        try:
            return self._index[question_id]
        except KeyError:
            raise AnswerMismatchError(f"Question {question_id} is not part of this quiz") from None

    def question(self, question_id: str) -> Question:
        return self.questions[self._position(question_id)]

    def answer(self, question_id: str) -> AnswerRecord:
        return self.answers[self._position(question_id)]

    def is_locked(self, question_id: str) -> bool:
        return question_id in self.locked

    def _ensure_open(self) -> None:
        if self.submitted:
            raise SessionSubmittedError("This quiz has already been submitted")

    # =========================================================================
    # Answering
    # =========================================================================

    def select_answer(self, question_id: str, option: str) -> None:
        """Record and lock an answer."""
        self._ensure_open()
        if self.is_locked(question_id):
            raise AnswerLockedError(f"Answer for {question_id} is locked")
        question = self.question(question_id)
        if option not in question.options:
            raise AnswerMismatchError(f"{option!r} is not an option for {question_id}")

        record = self.answer(question_id)
        record.selected_answer = option
        record.skipped = False
        self.locked.add(question_id)

    def visible_options(self, question_id: str) -> list[str]:
        """Options still shown; 50/50 keeps the correct answer and the first distractor."""
        question = self.question(question_id)
        if question_id not in self.halved:
            return list(question.options)
        distractors = [o for o in question.options if o != question.correct_answer]
        kept = {question.correct_answer, *distractors[:1]}
        return [o for o in question.options if o in kept]

    def hint(self, question_id: str) -> str | None:
        """Hint text once the hint power-up was used on this question."""
        if question_id not in self.hinted:
            return None
        return f"{self.question(question_id).correct_answer[0]}..."

    def all_answered(self) -> bool:
        return bool(self.answers) and all(a.is_answered for a in self.answers)

    def time_remaining(self, now: datetime | None = None) -> timedelta | None:
        """Time left for time-limited modes, None when the mode is untimed."""
        limit = self.config.time_limit_seconds
        if limit is None:
            return None
        now = now or datetime.now(timezone.utc)
        remaining = self.started_at + timedelta(seconds=limit) - now
        return max(remaining, timedelta(0))

    def is_time_up(self, now: datetime | None = None) -> bool:
        remaining = self.time_remaining(now)
        return remaining is not None and remaining <= timedelta(0)

    # =========================================================================
    # Power-ups
    # =========================================================================

    def available_power_ups(self, kind: PowerUp) -> int:
        return self.usage.available(kind, self.profile.purchased_power_ups)

    def use_power_up(self, kind: PowerUp | str, question_id: str | None = None) -> None:
        """
        Spend one power-up from the profile's inventory.

        Usage is only counted here; the inventory is reduced when the quiz is
        submitted.

        Raises:
            PowerUpNotAllowedError: Mode forbids power-ups or the question's
                state does not allow this one
            PowerUpUnavailableError: No units left
        """
        self._ensure_open()
        kind = PowerUp(kind)
        if not self.config.allows_power_ups:
            raise PowerUpNotAllowedError(f"Power-ups are not available in {self.config.label}")

        if kind is PowerUp.DOUBLE_XP:
            if self.double_xp:
                raise PowerUpNotAllowedError("Double XP is already active")
        else:
            if question_id is None:
                raise PowerUpNotAllowedError(f"{kind.value} needs a question")
            self._position(question_id)
            self._check_question_state(kind, question_id)

        self.usage.consume(kind, self.profile.purchased_power_ups)
        self._apply(kind, question_id)
        logger.debug(f"Power-up {kind.value} used on {question_id or 'quiz'}")

    def _check_question_state(self, kind: PowerUp, question_id: str) -> None:
        locked = self.is_locked(question_id)
        if kind is PowerUp.SECOND_CHANCE:
            if not locked:
                raise PowerUpNotAllowedError("Second chance needs a locked answer")
            return
        if locked:
            raise PowerUpNotAllowedError(f"Question {question_id} is already answered")
        if kind is PowerUp.HINT and question_id in self.hinted:
            raise PowerUpNotAllowedError("Hint already shown")
        if kind is PowerUp.FIFTY_FIFTY and question_id in self.halved:
            raise PowerUpNotAllowedError("50/50 already used")

    def _apply(self, kind: PowerUp, question_id: str | None) -> None:
        if kind is PowerUp.HINT:
            self.hinted.add(question_id)
        elif kind is PowerUp.FIFTY_FIFTY:
            self.halved.add(question_id)
        elif kind is PowerUp.SKIP:
            record = self.answer(question_id)
            record.skipped = True
            record.selected_answer = None
            self.locked.add(question_id)
        elif kind is PowerUp.SECOND_CHANCE:
            self.locked.discard(question_id)
        elif kind is PowerUp.DOUBLE_XP:
            self.double_xp = True

    # =========================================================================
    # Result
    # =========================================================================

    def result(self) -> QuizResult:
        return score_answers(self.questions, self.answers, answered_only=self.config.answered_only)

    def mark_submitted(self) -> None:
        self._ensure_open()
        self.submitted = True

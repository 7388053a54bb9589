"""
Grammar Gauntlet scoring.

Three non-multiple-choice challenge modes:
- Context is King (cloze): pick the right verb form for each numbered gap
- Rapid Identification: name the tense used in each sentence
- Grammar Detective: click every incorrect word in a paragraph
"""

from __future__ import annotations

import random
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from tensemaster.content.catalog import ALL_TENSE_NAMES
from tensemaster.core.errors import AnswerMismatchError
from tensemaster.core.models import (
    ClozeChallenge,
    DetectiveChallenge,
    IdentificationChallenge,
    QuizResult,
)
from tensemaster.engine.scoring import exact_percent, percent

BLANK_PATTERN = re.compile(r"(___\d+___)")
BLANK_ID_PATTERN = re.compile(r"___(\d+)___")
PUNCTUATION_PATTERN = re.compile(r"[.,!?]")
IDENTIFICATION_DISTRACTORS = 3


# =============================================================================
# Context is King (cloze)
# =============================================================================


def split_story(template: str) -> list[str | int]:
    """Split a story template into literal text and blank ids, in order."""
    parts: list[str | int] = []
    for part in BLANK_PATTERN.split(template):
        if not part:
            continue
        match = BLANK_ID_PATTERN.fullmatch(part)
        parts.append(int(match.group(1)) if match else part)
    return parts


def score_cloze(challenge: ClozeChallenge, answers: Mapping[int, str]) -> QuizResult:
    """Score cloze answers keyed by blank id."""
    correct = sum(1 for blank in challenge.blanks if answers.get(blank.id) == blank.correct_answer)
    answered = sum(1 for blank in challenge.blanks if answers.get(blank.id))
    total = len(challenge.blanks)
    return QuizResult(
        correct_count=correct,
        total_count=total,
        score_percent=percent(correct, total),
        answered_count=answered,
        exact_percent=exact_percent(correct, total),
    )


# =============================================================================
# Rapid Identification
# =============================================================================


def identification_options(
    challenge: IdentificationChallenge,
    rng: random.Random | None = None,
    tense_names: Sequence[str] = ALL_TENSE_NAMES,
) -> list[str]:
    """The correct tense name plus three random distractors, shuffled."""
    rng = rng or random.Random()
    pool = [name for name in tense_names if name != challenge.correct_tense_name]
    options = [challenge.correct_tense_name, *rng.sample(pool, min(IDENTIFICATION_DISTRACTORS, len(pool)))]
    rng.shuffle(options)
    return options


def score_identification(
    challenges: Sequence[IdentificationChallenge],
    answers: Sequence[str | None],
) -> QuizResult:
    if len(challenges) != len(answers):
        raise AnswerMismatchError(f"{len(answers)} answers for {len(challenges)} sentences")
    correct = sum(1 for c, a in zip(challenges, answers) if a == c.correct_tense_name)
    answered = sum(1 for a in answers if a is not None)
    return QuizResult(
        correct_count=correct,
        total_count=len(challenges),
        score_percent=percent(correct, len(challenges)),
        answered_count=answered,
        exact_percent=exact_percent(correct, len(challenges)),
    )


# =============================================================================
# Grammar Detective
# =============================================================================


@dataclass
class DetectiveResult:
    correct: set[str] = field(default_factory=set)
    incorrect: set[str] = field(default_factory=set)
    missed: set[str] = field(default_factory=set)

    @property
    def net_score(self) -> int:
        """Correct clicks minus wrong clicks; may be negative."""
        return len(self.correct) - len(self.incorrect)


def clean_word(word: str) -> str:
    return PUNCTUATION_PATTERN.sub("", word)


def detective_words(paragraph: str) -> list[str]:
    """Clickable words, punctuation still attached."""
    return paragraph.split()


def toggle_selection(selected: frozenset[str] | set[str], word: str) -> frozenset[str]:
    """Select a word, or deselect it when it is already selected."""
    cleaned = clean_word(word)
    if cleaned in selected:
        return frozenset(selected - {cleaned})
    return frozenset(selected | {cleaned})


def score_detective(challenge: DetectiveChallenge, selections: Iterable[str]) -> DetectiveResult:
    """Compare the learner's clicked words with the planted errors."""
    selected = {clean_word(word) for word in selections}
    errors = {error.incorrect for error in challenge.errors}
    return DetectiveResult(
        correct=selected & errors,
        incorrect=selected - errors,
        missed=errors - selected,
    )

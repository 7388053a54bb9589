"""
Scoring Engine.

Turns position-aligned questions and answers into a QuizResult.

Rules:
- A skipped question (skip power-up) always counts as correct
- Standard quizzes score against every question
- Time-limited modes score against answered questions only
- A zero denominator scores 0 rather than dividing by zero
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from tensemaster.core.errors import AnswerMismatchError
from tensemaster.core.models import AnswerRecord, Question, QuizResult


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def percent(correct: int, total: int) -> int:
    """Rounded percentage, 0 when there is nothing to score."""
    return round_half_up(exact_percent(correct, total))


def exact_percent(correct: int, total: int) -> float:
    """Unrounded percentage, 0 when there is nothing to score."""
    if total <= 0:
        return 0.0
    return 100 * correct / total


def is_correct(question: Question, answer: AnswerRecord) -> bool:
    if answer.skipped:
        return True
    return answer.selected_answer == question.correct_answer


def score_answers(
    questions: Sequence[Question],
    answers: Sequence[AnswerRecord],
    *,
    answered_only: bool = False,
) -> QuizResult:
    """
    Score a submission.

    Args:
        questions: Questions in presentation order
        answers: One AnswerRecord per question, same order
        answered_only: Use answered questions as the denominator (time attack)

    Returns:
        QuizResult with a rounded 0-100 score

    Raises:
        AnswerMismatchError: If the lists are not aligned
    """
    if len(questions) != len(answers):
        raise AnswerMismatchError(
            f"{len(answers)} answers for {len(questions)} questions"
        )

    correct = 0
    answered = 0
    for question, answer in zip(questions, answers):
        if answer.question_id != question.id:
            raise AnswerMismatchError(
                f"Answer for {answer.question_id} is in the slot of question {question.id}"
            )
        if answer.is_answered:
            answered += 1
        if is_correct(question, answer):
            correct += 1

    total = answered if answered_only else len(questions)
    return QuizResult(
        correct_count=correct,
        total_count=total,
        score_percent=percent(correct, total),
        answered_count=answered,
        exact_percent=exact_percent(correct, total),
    )

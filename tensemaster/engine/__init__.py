"""
Engine Module - pure scoring, reward and progression functions.

Provides:
- scoring: QuizResult from questions and answers
- rewards: XP/coin formulas per challenge mode
- progress: best-score/completion merge into course progress
- achievements: quiz-time and purchase-time achievement rules
- gauntlet: cloze, identification and detective scoring
- powerups, streaks, shop, leaderboard
"""

from tensemaster.engine.achievements import (
    AchievementAward,
    evaluate_achievements,
    evaluate_purchase_achievements,
)
from tensemaster.engine.progress import merge_progress
from tensemaster.engine.rewards import REWARD_TABLE, Reward, compute_reward
from tensemaster.engine.scoring import round_half_up, score_answers

__all__ = [
    "AchievementAward",
    "evaluate_achievements",
    "evaluate_purchase_achievements",
    "merge_progress",
    "REWARD_TABLE",
    "Reward",
    "compute_reward",
    "round_half_up",
    "score_answers",
]

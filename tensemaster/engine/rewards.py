"""
Reward Calculator.

Maps a score to XP and coin deltas. Each mode has a linear RewardFormula:

    xp    = max(0, round(base_xp    + xp_rate   * metric))
    coins = max(0, round(base_coins + coin_rate * metric))

where metric is the unrounded 0-100 score percent for every mode except
Grammar Detective, which uses the net selection score (correct minus
incorrect clicks, may be negative). Rounding happens once, here.

Double XP doubles only the base XP of modes that accept power-ups; achievement
bonuses are added afterwards and never doubled.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from tensemaster.core.modes import ChallengeMode, get_mode_config
from tensemaster.engine.scoring import round_half_up


class RewardMetric(str, Enum):
    PERCENT = "percent"
    NET_SELECTIONS = "net_selections"


@dataclass(frozen=True)
class RewardFormula:
    base_xp: float = 0
    xp_rate: float = 0
    base_coins: float = 0
    coin_rate: float = 0
    metric: RewardMetric = RewardMetric.PERCENT


@dataclass(frozen=True)
class Reward:
    xp: int = 0
    coins: int = 0

    def __add__(self, other: "Reward") -> "Reward":
        return Reward(xp=self.xp + other.xp, coins=self.coins + other.coins)


REWARD_TABLE: dict[ChallengeMode, RewardFormula] = {
    ChallengeMode.LESSON: RewardFormula(xp_rate=1.0, coin_rate=0.5),
    ChallengeMode.REVIEW: RewardFormula(base_xp=200, base_coins=100),
    ChallengeMode.DAILY_CLASSIC: RewardFormula(base_xp=150, base_coins=75),
    ChallengeMode.DAILY_HARD: RewardFormula(base_xp=250, base_coins=125),
    ChallengeMode.DAILY_TIME_ATTACK: RewardFormula(base_xp=50, xp_rate=1.0, base_coins=25, coin_rate=0.5),
    ChallengeMode.CLOZE: RewardFormula(base_xp=50, xp_rate=0.5, base_coins=25, coin_rate=0.25),
    ChallengeMode.IDENTIFICATION: RewardFormula(base_xp=50, xp_rate=0.75, base_coins=25, coin_rate=0.5),
    ChallengeMode.DETECTIVE: RewardFormula(
        base_xp=50, xp_rate=10, base_coins=25, coin_rate=5, metric=RewardMetric.NET_SELECTIONS,
    ),
}


def compute_reward(
    mode: ChallengeMode,
    score: float,
    *,
    double_xp: bool = False,
    table: dict[ChallengeMode, RewardFormula] | None = None,
) -> Reward:
    """
    Compute the base reward for one submission.

    Args:
        mode: Challenge mode played
        score: Unrounded score percent (0-100), or net selections for Grammar Detective
        double_xp: Double XP power-up active for this session
        table: Override for REWARD_TABLE

    Returns:
        Non-negative Reward
    """
    formula = (table or REWARD_TABLE)[mode]

    xp = max(0, round_half_up(formula.base_xp + formula.xp_rate * score))
    coins = max(0, round_half_up(formula.base_coins + formula.coin_rate * score))

    if double_xp:
        if get_mode_config(mode).allows_power_ups:
            xp *= 2
        else:
            logger.debug(f"Double XP ignored for mode {mode.value}")

    return Reward(xp=xp, coins=coins)

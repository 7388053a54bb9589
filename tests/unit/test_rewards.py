"""
Unit tests for the reward formulas.
"""

import pytest

from tensemaster.core.modes import ChallengeMode
from tensemaster.engine.rewards import REWARD_TABLE, Reward, compute_reward


class TestComputeReward:
    def test_lesson_perfect_score(self):
        assert compute_reward(ChallengeMode.LESSON, 100) == Reward(xp=100, coins=50)

    def test_lesson_two_of_three_rounds_once(self):
        """2/3 correct is 66.67%: 67 XP and 33.33 -> 33 coins, not half of a rounded 67."""
        assert compute_reward(ChallengeMode.LESSON, 200 / 3) == Reward(xp=67, coins=33)

    def test_lesson_half_coins_round_up(self):
        assert compute_reward(ChallengeMode.LESSON, 67) == Reward(xp=67, coins=34)

    def test_time_attack_two_of_three(self):
        assert compute_reward(ChallengeMode.DAILY_TIME_ATTACK, 200 / 3) == Reward(xp=117, coins=58)

    def test_time_attack_sixty_percent(self):
        assert compute_reward(ChallengeMode.DAILY_TIME_ATTACK, 60) == Reward(xp=110, coins=55)

    @pytest.mark.parametrize(
        "mode,expected",
        [
            (ChallengeMode.REVIEW, Reward(200, 100)),
            (ChallengeMode.DAILY_CLASSIC, Reward(150, 75)),
            (ChallengeMode.DAILY_HARD, Reward(250, 125)),
        ],
    )
    def test_flat_rewards_ignore_score(self, mode, expected):
        assert compute_reward(mode, 0) == expected
        assert compute_reward(mode, 100) == expected

    def test_cloze(self):
        assert compute_reward(ChallengeMode.CLOZE, 50) == Reward(xp=75, coins=38)

    def test_identification(self):
        assert compute_reward(ChallengeMode.IDENTIFICATION, 80) == Reward(xp=110, coins=65)

    def test_detective_net_score_one(self):
        """2 correct and 1 incorrect selection."""
        assert compute_reward(ChallengeMode.DETECTIVE, 1) == Reward(xp=60, coins=30)

    def test_detective_floors_at_zero(self):
        assert compute_reward(ChallengeMode.DETECTIVE, -10) == Reward(xp=0, coins=0)

    def test_double_xp_on_lesson(self):
        """Double XP doubles XP only; coins are unchanged."""
        assert compute_reward(ChallengeMode.LESSON, 80, double_xp=True) == Reward(xp=160, coins=40)

    def test_double_xp_ignored_outside_lessons(self):
        assert compute_reward(ChallengeMode.DAILY_HARD, 100, double_xp=True) == Reward(xp=250, coins=125)

    def test_every_mode_has_a_formula(self):
        assert set(REWARD_TABLE) == set(ChallengeMode)


def test_rewards_add():
    assert Reward(10, 5) + Reward(1, 2) == Reward(11, 7)

"""
Unit tests for shop purchases and theme switching.
"""

import pytest

from tensemaster.content.shop_items import SHOP_ITEMS, get_item
from tensemaster.core.errors import (
    InsufficientCoinsError,
    ItemAlreadyOwnedError,
    ItemNotOwnedError,
    UnknownItemError,
)
from tensemaster.core.models import UserProfile
from tensemaster.engine.shop import apply_theme, purchase


class TestPurchase:
    def test_buy_theme(self, sample_profile):
        result = purchase(sample_profile, "theme-ocean")

        assert result.updates == {
            "ai_coins": 250,
            "total_coins_spent": 250,
            "purchased_themes": ["deep-space", "theme-ocean"],
        }
        assert not result.unlocked

    def test_buy_power_up_uses_inventory_key(self, sample_profile):
        result = purchase(sample_profile, "powerup-5050")

        assert result.updates["purchased_power_ups"]["5050"] == 2
        assert result.updates["ai_coins"] == 425

    def test_buy_new_power_up_kind(self):
        profile = UserProfile(id="u", ai_coins=100)

        result = purchase(profile, get_item("powerup-hint"))

        assert result.updates["purchased_power_ups"] == {"hint": 1}

    def test_insufficient_coins(self):
        with pytest.raises(InsufficientCoinsError):
            purchase(UserProfile(id="u", ai_coins=10), "theme-diamond")

    def test_owned_theme(self, sample_profile):
        with pytest.raises(ItemAlreadyOwnedError):
            purchase(sample_profile, "deep-space")

    def test_unknown_item(self, sample_profile):
        with pytest.raises(UnknownItemError):
            purchase(sample_profile, "theme-nonexistent")

    def test_high_roller_on_crossing_1000(self):
        """The purchase that crosses 1000 coins spent unlocks high-roller and adds its XP."""
        profile = UserProfile(id="u", xp=10, ai_coins=2000, total_coins_spent=900)

        result = purchase(profile, "theme-ocean")

        assert result.unlocked.ids == ["high-roller"]
        assert result.updates["achievements"] == ["high-roller"]
        assert result.updates["xp"] == 110
        assert result.updates["ai_coins"] == 1750
        assert result.updates["total_coins_spent"] == 1150

    def test_high_roller_only_once(self):
        profile = UserProfile(id="u", ai_coins=2000, total_coins_spent=1500, achievements=["high-roller"])

        result = purchase(profile, "theme-ocean")

        assert "achievements" not in result.updates


class TestApplyTheme:
    def test_owned(self, sample_profile):
        assert apply_theme(sample_profile, "deep-space") == {"active_theme": "deep-space"}

    def test_not_owned(self, sample_profile):
        with pytest.raises(ItemNotOwnedError):
            apply_theme(sample_profile, "theme-ocean")


def test_power_up_items_map_to_known_keys():
    from tensemaster.engine.powerups import PowerUp, inventory_key

    keys = {inventory_key(item.id) for item in SHOP_ITEMS if item.type == "power-up"}
    assert keys == {p.value for p in PowerUp}

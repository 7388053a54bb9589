"""
Shop: buying themes and power-ups, and switching themes.

A purchase is computed as one partial profile update (coins, total spent,
inventory, and any purchase-time achievement) for the caller to persist.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from tensemaster.content.shop_items import get_item
from tensemaster.core.errors import (
    InsufficientCoinsError,
    ItemAlreadyOwnedError,
    ItemNotOwnedError,
    UnknownItemError,
)
from tensemaster.core.models import ProfileUpdate, ShopItem, UserProfile
from tensemaster.engine.achievements import AchievementAward, evaluate_purchase_achievements
from tensemaster.engine.powerups import inventory_key


@dataclass
class PurchaseResult:
    item: ShopItem
    updates: ProfileUpdate
    unlocked: AchievementAward = field(default_factory=AchievementAward)


def resolve_item(item: ShopItem | str) -> ShopItem:
    if isinstance(item, ShopItem):
        return item
    found = get_item(item)
    if found is None:
        raise UnknownItemError(f"Unknown shop item: {item}")
    return found


def purchase(profile: UserProfile, item: ShopItem | str) -> PurchaseResult:
    """
    Compute the profile update for buying one item.

    Raises:
        UnknownItemError: Item id not in the catalog
        ItemAlreadyOwnedError: Theme already owned
        InsufficientCoinsError: Not enough AI Coins
    """
    item = resolve_item(item)

    if item.type == "theme" and item.id in profile.purchased_themes:
        raise ItemAlreadyOwnedError(f"You already own {item.name}")
    if profile.ai_coins < item.cost:
        raise InsufficientCoinsError("Not enough AI Coins!")

    updates: ProfileUpdate = {
        "ai_coins": profile.ai_coins - item.cost,
        "total_coins_spent": profile.total_coins_spent + item.cost,
    }
    if item.type == "theme":
        updates["purchased_themes"] = [*profile.purchased_themes, item.id]
    else:
        key = inventory_key(item.id)
        inventory = dict(profile.purchased_power_ups)
        inventory[key] = inventory.get(key, 0) + 1
        updates["purchased_power_ups"] = inventory

    unlocked = evaluate_purchase_achievements(profile.with_updates(updates))
    if unlocked:
        updates["achievements"] = [*profile.achievements, *unlocked.ids]
        updates["xp"] = profile.xp + unlocked.total_xp
        updates["ai_coins"] += unlocked.total_coins
        logger.info(f"Purchase unlocked {unlocked.ids} for {profile.id}")

    return PurchaseResult(item=item, updates=updates, unlocked=unlocked)


def apply_theme(profile: UserProfile, theme_id: str) -> ProfileUpdate:
    """Update that switches the active theme; the theme must be owned."""
    if theme_id not in profile.purchased_themes:
        raise ItemNotOwnedError("You don't own this theme!")
    return {"active_theme": theme_id}

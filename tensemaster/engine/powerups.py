"""
Power-up inventory accounting for a quiz session.

Usage is provisional: each use is counted against the learner's inventory in
memory, and the inventory is only reduced when the quiz is submitted. An
abandoned session deducts nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from tensemaster.core.errors import PowerUpUnavailableError

POWER_UP_ITEM_PREFIX = "powerup-"


class PowerUp(str, Enum):
    """Power-ups, valued by their inventory key."""

    HINT = "hint"
    FIFTY_FIFTY = "5050"
    SKIP = "skip"
    SECOND_CHANCE = "second-chance"
    DOUBLE_XP = "double-xp"


def inventory_key(item_id: str) -> str:
    """Shop item id -> inventory key ("powerup-5050" -> "5050")."""
    return item_id.removeprefix(POWER_UP_ITEM_PREFIX)


@dataclass
class PowerUpUsage:
    """Per-session counts of power-ups used so far."""

    used: dict[PowerUp, int] = field(default_factory=dict)

    def count(self, kind: PowerUp) -> int:
        return self.used.get(kind, 0)

    def available(self, kind: PowerUp, inventory: Mapping[str, int]) -> int:
        """Units still usable this session."""
        return inventory.get(kind.value, 0) - self.count(kind)

    def consume(self, kind: PowerUp, inventory: Mapping[str, int]) -> None:
        """Record one use, or raise when none are left."""
        if self.available(kind, inventory) <= 0:
            raise PowerUpUnavailableError(kind.value)
        self.used[kind] = self.count(kind) + 1

    def deduct_from(self, inventory: Mapping[str, int]) -> dict[str, int]:
        """Inventory after this session's usage is committed."""
        remaining = dict(inventory)
        for kind, count in self.used.items():
            remaining[kind.value] = max(0, remaining.get(kind.value, 0) - count)
        return remaining

    def __bool__(self) -> bool:
        return any(self.used.values())

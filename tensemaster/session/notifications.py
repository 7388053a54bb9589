"""
Notification Sequencer.

Turns a submission outcome into user-visible notifications: one summary
immediately, then one per newly unlocked achievement, staggered so that
pop-ups do not overlap. A failed save produces a single error notification
instead. No business logic lives here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from rich.console import Console

if TYPE_CHECKING:
    from tensemaster.session.submission import SubmissionOutcome

DEFAULT_STAGGER_MS = 600
SAVE_FAILED_MESSAGE = "Could not save your rewards."


class NotificationKind(str, Enum):
    SUMMARY = "summary"
    ACHIEVEMENT = "achievement"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    message: str
    title: str = ""


@dataclass(frozen=True)
class ScheduledNotification:
    """A notification and its offset from the start of playback."""

    notification: Notification
    delay_ms: int = 0


def summary_message(xp: int, coins: int) -> str:
    return f"+{xp} XP, +{coins} Coins!"


def plan_notifications(
    outcome: "SubmissionOutcome",
    *,
    stagger_ms: int = DEFAULT_STAGGER_MS,
) -> list[ScheduledNotification]:
    """
    Plan the notifications for one submission.

    The summary is shown at once; achievement i is shown at i * stagger_ms.
    Zero achievements yields just the summary.
    """
    if not outcome.saved:
        return [ScheduledNotification(Notification(NotificationKind.ERROR, SAVE_FAILED_MESSAGE))]

    total = outcome.total_reward
    plan = [ScheduledNotification(Notification(NotificationKind.SUMMARY, summary_message(total.xp, total.coins)))]
    for index, achievement in enumerate(outcome.achievements.newly):
        reward = achievement.reward
        plan.append(
            ScheduledNotification(
                Notification(
                    NotificationKind.ACHIEVEMENT,
                    f"{achievement.description} (+{reward.xp} XP, +{reward.ai_coins} Coins)",
                    title=f"Achievement Unlocked: {achievement.name}",
                ),
                delay_ms=index * stagger_ms,
            )
        )
    return plan


class Notifier(Protocol):
    """Anything that can display a notification."""

    def notify(self, notification: Notification) -> None:
        ...


class NotificationSequencer:
    """Plays a planned sequence, sleeping between offsets."""

    def __init__(
        self,
        notifier: Notifier,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ):
        self.notifier = notifier
        self._sleep = sleep

    async def play(self, plan: Sequence[ScheduledNotification]) -> None:
        elapsed = 0
        for item in sorted(plan, key=lambda s: s.delay_ms):
            wait = item.delay_ms - elapsed
            if wait > 0:
                await self._sleep(wait / 1000)
                elapsed = item.delay_ms
            self.notifier.notify(item.notification)


class RichNotifier:
    """Console notifier used by the CLI."""

    STYLES = {
        NotificationKind.SUMMARY: "bold green",
        NotificationKind.ACHIEVEMENT: "bold yellow",
        NotificationKind.ERROR: "bold red",
    }

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def notify(self, notification: Notification) -> None:
        style = self.STYLES[notification.kind]
        if notification.title:
            self.console.print(f"[{style}]{notification.title}[/{style}]")
            self.console.print(f"  {notification.message}")
        else:
            self.console.print(f"[{style}]{notification.message}[/{style}]")

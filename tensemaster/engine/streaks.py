"""
Calendar-day policy for login streaks and the daily challenge.

Day boundaries are evaluated in a configurable IANA time zone. Naive
datetimes are taken to be UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class DayBoundaryPolicy:
    """Decides which calendar day an instant falls on."""

    timezone: str = "UTC"

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def local_date(self, moment: datetime) -> date:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(self.zone).date()

    def is_same_day(self, a: datetime, b: datetime) -> bool:
        return self.local_date(a) == self.local_date(b)

    def are_consecutive_days(self, earlier: datetime, later: datetime) -> bool:
        return self.local_date(later) - self.local_date(earlier) == timedelta(days=1)

    def next_streak(self, last_login: datetime | None, now: datetime, current: int) -> int | None:
        """
        Streak after logging in at `now`.

        Returns None when the learner already logged in today (nothing to
        update), current + 1 after a login yesterday, otherwise 1.
        """
        if last_login is None:
            return 1
        if self.is_same_day(last_login, now):
            return None
        if self.are_consecutive_days(last_login, now):
            return current + 1
        return 1

    def can_take_daily_challenge(self, last_completed: datetime | None, now: datetime) -> bool:
        return last_completed is None or not self.is_same_day(last_completed, now)

    def time_until_next_day(self, now: datetime) -> timedelta:
        """Time left until the daily challenge unlocks again."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        local_now = now.astimezone(self.zone)
        midnight = datetime.combine(local_now.date() + timedelta(days=1), time.min, tzinfo=self.zone)
        return midnight - local_now


def format_countdown(delta: timedelta) -> str:
    """HH:MM:SS for a non-negative timedelta."""
    total = max(0, int(delta.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

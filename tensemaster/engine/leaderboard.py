"""Leaderboard ranking."""

from __future__ import annotations

from collections.abc import Iterable

from tensemaster.core.models import LeaderboardEntry, UserProfile

DEFAULT_LIMIT = 500


def rank_leaderboard(profiles: Iterable[UserProfile], *, limit: int = DEFAULT_LIMIT) -> list[LeaderboardEntry]:
    """XP descending; ties broken by username, then id, so ranks are stable."""
    ordered = sorted(profiles, key=lambda p: (-p.xp, p.username.lower(), p.id))
    return [
        LeaderboardEntry(id=p.id, username=p.username, xp=p.xp, rank=i)
        for i, p in enumerate(ordered[:limit], start=1)
    ]


def find_rank(entries: Iterable[LeaderboardEntry], user_id: str) -> LeaderboardEntry | None:
    for entry in entries:
        if entry.id == user_id:
            return entry
    return None

"""
Store protocols: the engine's only external dependencies.

ContentStore is read-only. ProfileStore reads one snapshot and accepts one
partial update per submission; there is no version check, so concurrent
writers race and the last write wins.
"""

from __future__ import annotations

from typing import Protocol

from tensemaster.content.catalog import CourseCatalog
from tensemaster.core.models import (
    ClozeChallenge,
    DetectiveChallenge,
    IdentificationChallenge,
    ProfileUpdate,
    Question,
    UserProfile,
)
from tensemaster.core.modes import QuestionSource


class ContentStore(Protocol):
    """Read access to questions, challenges and the course catalog."""

    async def fetch_questions(self, source: QuestionSource) -> list[Question]:
        """All questions in a source table (callers sample from these)."""
        ...

    async def fetch_catalog(self) -> CourseCatalog:
        """Built-in plus custom courses with their tense lists."""
        ...

    async def fetch_cloze_challenges(self) -> list[ClozeChallenge]:
        ...

    async def fetch_detective_challenges(self) -> list[DetectiveChallenge]:
        ...

    async def fetch_identification_challenges(self) -> list[IdentificationChallenge]:
        ...


class ProfileStore(Protocol):
    """Read/write access to learner profiles."""

    async def get_profile(self, user_id: str) -> UserProfile:
        """Raises ProfileNotFoundError when the user has no profile."""
        ...

    async def update_profile(self, user_id: str, updates: ProfileUpdate) -> None:
        """Apply a partial update in one request; all fields or none."""
        ...

    async def list_profiles(self, limit: int) -> list[UserProfile]:
        """Profiles for the leaderboard, any order."""
        ...

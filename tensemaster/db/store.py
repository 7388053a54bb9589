"""
Local SQL store.

SqlBackend implements ContentStore and ProfileStore on top of SQLAlchemy so
the engine can run offline against SQLite (or any SQLAlchemy URL). Queries
are synchronous and short; the async methods simply run them inline.

seed_from_json loads content and profiles from a JSON document shaped like:

    {
        "questions": {"quiz_simple_present": [{"id": ..., "sentence": ..., ...}]},
        "challenges": {"challenge_cloze_test": [{"id": ..., "story_template": ..., ...}]},
        "courses": [{"id": ..., "name": ..., "tenses": [{"id": ..., "name": ...}]}],
        "profiles": [{"id": ..., "username": ..., "xp": ...}]
    }
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError

from tensemaster.content.catalog import BUILTIN_COURSES, CourseCatalog
from tensemaster.core.errors import BackendError, ProfileNotFoundError
from tensemaster.core.models import (
    ClozeChallenge,
    Course,
    DetectiveChallenge,
    IdentificationChallenge,
    ProfileUpdate,
    Question,
    Tense,
    UserProfile,
)
from tensemaster.core.modes import ChallengeMode, QuestionSource, challenge_source
from tensemaster.db.database import make_session_factory, session_scope
from tensemaster.db.models import ChallengeRow, CourseRow, CourseTenseRow, ProfileRow, QuestionRow

DATETIME_FIELDS = frozenset({"last_login", "last_challenge_completed"})
PROFILE_FIELDS = frozenset(UserProfile.model_fields)


def _to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _profile_from_row(row: ProfileRow) -> UserProfile:
    return UserProfile.model_validate({name: getattr(row, name) for name in PROFILE_FIELDS})


class SqlBackend:
    """SQLAlchemy implementation of both store protocols."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._sessions = make_session_factory(engine)

    def _scope(self):
        return session_scope(self._sessions)

    # =========================================================================
    # ContentStore
    # =========================================================================

    async def fetch_questions(self, source: QuestionSource) -> list[Question]:
        stmt = select(QuestionRow).where(QuestionRow.table_name == source.table)
        if source.tense_id:
            stmt = stmt.where(QuestionRow.tense_id == source.tense_id)
        try:
            with self._scope() as session:
                rows = session.scalars(stmt).all()
                return [
                    Question(id=r.id, sentence=r.sentence, options=r.options, correct_answer=r.correct_answer)
                    for r in rows
                ]
        except SQLAlchemyError as e:
            raise BackendError(f"Could not load questions from {source.describe()}: {e}") from e

    async def fetch_catalog(self) -> CourseCatalog:
        try:
            with self._scope() as session:
                courses = session.scalars(select(CourseRow).order_by(CourseRow.name)).all()
                custom = [
                    Course(
                        id=c.id,
                        name=c.name,
                        description=c.description or "",
                        icon_name=c.icon_name or "",
                        user_id=c.user_id,
                        tenses=[Tense(id=t.id, name=t.name, course_id=c.id, order=t.order) for t in c.tenses],
                    )
                    for c in courses
                ]
        except SQLAlchemyError as e:
            raise BackendError(f"Could not load courses: {e}") from e
        return CourseCatalog(builtin=list(BUILTIN_COURSES), custom=custom)

    async def _challenge_payloads(self, mode: ChallengeMode) -> list[dict[str, Any]]:
        table = challenge_source(mode).table
        try:
            with self._scope() as session:
                rows = session.scalars(select(ChallengeRow).where(ChallengeRow.table_name == table)).all()
                return [{**r.payload, "id": r.id} for r in rows]
        except SQLAlchemyError as e:
            raise BackendError(f"Could not load {table}: {e}") from e

    async def fetch_cloze_challenges(self) -> list[ClozeChallenge]:
        return [ClozeChallenge.model_validate(p) for p in await self._challenge_payloads(ChallengeMode.CLOZE)]

    async def fetch_detective_challenges(self) -> list[DetectiveChallenge]:
        return [DetectiveChallenge.model_validate(p) for p in await self._challenge_payloads(ChallengeMode.DETECTIVE)]

    async def fetch_identification_challenges(self) -> list[IdentificationChallenge]:
        return [
            IdentificationChallenge.model_validate(p)
            for p in await self._challenge_payloads(ChallengeMode.IDENTIFICATION)
        ]

    # =========================================================================
    # ProfileStore
    # =========================================================================

    async def get_profile(self, user_id: str) -> UserProfile:
        try:
            with self._scope() as session:
                row = session.get(ProfileRow, user_id)
                if row is None:
                    raise ProfileNotFoundError(f"No profile for user {user_id}", status_code=404)
                return _profile_from_row(row)
        except SQLAlchemyError as e:
            raise BackendError(f"Could not load profile {user_id}: {e}") from e

    async def update_profile(self, user_id: str, updates: ProfileUpdate) -> None:
        """Apply all fields in one transaction."""
        unknown = set(updates) - PROFILE_FIELDS
        if unknown:
            raise BackendError(f"Unknown profile fields: {sorted(unknown)}", status_code=400)

        try:
            with self._scope() as session:
                row = session.get(ProfileRow, user_id)
                if row is None:
                    raise ProfileNotFoundError(f"No profile for user {user_id}", status_code=404)
                try:
                    updated = _profile_from_row(row).with_updates(updates)
                except ValidationError as e:
                    raise BackendError(f"Invalid profile update: {e.error_count()} errors", status_code=400) from e

                dumped = updated.model_dump(mode="json")
                for name in updates:
                    if name in DATETIME_FIELDS:
                        setattr(row, name, _to_naive_utc(getattr(updated, name)))
                    else:
                        setattr(row, name, dumped[name])
        except SQLAlchemyError as e:
            raise BackendError(f"Could not update profile {user_id}: {e}") from e
        logger.debug(f"Updated profile {user_id}: {sorted(updates)}")

    async def list_profiles(self, limit: int) -> list[UserProfile]:
        stmt = select(ProfileRow).order_by(ProfileRow.xp.desc()).limit(limit)
        try:
            with self._scope() as session:
                return [_profile_from_row(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as e:
            raise BackendError(f"Could not list profiles: {e}") from e

    async def create_profile(self, profile: UserProfile) -> None:
        try:
            with self._scope() as session:
                session.merge(_profile_row(profile))
        except SQLAlchemyError as e:
            raise BackendError(f"Could not create profile {profile.id}: {e}") from e


def _profile_row(profile: UserProfile) -> ProfileRow:
    data = profile.model_dump(mode="json")
    for name in DATETIME_FIELDS:
        data[name] = _to_naive_utc(getattr(profile, name))
    return ProfileRow(**data)


# =============================================================================
# Seeding
# =============================================================================


def seed_from_json(engine: Engine, path: Path) -> dict[str, int]:
    """
    Load a seed document into the local database.

    Existing rows with the same keys are replaced, so seeding twice is safe.

    Returns:
        Row counts per section
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    counts = {"questions": 0, "challenges": 0, "courses": 0, "profiles": 0}

    with session_scope(make_session_factory(engine)) as session:
        for table, rows in data.get("questions", {}).items():
            for raw in rows:
                question = Question.model_validate(raw)
                session.merge(
                    QuestionRow(
                        table_name=table,
                        id=question.id,
                        tense_id=raw.get("tense_id"),
                        sentence=question.sentence,
                        options=question.options,
                        correct_answer=question.correct_answer,
                    )
                )
                counts["questions"] += 1

        for table, rows in data.get("challenges", {}).items():
            for raw in rows:
                payload = {k: v for k, v in raw.items() if k != "id"}
                session.merge(ChallengeRow(table_name=table, id=str(raw["id"]), payload=payload))
                counts["challenges"] += 1

        for raw in data.get("courses", []):
            course = Course.model_validate(raw)
            session.merge(
                CourseRow(
                    id=course.id,
                    name=course.name,
                    description=course.description,
                    icon_name=course.icon_name,
                    user_id=course.user_id,
                    tenses=[
                        CourseTenseRow(id=t.id, course_id=course.id, name=t.name, order=t.order or i)
                        for i, t in enumerate(course.tenses)
                    ],
                )
            )
            counts["courses"] += 1

        for raw in data.get("profiles", []):
            session.merge(_profile_row(UserProfile.model_validate(raw)))
            counts["profiles"] += 1

    logger.info(f"Seeded {path}: {counts}")
    return counts

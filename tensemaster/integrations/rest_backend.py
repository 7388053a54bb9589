"""
Hosted backend client.

Talks to the PostgREST-style API of the hosted database (`/rest/v1/<table>`)
and implements both store protocols:

- ContentStore: question tables, gauntlet challenge tables, custom courses
- ProfileStore: profile reads, partial PATCH updates, leaderboard listing

Every transport or HTTP status failure is raised as BackendError.

Usage:
    async with RestBackend(url, api_key) as backend:
        profile = await backend.get_profile(user_id)
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

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

REST_PREFIX = "/rest/v1"
QUESTION_COLUMNS = "id,sentence,options,correct_answer"

_questions = TypeAdapter(list[Question])
_cloze = TypeAdapter(list[ClozeChallenge])
_detective = TypeAdapter(list[DetectiveChallenge])
_identification = TypeAdapter(list[IdentificationChallenge])
_tenses = TypeAdapter(list[Tense])
_courses = TypeAdapter(list[Course])
_profiles = TypeAdapter(list[UserProfile])


class RestBackend:
    """HTTP store for the hosted database."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        *,
        access_token: str | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings) -> "RestBackend":
        return cls(
            settings.backend_url,
            settings.backend_api_key,
            timeout=settings.http_timeout_seconds,
        )

    async def __aenter__(self) -> "RestBackend":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["apikey"] = self.api_key
            token = self.access_token or self.api_key
            if token:
                headers["Authorization"] = f"Bearer {token}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = await self._ensure_client()
        path = f"{REST_PREFIX}/{table}"
        try:
            response = await client.request(method, path, params=params, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {path} failed with {e.response.status_code}")
            raise BackendError(
                f"{method} {table} failed: {e.response.status_code} {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Connection error on {method} {path}: {e}")
            raise BackendError(f"{method} {table} failed: {e}") from e
        return response

    async def _select(self, table: str, **params: Any) -> list[dict[str, Any]]:
        params.setdefault("select", "*")
        response = await self._request("GET", table, params=params)
        return response.json()

    @staticmethod
    def _parse(adapter: TypeAdapter, rows: list[dict[str, Any]], table: str):
        try:
            return adapter.validate_python(rows)
        except ValidationError as e:
            raise BackendError(f"Malformed rows in {table}: {e.error_count()} errors") from e

    # =========================================================================
    # ContentStore
    # =========================================================================

    async def fetch_questions(self, source: QuestionSource) -> list[Question]:
        params: dict[str, Any] = {"select": QUESTION_COLUMNS}
        if source.tense_id:
            params["tense_id"] = f"eq.{source.tense_id}"
        rows = await self._select(source.table, **params)
        logger.debug(f"Fetched {len(rows)} questions from {source.describe()}")
        return self._parse(_questions, rows, source.table)

    async def fetch_catalog(self) -> CourseCatalog:
        """Built-in courses plus custom courses; a missing courses table yields built-ins only."""
        try:
            course_rows = await self._select("courses")
            tense_rows = await self._select("course_tenses", order="order.asc")
        except BackendError as e:
            if e.status_code == 404:
                logger.warning("Custom course tables are missing; using built-in courses only")
                return CourseCatalog()
            raise

        tenses: dict[str | None, list[Tense]] = defaultdict(list)
        for tense in self._parse(_tenses, tense_rows, "course_tenses"):
            tenses[tense.course_id].append(tense)

        custom = self._parse(
            _courses,
            [
                {
                    **row,
                    "description": row.get("description") or "",
                    "icon_name": row.get("icon_name") or "",
                    "tenses": tenses.get(row.get("id"), []),
                }
                for row in course_rows
            ],
            "courses",
        )
        return CourseCatalog(builtin=list(BUILTIN_COURSES), custom=custom)

    async def fetch_cloze_challenges(self) -> list[ClozeChallenge]:
        table = challenge_source(ChallengeMode.CLOZE).table
        return self._parse(_cloze, await self._select(table), table)

    async def fetch_detective_challenges(self) -> list[DetectiveChallenge]:
        table = challenge_source(ChallengeMode.DETECTIVE).table
        return self._parse(_detective, await self._select(table), table)

    async def fetch_identification_challenges(self) -> list[IdentificationChallenge]:
        table = challenge_source(ChallengeMode.IDENTIFICATION).table
        return self._parse(_identification, await self._select(table), table)

    # =========================================================================
    # ProfileStore
    # =========================================================================

    async def get_profile(self, user_id: str) -> UserProfile:
        rows = await self._select("profiles", id=f"eq.{user_id}")
        if not rows:
            raise ProfileNotFoundError(f"No profile for user {user_id}", status_code=404)
        return self._parse(_profiles, rows[:1], "profiles")[0]

    async def update_profile(self, user_id: str, updates: ProfileUpdate) -> None:
        """PATCH all fields in one request."""
        await self._request(
            "PATCH",
            "profiles",
            params={"id": f"eq.{user_id}"},
            json=updates,
            headers={"Prefer": "return=minimal"},
        )
        logger.debug(f"Updated profile {user_id}: {sorted(updates)}")

    async def list_profiles(self, limit: int) -> list[UserProfile]:
        rows = await self._select("profiles", select="id,username,xp", order="xp.desc", limit=limit)
        return self._parse(_profiles, rows, "profiles")

"""
Unit tests for the hosted REST backend client.
"""

import httpx
import pytest
import pytest_asyncio
from httpx import Request, Response

from tensemaster.core.errors import BackendError, ProfileNotFoundError
from tensemaster.core.modes import QuestionSource
from tensemaster.integrations.rest_backend import RestBackend

BASE_URL = "https://example.test"


class Recorder:
    """Replaces AsyncClient.request; answers from a table -> (status, body) map."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def __call__(self, method, path, params=None, json=None, headers=None):
        self.calls.append({"method": method, "path": path, "params": params, "json": json, "headers": headers})
        table = path.rsplit("/", 1)[-1]
        status, body = self.responses.get(table, (200, []))
        if isinstance(status, Exception):
            raise status
        return Response(status, json=body, request=Request(method, f"{BASE_URL}{path}"))


@pytest_asyncio.fixture
async def backend():
    client = RestBackend(BASE_URL, "anon-key")
    yield client
    await client.close()


async def install(backend, monkeypatch, responses):
    recorder = Recorder(responses)
    client = await backend._ensure_client()
    monkeypatch.setattr(client, "request", recorder)
    return recorder


class TestClientSetup:
    @pytest.mark.asyncio
    async def test_headers_use_api_key(self, backend):
        client = await backend._ensure_client()

        assert client.headers["apikey"] == "anon-key"
        assert client.headers["Authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_access_token_overrides_bearer(self):
        async with RestBackend(BASE_URL, "anon-key", access_token="user-jwt") as backend:
            client = await backend._ensure_client()
            assert client.headers["Authorization"] == "Bearer user-jwt"
        assert backend._client is None


class TestContent:
    @pytest.mark.asyncio
    async def test_fetch_builtin_questions(self, backend, monkeypatch):
        recorder = await install(backend, monkeypatch, {
            "quiz_simple_past": (200, [
                {"id": "1", "sentence": "I ___ home.", "options": ["go", "went", "gone"], "correct_answer": "went"},
            ]),
        })

        questions = await backend.fetch_questions(QuestionSource("quiz_simple_past"))

        assert questions[0].correct_answer == "went"
        call = recorder.calls[0]
        assert call["path"] == "/rest/v1/quiz_simple_past"
        assert call["params"] == {"select": "id,sentence,options,correct_answer"}

    @pytest.mark.asyncio
    async def test_fetch_custom_questions_filters_tense(self, backend, monkeypatch):
        recorder = await install(backend, monkeypatch, {"custom_quiz_questions": (200, [])})

        assert await backend.fetch_questions(QuestionSource("custom_quiz_questions", "t1")) == []
        assert recorder.calls[0]["params"]["tense_id"] == "eq.t1"

    @pytest.mark.asyncio
    async def test_malformed_rows(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"quiz_simple_past": (200, [{"id": "1"}])})

        with pytest.raises(BackendError):
            await backend.fetch_questions(QuestionSource("quiz_simple_past"))

    @pytest.mark.asyncio
    async def test_catalog_with_custom_course(self, backend, monkeypatch):
        recorder = await install(backend, monkeypatch, {
            "courses": (200, [{"id": "c1", "name": "Phrasal Verbs", "icon_name": None, "user_id": "u1"}]),
            "course_tenses": (200, [
                {"id": "t2", "name": "Two", "course_id": "c1", "order": 1},
                {"id": "t1", "name": "One", "course_id": "c1", "order": 0},
            ]),
        })

        catalog = await backend.fetch_catalog()

        course = catalog.get("c1")
        assert course.display_icon == "BookCopy"
        assert course.tense_ids() == ["t2", "t1"]
        assert not catalog.is_builtin("c1")
        assert recorder.calls[1]["params"]["order"] == "order.asc"

    @pytest.mark.asyncio
    async def test_catalog_malformed_tense_row(self, backend, monkeypatch):
        await install(backend, monkeypatch, {
            "courses": (200, [{"id": "c1", "name": "Phrasal Verbs"}]),
            "course_tenses": (200, [{"id": "t1", "name": None, "course_id": "c1"}]),
        })

        with pytest.raises(BackendError, match="course_tenses"):
            await backend.fetch_catalog()

    @pytest.mark.asyncio
    async def test_catalog_course_without_name(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"courses": (200, [{"id": "c1"}])})

        with pytest.raises(BackendError, match="courses"):
            await backend.fetch_catalog()

    @pytest.mark.asyncio
    async def test_missing_course_tables_fall_back(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"courses": (404, {"message": "relation does not exist"})})

        catalog = await backend.fetch_catalog()

        assert catalog.custom == []
        assert len(catalog.builtin) == 5

    @pytest.mark.asyncio
    async def test_catalog_server_error_propagates(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"courses": (500, {"message": "boom"})})

        with pytest.raises(BackendError) as exc_info:
            await backend.fetch_catalog()
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_detective_challenges(self, backend, monkeypatch):
        await install(backend, monkeypatch, {
            "challenge_grammar_detective": (200, [
                {"id": "d1", "paragraph": "He go.", "errors": [{"incorrect": "go", "correct": "goes"}]},
            ]),
        })

        challenges = await backend.fetch_detective_challenges()

        assert challenges[0].errors[0].correct == "goes"


class TestProfiles:
    @pytest.mark.asyncio
    async def test_get_profile(self, backend, monkeypatch):
        recorder = await install(backend, monkeypatch, {
            "profiles": (200, [{"id": "u1", "username": "ana", "xp": 40, "achievements": None}]),
        })

        profile = await backend.get_profile("u1")

        assert profile.username == "ana"
        assert profile.achievements == []
        assert recorder.calls[0]["params"]["id"] == "eq.u1"

    @pytest.mark.asyncio
    async def test_missing_profile(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"profiles": (200, [])})

        with pytest.raises(ProfileNotFoundError):
            await backend.get_profile("ghost")

    @pytest.mark.asyncio
    async def test_malformed_profile_row(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"profiles": (200, [{"id": "u1", "username": None, "xp": 5}])})

        with pytest.raises(BackendError, match="profiles"):
            await backend.get_profile("u1")

    @pytest.mark.asyncio
    async def test_update_is_one_patch(self, backend, monkeypatch):
        recorder = await install(backend, monkeypatch, {"profiles": (204, None)})

        await backend.update_profile("u1", {"xp": 150, "ai_coins": 80})

        assert len(recorder.calls) == 1
        call = recorder.calls[0]
        assert call["method"] == "PATCH"
        assert call["params"] == {"id": "eq.u1"}
        assert call["json"] == {"xp": 150, "ai_coins": 80}
        assert call["headers"] == {"Prefer": "return=minimal"}

    @pytest.mark.asyncio
    async def test_update_failure(self, backend, monkeypatch):
        await install(backend, monkeypatch, {"profiles": (403, {"message": "denied"})})

        with pytest.raises(BackendError) as exc_info:
            await backend.update_profile("u1", {"xp": 1})
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_connection_error(self, backend, monkeypatch):
        await install(backend, monkeypatch, {
            "profiles": (httpx.ConnectError("refused"), None),
        })

        with pytest.raises(BackendError):
            await backend.get_profile("u1")

    @pytest.mark.asyncio
    async def test_list_profiles(self, backend, monkeypatch):
        recorder = await install(backend, monkeypatch, {
            "profiles": (200, [{"id": "a", "username": "a", "xp": 9}, {"id": "b", "username": "b", "xp": 3}]),
        })

        profiles = await backend.list_profiles(500)

        assert [p.id for p in profiles] == ["a", "b"]
        assert recorder.calls[0]["params"] == {"select": "id,username,xp", "order": "xp.desc", "limit": 500}

    @pytest.mark.asyncio
    async def test_list_profiles_malformed_row(self, backend, monkeypatch):
        await install(backend, monkeypatch, {
            "profiles": (200, [{"id": "a", "username": "a", "xp": 9}, {"id": "b", "username": "b", "xp": "lots"}]),
        })

        with pytest.raises(BackendError, match="profiles"):
            await backend.list_profiles(10)

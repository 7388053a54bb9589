"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import copy
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tensemaster.content.catalog import CourseCatalog  # noqa: E402
from tensemaster.core.errors import BackendError, ProfileNotFoundError  # noqa: E402
from tensemaster.core.models import Course, Question, Tense, UserProfile  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# =============================================================================
# In-memory stores
# =============================================================================


class FakeStore:
    """ContentStore + ProfileStore kept in dictionaries."""

    def __init__(self, profiles=None, questions=None, catalog=None):
        self.profiles = {p.id: p for p in (profiles or [])}
        self.questions = questions or {}
        self.catalog = catalog or CourseCatalog()
        self.cloze = []
        self.detective = []
        self.identification = []
        self.updates = []
        self.fail_updates = False

    async def fetch_questions(self, source):
        return list(self.questions.get((source.table, source.tense_id), []))

    async def fetch_catalog(self):
        return self.catalog

    async def fetch_cloze_challenges(self):
        return list(self.cloze)

    async def fetch_detective_challenges(self):
        return list(self.detective)

    async def fetch_identification_challenges(self):
        return list(self.identification)

    async def get_profile(self, user_id):
        if user_id not in self.profiles:
            raise ProfileNotFoundError(f"No profile for user {user_id}", status_code=404)
        return self.profiles[user_id]

    async def update_profile(self, user_id, updates):
        if self.fail_updates:
            raise BackendError("connection refused")
        self.updates.append((user_id, copy.deepcopy(updates)))
        self.profiles[user_id] = self.profiles[user_id].with_updates(updates)

    async def list_profiles(self, limit):
        return list(self.profiles.values())[:limit]


class RecordingNotifier:
    """Notifier that remembers what it was shown."""

    def __init__(self):
        self.shown = []

    def notify(self, notification):
        self.shown.append(notification)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def sample_profile():
    """A learner with some coins and one of each power-up."""
    return UserProfile(
        id="learner-1",
        email="learner@example.com",
        username="learner",
        xp=100,
        ai_coins=500,
        purchased_power_ups={"hint": 1, "5050": 1, "skip": 1, "second-chance": 1, "double-xp": 1},
    )


@pytest.fixture
def sample_questions():
    """Three simple-present questions."""
    return [
        Question(id="q1", sentence="She ___ to school.", options=["go", "goes", "going", "gone"], correct_answer="goes"),
        Question(id="q2", sentence="They ___ tea.", options=["drink", "drinks", "drank"], correct_answer="drink"),
        Question(id="q3", sentence="It ___ often.", options=["rain", "rains", "raining", "rained"], correct_answer="rains"),
    ]


@pytest.fixture
def custom_course():
    """A learner-authored course with two tenses."""
    return Course(
        id="my-course",
        name="My Course",
        icon_name="NotAnIcon",
        user_id="learner-1",
        tenses=[Tense(id="t1", name="One", course_id="my-course"), Tense(id="t2", name="Two", course_id="my-course")],
    )


@pytest.fixture
def catalog(custom_course):
    """Built-in courses plus one custom course."""
    return CourseCatalog(custom=[custom_course])


@pytest.fixture
def fake_store(sample_profile, sample_questions, catalog):
    """In-memory store with the sample profile and simple-present questions."""
    return FakeStore(
        profiles=[sample_profile],
        questions={
            ("quiz_simple_present", None): sample_questions,
            ("review_present", None): sample_questions,
            ("challenge_classic", None): sample_questions,
            ("challenge_time_attack", None): sample_questions,
            ("custom_quiz_questions", "t1"): sample_questions,
        },
        catalog=catalog,
    )


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()

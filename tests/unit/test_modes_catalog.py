"""
Unit tests for mode configuration, question sources and the course catalog.
"""

import pytest

from tensemaster.content.catalog import ALL_TENSE_NAMES, BUILTIN_COURSES, CourseCatalog
from tensemaster.core.errors import UnknownQuestionSourceError
from tensemaster.core.models import Course, UserProfile
from tensemaster.core.modes import (
    CHALLENGE_TABLES,
    DAILY_MODES,
    LESSON_TABLES,
    MODE_TABLE,
    ChallengeMode,
    challenge_source,
    get_mode_config,
    lesson_source,
    review_source,
)


class TestModeTable:
    def test_every_mode_configured(self):
        assert set(MODE_TABLE) == set(ChallengeMode)

    def test_daily_modes(self):
        assert set(DAILY_MODES) == {
            ChallengeMode.DAILY_CLASSIC,
            ChallengeMode.DAILY_HARD,
            ChallengeMode.DAILY_TIME_ATTACK,
        }

    def test_only_lessons_allow_power_ups(self):
        allowed = [mode for mode, config in MODE_TABLE.items() if config.allows_power_ups]
        assert allowed == [ChallengeMode.LESSON]

    def test_lookup_by_value(self):
        assert get_mode_config("time-attack").time_limit_seconds == 60

    def test_unknown_mode(self):
        with pytest.raises(UnknownQuestionSourceError):
            get_mode_config("sudden-death")


class TestQuestionSources:
    def test_builtin_lesson(self):
        source = lesson_source("past-perfect", builtin=True)
        assert source.table == "quiz_past_perfect"
        assert source.tense_id is None

    def test_custom_lesson_filters_by_tense(self):
        source = lesson_source("t1", builtin=False)
        assert source.table == "custom_quiz_questions"
        assert source.tense_id == "t1"
        assert source.describe() == "custom_quiz_questions (tense t1)"

    def test_unknown_builtin_tense(self):
        with pytest.raises(UnknownQuestionSourceError):
            lesson_source("pluperfect", builtin=True)

    def test_review(self):
        assert review_source("reported-speech").table == "review_reported_speech"

    def test_review_of_custom_course(self):
        with pytest.raises(UnknownQuestionSourceError):
            review_source("my-course")

    def test_challenge(self):
        assert challenge_source(ChallengeMode.DETECTIVE).table == "challenge_grammar_detective"
        assert ChallengeMode.LESSON not in CHALLENGE_TABLES

    def test_every_builtin_tense_has_a_table(self):
        tense_ids = {t.id for c in BUILTIN_COURSES for t in c.tenses}
        assert tense_ids == set(LESSON_TABLES)


class TestCatalog:
    def test_builtin_order(self):
        assert [c.id for c in CourseCatalog().all()] == [
            "present", "past", "future", "passive", "reported-speech",
        ]

    def test_custom_after_builtin(self, catalog):
        assert catalog.all()[-1].id == "my-course"
        assert not catalog.is_builtin("my-course")
        assert catalog.is_builtin("future")

    def test_get_missing(self, catalog):
        assert catalog.get("nope") is None

    def test_tense_name(self, catalog):
        assert catalog.tense_name("past", "simple-past") == "Simple Past"
        assert catalog.tense_name("past", "unknown") == "unknown"

    def test_icon_fallback(self, custom_course):
        assert custom_course.display_icon == "BookCopy"
        assert Course(id="x", name="X", icon_name="Rocket").display_icon == "Rocket"

    def test_tense_names_for_identification(self):
        assert "Future Perfect Continuous" in ALL_TENSE_NAMES
        assert len(ALL_TENSE_NAMES) == 17


class TestProfileModel:
    def test_null_collections(self):
        profile = UserProfile.model_validate({"id": "u", "achievements": None, "purchased_power_ups": None})
        assert profile.achievements == []
        assert profile.purchased_power_ups == {}

    def test_with_updates_is_a_copy(self, sample_profile):
        updated = sample_profile.with_updates({"xp": 999, "achievements": ["first-quiz"]})

        assert updated.xp == 999
        assert updated.has_achievement("first-quiz")
        assert sample_profile.xp == 100

"""
Unit tests for course progress merging.
"""

from tensemaster.content.catalog import BUILTIN_COURSES
from tensemaster.core.models import TenseProgress
from tensemaster.engine.progress import course_completion, is_course_completed, merge_progress


class TestMergeProgress:
    def test_first_result_above_threshold_completes(self):
        merged = merge_progress({}, "present", "simple-present", 80)

        assert merged["present"]["simple-present"] == TenseProgress(completed=True, score=80)

    def test_below_threshold_not_completed(self):
        merged = merge_progress({}, "present", "simple-present", 74)

        assert merged["present"]["simple-present"].completed is False

    def test_threshold_is_inclusive(self):
        assert merge_progress({}, "past", "simple-past", 75)["past"]["simple-past"].completed

    def test_completion_is_sticky(self):
        """A worse retake keeps completion and the best score."""
        first = merge_progress({}, "present", "simple-present", 90)
        second = merge_progress(first, "present", "simple-present", 20)

        assert second["present"]["simple-present"] == TenseProgress(completed=True, score=90)

    def test_idempotent(self):
        once = merge_progress({}, "present", "simple-present", 60)
        twice = merge_progress(once, "present", "simple-present", 60)

        assert once == twice

    def test_score_never_decreases(self):
        progress = {}
        best = 0
        for score in [40, 90, 10, 75, 95, 0]:
            progress = merge_progress(progress, "future", "simple-future", score)
            best = max(best, score)
            assert progress["future"]["simple-future"].score == best

    def test_input_not_mutated(self):
        existing = {"present": {"simple-present": TenseProgress(completed=False, score=10)}}
        merge_progress(existing, "present", "simple-present", 100)

        assert existing["present"]["simple-present"] == TenseProgress(completed=False, score=10)

    def test_custom_threshold(self):
        merged = merge_progress({}, "present", "simple-present", 60, threshold=50)
        assert merged["present"]["simple-present"].completed


class TestCourseCompletion:
    def test_partial_course(self):
        present = BUILTIN_COURSES[0]
        progress = merge_progress({}, "present", "simple-present", 100)

        assert course_completion(progress, present) == (1, 4)
        assert not is_course_completed(progress, present)

    def test_full_course(self):
        present = BUILTIN_COURSES[0]
        progress = {}
        for tense in present.tenses:
            progress = merge_progress(progress, "present", tense.id, 80)

        assert is_course_completed(progress, present)

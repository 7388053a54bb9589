"""
Progress Merger.

Folds one lesson result into the learner's per-course progress map. The input
map is never mutated, so a merged copy can be used to preview achievements
before anything is persisted.
"""

from __future__ import annotations

from tensemaster.core.models import AllCourseProgress, Course, TenseProgress

COMPLETION_THRESHOLD = 75


def merge_progress(
    existing: AllCourseProgress,
    course_id: str,
    tense_id: str,
    new_score: float,
    *,
    threshold: float = COMPLETION_THRESHOLD,
) -> AllCourseProgress:
    """
    Return a new progress map with one tense result applied.

    completed' = completed or new_score >= threshold
    score'     = max(score, new_score)
    """
    merged: AllCourseProgress = {
        cid: {tid: entry.model_copy() for tid, entry in tenses.items()}
        for cid, tenses in existing.items()
    }
    course = merged.setdefault(course_id, {})
    previous = course.get(tense_id)

    course[tense_id] = TenseProgress(
        completed=(previous.completed if previous else False) or new_score >= threshold,
        score=max(previous.score if previous else 0, new_score),
    )
    return merged


def is_tense_completed(progress: AllCourseProgress, course_id: str, tense_id: str) -> bool:
    entry = progress.get(course_id, {}).get(tense_id)
    return bool(entry and entry.completed)


def is_course_completed(progress: AllCourseProgress, course: Course) -> bool:
    """All tenses completed. An empty course is complete only vacuously."""
    return all(is_tense_completed(progress, course.id, t.id) for t in course.tenses)


def course_completion(progress: AllCourseProgress, course: Course) -> tuple[int, int]:
    """(completed tenses, total tenses) for a course."""
    done = sum(1 for t in course.tenses if is_tense_completed(progress, course.id, t.id))
    return done, len(course.tenses)

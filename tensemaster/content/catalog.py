"""
Course catalog: the five built-in courses plus learner-authored ones.

Built-in courses ship with the engine; custom courses come from the content
store. Achievement checks need both, and need to know which is which.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tensemaster.core.models import Course, Tense


def _course(course_id: str, name: str, description: str, icon: str, tenses: list[tuple[str, str]]) -> Course:
    return Course(
        id=course_id,
        name=name,
        description=description,
        icon_name=icon,
        user_id=None,
        tenses=[
            Tense(id=tense_id, name=tense_name, course_id=course_id, order=i)
            for i, (tense_id, tense_name) in enumerate(tenses)
        ],
    )


BUILTIN_COURSES: tuple[Course, ...] = (
    _course(
        "present", "Present Tenses", "Master habits, truths, and ongoing actions in the now.", "BookOpen",
        [
            ("simple-present", "Simple Present"),
            ("present-continuous", "Present Continuous"),
            ("present-perfect", "Present Perfect"),
            ("present-perfect-continuous", "Present Perfect Continuous"),
        ],
    ),
    _course(
        "past", "Past Tenses", "Explore actions that have already happened.", "History",
        [
            ("simple-past", "Simple Past"),
            ("past-continuous", "Past Continuous"),
            ("past-perfect", "Past Perfect"),
            ("past-perfect-continuous", "Past Perfect Continuous"),
        ],
    ),
    _course(
        "future", "Future Tenses", "Learn to speak about events yet to come.", "Rocket",
        [
            ("simple-future", "Simple Future"),
            ("future-continuous", "Future Continuous"),
            ("future-perfect", "Future Perfect"),
            ("future-perfect-continuous", "Future Perfect Continuous"),
        ],
    ),
    _course(
        "passive", "Passive Voice", "Focus on the action, not the actor.", "BookCopy",
        [
            ("passive-present-simple", "Present Simple Passive"),
            ("passive-past-simple", "Past Simple Passive"),
            ("passive-future-simple", "Future Simple Passive"),
        ],
    ),
    _course(
        "reported-speech", "Reported Speech", "Understand how to report what others have said.", "MessageSquareQuote",
        [
            ("reported-statements", "Reported Statements"),
            ("reported-questions", "Reported Questions"),
        ],
    ),
)

BUILTIN_COURSE_IDS = frozenset(c.id for c in BUILTIN_COURSES)

# Every tense name the identification challenge may use as an option.
ALL_TENSE_NAMES: tuple[str, ...] = tuple(t.name for c in BUILTIN_COURSES for t in c.tenses)


@dataclass
class CourseCatalog:
    """Built-in courses followed by custom courses, in display order."""

    builtin: list[Course] = field(default_factory=lambda: list(BUILTIN_COURSES))
    custom: list[Course] = field(default_factory=list)

    def all(self) -> list[Course]:
        return [*self.builtin, *self.custom]

    def get(self, course_id: str) -> Course | None:
        for course in self.all():
            if course.id == course_id:
                return course
        return None

    def is_builtin(self, course_id: str) -> bool:
        return any(c.id == course_id for c in self.builtin)

    def tense_name(self, course_id: str, tense_id: str) -> str:
        """Display name of a tense, falling back to its id."""
        course = self.get(course_id)
        if course:
            for tense in course.tenses:
                if tense.id == tense_id:
                    return tense.name
        return tense_id

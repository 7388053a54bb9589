"""
Session Module - quiz state, submission and notifications.

QuizSession holds one quiz in memory; SubmissionService loads content,
persists results through the stores, and returns a SubmissionOutcome that
plan_notifications turns into user-visible messages.
"""

from tensemaster.session.notifications import (
    Notification,
    NotificationKind,
    NotificationSequencer,
    ScheduledNotification,
    plan_notifications,
)
from tensemaster.session.quiz_session import QuizSession
from tensemaster.session.submission import SubmissionOutcome, SubmissionService

__all__ = [
    "Notification",
    "NotificationKind",
    "NotificationSequencer",
    "ScheduledNotification",
    "plan_notifications",
    "QuizSession",
    "SubmissionOutcome",
    "SubmissionService",
]

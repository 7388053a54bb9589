"""
Exception hierarchy for the Tense Master engine.

Pure engine functions raise these for caller mistakes (unknown modes,
mismatched answer lists, purchases the profile cannot afford). Store adapters
wrap transport failures in BackendError so callers only need one except
clause around persistence.
"""

from __future__ import annotations


class TenseMasterError(Exception):
    """Base class for all engine errors."""


class NoQuestionsError(TenseMasterError):
    """Raised when a mode/tense has no questions to play."""

    def __init__(self, source: str):
        super().__init__(f"No questions available for {source}")
        self.source = source


class UnknownQuestionSourceError(TenseMasterError):
    """Raised when a course/tense/mode has no configured question table."""


class AnswerMismatchError(TenseMasterError):
    """Raised when answers are not position-aligned with questions."""


class AnswerLockedError(TenseMasterError):
    """Raised when changing an answer that is already locked in."""


class SessionSubmittedError(TenseMasterError):
    """Raised when a finished session is modified or submitted twice."""


class PowerUpUnavailableError(TenseMasterError):
    """Raised when the learner has no remaining units of a power-up."""

    def __init__(self, power_up: str):
        super().__init__(f"No more {power_up.replace('-', ' ')} power-ups!")
        self.power_up = power_up


class PowerUpNotAllowedError(TenseMasterError):
    """Raised when a power-up cannot be used in the current quiz state."""


class ChallengeAlreadyCompletedError(TenseMasterError):
    """Raised when the daily challenge was already completed today."""


class ShopError(TenseMasterError):
    """Base class for purchase and theme errors."""


class InsufficientCoinsError(ShopError):
    """Raised when a purchase costs more than the learner's balance."""


class ItemAlreadyOwnedError(ShopError):
    """Raised when buying a theme that is already owned."""


class ItemNotOwnedError(ShopError):
    """Raised when applying a theme the learner does not own."""


class UnknownItemError(ShopError):
    """Raised for shop ids that are not in the catalog."""


class BackendError(TenseMasterError):
    """Raised when a profile/content store request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ProfileNotFoundError(BackendError):
    """Raised when no profile exists for a user id."""

"""
Error conditions raised by the classroom layer.

Every error a learner can trigger derives from CoursePlayerError so the
controller can turn it into a notice or a view mode without crashing.
"""

from typing import Optional


class CoursePlayerError(Exception):
    """Base class for course player errors."""


class AuthRequired(CoursePlayerError):
    """No session token, or the server rejected it."""

    def __init__(self, message: str = "Authentication required. Please log in again."):
        super().__init__(message)


class NetworkOrServerError(CoursePlayerError):
    """Transport failure or non-2xx response."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AccountSuspended(NetworkOrServerError):
    """Server reported the learner's account as suspended."""

    def __init__(self, message: str = "Your account has been suspended.", status: Optional[int] = 403):
        super().__init__(message, status)


class SubmissionValidationError(CoursePlayerError):
    """Local completeness check failed; nothing was sent."""

    def __init__(self, missing: list[str], message: str = "Please answer all questions before submitting."):
        super().__init__(message)
        self.missing = missing


class QuizUnavailable(CoursePlayerError):
    """Quiz id missing or the quiz could not be loaded."""

    def __init__(self, message: str = "This quiz could not be loaded."):
        super().__init__(message)


class InvalidTransition(CoursePlayerError):
    """A flow was asked to move between states it does not connect."""


class ActionInFlight(InvalidTransition):
    """The same action is already waiting on the server."""

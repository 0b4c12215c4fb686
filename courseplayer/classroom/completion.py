"""
LessonCompletionFlow - Mark a lesson done and adopt the server's enrollment.

States: IDLE -> SUBMITTING -> COMPLETED | FAILED. The local enrollment is
never patched; on success the caller replaces it with the returned one, on
failure it keeps what it had.
"""

import logging
from enum import Enum
from typing import Optional

from courseplayer.schemas import Enrollment

from .api import CourseAPI
from .errors import ActionInFlight, AuthRequired, CoursePlayerError


logger = logging.getLogger(__name__)


class CompletionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    FAILED = "failed"


class LessonCompletionFlow:
    """One lesson completion call at a time."""

    def __init__(self, api: CourseAPI):
        self.api = api
        self.state = CompletionState.IDLE
        self.error: Optional[CoursePlayerError] = None
        self.enrollment: Optional[Enrollment] = None

    @property
    def in_flight(self) -> bool:
        return self.state == CompletionState.SUBMITTING

    def complete_lesson(
        self,
        course_id: str,
        section_id: str,
        lesson_id: str,
        time_spent_minutes: int = 0,
    ) -> Enrollment:
        """
        Submit a lesson completion.

        Already-completed lessons are submitted again; the server treats that
        as a no-op.

        Returns:
            The full enrollment returned by the server

        Raises:
            ActionInFlight: a completion is already waiting on the server
            AuthRequired: no session
            NetworkOrServerError: transport or server failure
        """
        if self.in_flight:
            raise ActionInFlight("Lesson completion already in progress")

        self.error = None
        if not self.api.session.is_authenticated:
            self.state = CompletionState.FAILED
            self.error = AuthRequired()
            raise self.error

        self.state = CompletionState.SUBMITTING
        logger.info(f"Completing lesson {lesson_id} in section {section_id}")
        try:
            enrollment = self.api.complete_lesson(
                course_id, section_id, lesson_id, max(0, int(time_spent_minutes))
            )
        except CoursePlayerError as e:
            self.state = CompletionState.FAILED
            self.error = e
            logger.warning(f"Lesson completion failed: {e}")
            raise
        except BaseException:
            self.state = CompletionState.FAILED
            raise

        self.state = CompletionState.COMPLETED
        self.enrollment = enrollment
        return enrollment

    def reset(self):
        """Back to IDLE (e.g. when a different lesson is opened)."""
        if not self.in_flight:
            self.state = CompletionState.IDLE
            self.error = None

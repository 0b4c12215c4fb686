"""
QuizAttemptFlow - Load a quiz, collect answers, submit, show the verdict.

States:
    LOADING -> READY | UNAVAILABLE
    READY -> ANSWERING -> SUBMITTING -> PASSED | FAILED
    FAILED -> ANSWERING        (retake, answers cleared)
    PASSED -> CONTINUED        (advance to the next content)

Scoring happens on the server; the flow keeps its verdict as-is.
"""

import logging
from enum import Enum
from typing import Optional

from courseplayer.schemas import QuestionResult, Quiz, QuizResult

from .api import CourseAPI
from .errors import (
    AccountSuspended,
    ActionInFlight,
    CoursePlayerError,
    InvalidTransition,
    QuizUnavailable,
    SubmissionValidationError,
)


logger = logging.getLogger(__name__)


class QuizState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ANSWERING = "answering"
    SUBMITTING = "submitting"
    PASSED = "passed"
    FAILED = "failed"
    CONTINUED = "continued"
    UNAVAILABLE = "unavailable"


class QuizAttemptFlow:
    """One learner's attempt(s) at a single quiz."""

    def __init__(self, api: CourseAPI):
        self.api = api
        self.state = QuizState.LOADING
        self.quiz: Optional[Quiz] = None
        self.answers: dict[str, str] = {}
        self.result: Optional[QuizResult] = None
        self.error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_quiz(self, quiz_id: Optional[str]) -> Quiz:
        """
        Fetch the quiz.

        Raises:
            QuizUnavailable: no quiz id, or the fetch failed
        """
        self.state = QuizState.LOADING
        self.quiz = None
        self.answers = {}
        self.result = None
        self.error = None

        if not quiz_id:
            self._unavailable("Quiz not found")

        try:
            quiz = self.api.get_quiz(quiz_id)
        except AccountSuspended:
            self.state = QuizState.UNAVAILABLE
            raise
        except CoursePlayerError as e:
            logger.warning(f"Could not load quiz {quiz_id}: {e}")
            self._unavailable(str(e) or "Failed to load quiz")

        self.quiz = quiz
        self.state = QuizState.READY
        logger.info(f"Loaded quiz {quiz_id} ({len(quiz.questions)} questions)")
        return quiz

    def _unavailable(self, message: str):
        self.state = QuizState.UNAVAILABLE
        self.error = message
        raise QuizUnavailable(message)

    # -------------------------------------------------------------------------
    # Answering
    # -------------------------------------------------------------------------

    def answer(self, question_id: str, answer: str):
        """Record (or replace) the answer to one question."""
        if self.state not in (QuizState.READY, QuizState.ANSWERING):
            raise InvalidTransition(f"Cannot answer while {self.state.value}")
        if question_id not in {q.id for q in self.quiz.questions}:
            raise KeyError(question_id)
        self.answers[question_id] = answer
        self.state = QuizState.ANSWERING

    def unanswered(self) -> list[str]:
        """IDs of questions without a non-empty answer."""
        if self.quiz is None:
            return []
        return [q.id for q in self.quiz.questions if not self.answers.get(q.id)]

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(self, course_id: str, section_id: Optional[str]) -> QuizResult:
        """
        Send the answers for grading.

        Raises:
            ActionInFlight: already submitting
            SubmissionValidationError: a question is unanswered (no request made)
            NetworkOrServerError / AuthRequired: the call failed; answers are kept
        """
        if self.state == QuizState.SUBMITTING:
            raise ActionInFlight("Quiz submission already in progress")
        if self.state not in (QuizState.READY, QuizState.ANSWERING):
            raise InvalidTransition(f"Cannot submit while {self.state.value}")

        missing = self.unanswered()
        if missing:
            raise SubmissionValidationError(missing)

        self.state = QuizState.SUBMITTING
        try:
            result = self.api.submit_quiz(self.quiz.id, course_id, section_id, dict(self.answers))
        except CoursePlayerError as e:
            self.state = QuizState.ANSWERING
            logger.warning(f"Quiz submission failed: {e}")
            raise
        except BaseException:
            self.state = QuizState.ANSWERING
            raise

        self.result = result
        self.state = QuizState.PASSED if result.passed else QuizState.FAILED
        logger.info(
            f"Quiz {self.quiz.id} scored {result.score} "
            f"({'passed' if result.passed else 'failed'}, attempt {result.attempt_count})"
        )
        return result

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    @property
    def passed(self) -> Optional[bool]:
        return self.result.passed if self.result else None

    @property
    def shows_result(self) -> bool:
        """A graded attempt is on screen (including after Continue at course end)."""
        return self.result is not None and self.state in (
            QuizState.PASSED, QuizState.FAILED, QuizState.CONTINUED
        )

    def feedback(self) -> list[QuestionResult]:
        """Per-question feedback from the last submission."""
        return list(self.result.results) if self.result else []

    @property
    def retakes_remaining(self) -> Optional[int]:
        """Informational only; the server decides whether a retake is accepted."""
        if self.quiz is None or self.quiz.max_retakes is None:
            return None
        attempts = self.result.attempt_count if self.result else 0
        return max(0, self.quiz.max_retakes - attempts)

    def retake(self):
        """Start over after a failed attempt."""
        if self.state != QuizState.FAILED:
            raise InvalidTransition("Retake is only offered after a failed attempt")
        self.answers = {}
        self.result = None
        self.state = QuizState.ANSWERING

    def continue_(self):
        """Accept a passing result; the controller advances the learner."""
        if self.state != QuizState.PASSED:
            raise InvalidTransition("Continue is only offered after passing")
        self.state = QuizState.CONTINUED

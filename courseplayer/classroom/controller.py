"""
CoursePlayerController - Orchestrates one course-viewing session.

Owns the course, the enrollment and the current view (lesson, quiz or
certificate), and routes learner actions through the unlock rules, the
sequencer and the completion/quiz flows. Layout lives elsewhere
(see layout.PanelLayout).
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from courseplayer.schemas import Course, Enrollment, Lesson, Section

from .api import CourseAPI
from .certificate import (
    PENDING_APPROVAL_NOTICE,
    CertificateGate,
    CertificateView,
    is_certificate_reachable,
)
from .completion import LessonCompletionFlow
from .errors import (
    AccountSuspended,
    ActionInFlight,
    AuthRequired,
    CoursePlayerError,
    InvalidTransition,
    QuizUnavailable,
    SubmissionValidationError,
)
from .generation import ENROLLMENT, VIEW, RequestGenerations
from .navigator import (
    CourseComplete,
    NavigationSection,
    NavigationSequencer,
    NavigationTarget,
    filter_tree,
)
from .progress import EnrollmentProgress
from .quiz_flow import QuizAttemptFlow
from .unlock import FinalQuizTarget, LessonTarget, SectionQuizTarget, is_unlocked


logger = logging.getLogger(__name__)

LOCKED_LESSON_NOTICE = "Please complete the previous content before accessing this lesson."
LOCKED_QUIZ_NOTICE = "Please complete all lessons in this section before taking the quiz."
LOCKED_FINAL_QUIZ_NOTICE = "Please complete every section before taking the final quiz."


class ViewMode(str, Enum):
    LOADING = "loading"
    ENROLL = "enroll"
    LESSON = "lesson"
    QUIZ = "quiz"
    QUIZ_UNAVAILABLE = "quiz_unavailable"
    CERTIFICATE = "certificate"
    ERROR = "error"
    SIGNED_OUT = "signed_out"


@dataclass
class Notice:
    """A toast for the learner."""
    level: str  # success, info, warning, error
    message: str


@dataclass
class AssistantContext:
    """What the AI side panel is told about the current view."""
    title: str
    context_id: str
    content_scope: Optional[str]
    disabled: bool


class CoursePlayerController:
    """
    Course player state machine.

    All server errors are caught here and turned into notices or view modes.
    """

    def __init__(self, api: CourseAPI, clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            api: REST client (its session gates authenticated actions)
            clock: Time source for lesson time tracking
        """
        self.api = api
        self.session = api.session
        self._clock = clock
        self._generations = RequestGenerations()

        self.course_id: Optional[str] = None
        self.course: Optional[Course] = None
        self.enrollment: Optional[Enrollment] = None
        self.progress: Optional[EnrollmentProgress] = None
        self.sequencer: Optional[NavigationSequencer] = None

        self.view_mode = ViewMode.LOADING
        self.current: Optional[NavigationTarget] = None
        self.quiz_flow: Optional[QuizAttemptFlow] = None
        self.certificate_view: Optional[CertificateView] = None
        self.completion = LessonCompletionFlow(api)
        self.certificate_gate = CertificateGate(api)

        self.error: Optional[str] = None
        self.notices: list[Notice] = []
        self._lesson_started_at: Optional[datetime] = None

    # -------------------------------------------------------------------------
    # Notices and session
    # -------------------------------------------------------------------------

    def notify(self, level: str, message: str):
        self.notices.append(Notice(level, message))

    def drain_notices(self) -> list[Notice]:
        """Return and clear pending notices."""
        notices, self.notices = self.notices, []
        return notices

    def _force_logout(self, message: str):
        """Suspended account: drop everything and sign out."""
        logger.warning(f"Forcing logout: {message}")
        self.session.clear()
        self._generations.advance(VIEW)
        self._generations.advance(ENROLLMENT)
        self.view_mode = ViewMode.SIGNED_OUT
        self.error = message
        self.quiz_flow = None
        self.certificate_view = None
        self.notify("error", message)

    def _set_enrollment(self, enrollment: Optional[Enrollment]):
        """Adopt the server's enrollment wholesale."""
        self.enrollment = enrollment
        self.progress = EnrollmentProgress(enrollment) if enrollment else None

    # -------------------------------------------------------------------------
    # Loading and enrollment
    # -------------------------------------------------------------------------

    @property
    def is_enrolled(self) -> bool:
        return self.enrollment is not None

    def load(self, course_id: str):
        """Fetch course and enrollment, then pick the starting view."""
        if self.session.is_suspended:
            self._force_logout("Your account has been suspended.")
            return

        view_token = self._generations.advance(VIEW)
        enrollment_token = self._generations.advance(ENROLLMENT)
        self.course_id = course_id
        self.view_mode = ViewMode.LOADING
        self.error = None

        try:
            response = self.api.get_course(course_id)
        except AccountSuspended as e:
            self._force_logout(str(e))
            return
        except CoursePlayerError as e:
            if self._generations.is_current(view_token):
                logger.warning(f"Error loading course {course_id}: {e}")
                self.error = str(e) or "Failed to load course. Please try again later."
                self.view_mode = ViewMode.ERROR
            return

        if not self._generations.is_current(view_token):
            logger.debug(f"Discarding stale course response for {course_id}")
            return

        self.course = response.course
        self.sequencer = NavigationSequencer(response.course)
        self._set_enrollment(response.enrollment)

        if response.enrollment is not None and self.session.is_authenticated:
            try:
                detailed = self.api.get_enrollment(course_id)
            except AccountSuspended as e:
                self._force_logout(str(e))
                return
            except CoursePlayerError as e:
                logger.info(f"Using basic enrollment data: {e}")
            else:
                if self._generations.is_current(enrollment_token):
                    self._set_enrollment(detailed)

        if not self._generations.is_current(view_token):
            return

        if self.enrollment is None:
            self.view_mode = ViewMode.ENROLL
            self.current = None
            return

        self.view_mode = ViewMode.LESSON
        self.current = None
        first = self.sequencer.first()
        if isinstance(first, LessonTarget):
            self.select(first)

    def enroll(self) -> bool:
        """Enroll in the loaded course and reload it."""
        if self.course_id is None:
            return False
        try:
            self.api.enroll(self.course_id)
        except AccountSuspended as e:
            self._force_logout(str(e))
            return False
        except CoursePlayerError as e:
            self.notify("error", str(e) or "Failed to enroll in course")
            return False
        self.load(self.course_id)
        return True

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def is_unlocked(self, target: NavigationTarget) -> bool:
        if self.course is None or isinstance(target, CourseComplete):
            return False
        return is_unlocked(self.course, self.progress, target)

    def select(self, target: NavigationTarget) -> bool:
        """
        Open a lesson, quiz, or the end of the course.

        Locked targets are refused with a notice. Returns True when the view
        changed.
        """
        if self.course is None or self.enrollment is None:
            return False

        if isinstance(target, CourseComplete):
            return self.complete_course()

        if not self.is_unlocked(target):
            if isinstance(target, LessonTarget):
                self.notify("warning", LOCKED_LESSON_NOTICE)
            elif isinstance(target, SectionQuizTarget):
                self.notify("warning", LOCKED_QUIZ_NOTICE)
            else:
                self.notify("warning", LOCKED_FINAL_QUIZ_NOTICE)
            return False

        self._generations.advance(VIEW)
        self.current = target
        self.certificate_view = None
        self.completion.reset()

        if isinstance(target, LessonTarget):
            self.quiz_flow = None
            self.view_mode = ViewMode.LESSON
            self._lesson_started_at = self._clock()
            return True

        self._open_quiz(target)
        return True

    def select_lesson(self, section_index: int, lesson_index: int) -> bool:
        return self.select(LessonTarget(section_index, lesson_index))

    def select_quiz(self, section_index: int) -> bool:
        return self.select(SectionQuizTarget(section_index))

    def select_final_quiz(self) -> bool:
        return self.select(FinalQuizTarget())

    def next(self) -> bool:
        """Move to the structurally next item."""
        if self.sequencer is None or self.current is None:
            return False
        target = self.sequencer.next(self.current)
        if target is None:
            return False
        return self.select(target)

    def previous(self) -> bool:
        """Move back; from a quiz this is the last lesson of its section."""
        if self.sequencer is None or self.current is None:
            return False
        target = self.sequencer.previous(self.current)
        if target is None:
            return False
        return self.select(target)

    @property
    def can_go_previous(self) -> bool:
        if self.sequencer is None or self.current is None:
            return False
        return self.sequencer.previous(self.current) is not None

    @property
    def current_section(self) -> Optional[Section]:
        if self.course is None or self.current is None:
            return None
        if isinstance(self.current, (LessonTarget, SectionQuizTarget)):
            return self.course.sections[self.current.section_index]
        return None

    @property
    def current_lesson(self) -> Optional[Lesson]:
        if self.sequencer is None or not isinstance(self.current, LessonTarget):
            return None
        resolved = self.sequencer.resolve_lesson(self.current)
        return resolved[1] if resolved else None

    def navigation_tree(self, query: str = "") -> list[NavigationSection]:
        """Sidebar tree for the current enrollment, optionally filtered."""
        if self.sequencer is None:
            return []
        tree = self.sequencer.get_navigation_tree(self.progress, self.current)
        return filter_tree(tree, query)

    # -------------------------------------------------------------------------
    # Lesson completion
    # -------------------------------------------------------------------------

    def _minutes_on_lesson(self) -> int:
        if self._lesson_started_at is None:
            return 0
        elapsed = self._clock() - self._lesson_started_at
        return max(0, int(elapsed.total_seconds() // 60))

    def complete_current_lesson(self, advance: bool = True) -> bool:
        """
        Mark the open lesson done.

        On success the server's enrollment replaces the local one and, if
        `advance`, the learner moves on. Returns True on success.
        """
        if self.view_mode != ViewMode.LESSON or not isinstance(self.current, LessonTarget):
            return False
        resolved = self.sequencer.resolve_lesson(self.current)
        if resolved is None:
            return False
        section, lesson = resolved

        view_token = self._generations.current(VIEW)
        enrollment_token = self._generations.advance(ENROLLMENT)
        try:
            enrollment = self.completion.complete_lesson(
                self.course.id, section.id, lesson.id, self._minutes_on_lesson()
            )
        except ActionInFlight:
            return False
        except AccountSuspended as e:
            self._force_logout(str(e))
            return False
        except AuthRequired as e:
            self.notify("error", str(e))
            return False
        except CoursePlayerError as e:
            self.notify("error", str(e) or "Failed to complete lesson. Please try again.")
            return False

        if self._generations.is_current(enrollment_token):
            self._set_enrollment(enrollment)
        else:
            logger.debug("Discarding stale enrollment from lesson completion")

        if not self._generations.is_current(view_token):
            logger.debug("View changed during lesson completion; not advancing")
            return True

        self.notify("success", "Lesson completed successfully!")
        if advance:
            self.next()
        return True

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    def _quiz_for(self, target: NavigationTarget):
        if isinstance(target, SectionQuizTarget):
            return self.course.sections[target.section_index].section_quiz
        if isinstance(target, FinalQuizTarget):
            return self.course.final_quiz
        return None

    def _open_quiz(self, target: NavigationTarget):
        quiz = self._quiz_for(target)
        view_token = self._generations.current(VIEW)
        flow = QuizAttemptFlow(self.api)
        self.quiz_flow = flow
        self.view_mode = ViewMode.QUIZ
        try:
            flow.load_quiz(quiz.id if quiz else None)
        except AccountSuspended as e:
            self._force_logout(str(e))
            return
        except QuizUnavailable as e:
            if self._generations.is_current(view_token):
                self.error = str(e)
                self.view_mode = ViewMode.QUIZ_UNAVAILABLE
            return
        if not self._generations.is_current(view_token):
            logger.debug("Discarding stale quiz load")

    def answer(self, question_id: str, answer: str):
        if self.quiz_flow is not None:
            self.quiz_flow.answer(question_id, answer)

    def submit_quiz(self) -> bool:
        """Submit the open quiz. Returns True when a verdict came back."""
        flow = self.quiz_flow
        if flow is None or self.view_mode != ViewMode.QUIZ:
            return False
        section_id = self.current_section.id if isinstance(self.current, SectionQuizTarget) else None

        view_token = self._generations.current(VIEW)
        try:
            flow.submit(self.course.id, section_id)
        except SubmissionValidationError as e:
            self.notify("warning", str(e))
            return False
        except AccountSuspended as e:
            self._force_logout(str(e))
            return False
        except InvalidTransition:
            return False
        except CoursePlayerError as e:
            self.notify("error", str(e) or "Failed to submit quiz. Please try again.")
            return False

        if not self._generations.is_current(view_token):
            logger.debug("Discarding stale quiz result")
            return False
        return True

    def retake_quiz(self) -> bool:
        if self.quiz_flow is None:
            return False
        try:
            self.quiz_flow.retake()
        except InvalidTransition:
            return False
        return True

    def continue_after_quiz(self) -> bool:
        """After a pass: refresh the enrollment, then advance."""
        flow = self.quiz_flow
        if flow is None:
            return False
        try:
            flow.continue_()
        except InvalidTransition:
            return False

        view_token = self._generations.current(VIEW)
        self.refresh_enrollment()
        if not self._generations.is_current(view_token) or self.view_mode == ViewMode.SIGNED_OUT:
            return False
        return self.next()

    def refresh_enrollment(self) -> bool:
        """Re-read the enrollment from the server."""
        if self.course_id is None:
            return False
        token = self._generations.advance(ENROLLMENT)
        try:
            enrollment = self.api.get_enrollment(self.course_id)
        except AccountSuspended as e:
            self._force_logout(str(e))
            return False
        except CoursePlayerError as e:
            logger.warning(f"Error reloading enrollment: {e}")
            return False
        if not self._generations.is_current(token):
            logger.debug("Discarding stale enrollment refresh")
            return False
        self._set_enrollment(enrollment)
        return True

    # -------------------------------------------------------------------------
    # Completion and certificate
    # -------------------------------------------------------------------------

    def complete_course(self) -> bool:
        """End of the sequence: open the certificate or explain why not."""
        if is_certificate_reachable(self.enrollment):
            return self.show_certificate()
        self.notify("success", PENDING_APPROVAL_NOTICE)
        return False

    def show_certificate(self) -> bool:
        """Open the certificate view (only once a certificate is issued)."""
        if self.course is None or not is_certificate_reachable(self.enrollment):
            self.notify("info", PENDING_APPROVAL_NOTICE)
            return False

        view_token = self._generations.advance(VIEW)
        self.view_mode = ViewMode.CERTIFICATE
        self.current = CourseComplete()
        self.quiz_flow = None
        self.certificate_view = None
        view = self.certificate_gate.load(self.course, self.enrollment)
        if self._generations.is_current(view_token):
            self.certificate_view = view
        return True

    # -------------------------------------------------------------------------
    # Assistant panel
    # -------------------------------------------------------------------------

    def assistant_context(self) -> Optional[AssistantContext]:
        if self.course is None:
            return None
        section = self.current_section
        lesson = self.current_lesson
        return AssistantContext(
            title=section.title if section else self.course.title,
            context_id=section.id if section else self.course.id,
            content_scope=lesson.content if lesson else None,
            disabled=self.view_mode == ViewMode.QUIZ,
        )

"""
Course Player Classroom - Runtime components for progressing through a course.

This module provides:
- CourseAPI: REST client for courses, enrollment, quizzes, certificates
- EnrollmentProgress: Normalized view of a learner's enrollment
- Unlock rules and NavigationSequencer: what may be opened, and in which order
- LessonCompletionFlow / QuizAttemptFlow / CertificateGate
- CoursePlayerController: Orchestrates one course-viewing session
- PanelLayout: Side panel widths, independent of progression state
"""

from .errors import (
    CoursePlayerError,
    AuthRequired,
    NetworkOrServerError,
    AccountSuspended,
    SubmissionValidationError,
    QuizUnavailable,
    InvalidTransition,
    ActionInFlight,
)

from .session import AuthSession

from .api import CourseAPI, CourseResponse

from .progress import EnrollmentProgress

from .unlock import (
    LessonTarget,
    SectionQuizTarget,
    FinalQuizTarget,
    UnlockTarget,
    LessonAvailability,
    is_section_cleared,
    is_unlocked,
    lesson_availability,
    quiz_availability,
)

from .navigator import (
    CourseComplete,
    NavigationTarget,
    NavigationLesson,
    NavigationQuiz,
    NavigationSection,
    NavigationSequencer,
    filter_tree,
    get_status_indicator,
)

from .generation import RequestGenerations, RequestToken

from .completion import CompletionState, LessonCompletionFlow

from .quiz_flow import QuizState, QuizAttemptFlow

from .certificate import (
    CertificateState,
    CertificateView,
    CertificateGate,
    is_certificate_reachable,
    PENDING_APPROVAL_NOTICE,
)

from .layout import PanelLayout, PanelState, clamp_width

from .controller import (
    ViewMode,
    Notice,
    AssistantContext,
    CoursePlayerController,
)

__all__ = [
    # Errors
    "CoursePlayerError",
    "AuthRequired",
    "NetworkOrServerError",
    "AccountSuspended",
    "SubmissionValidationError",
    "QuizUnavailable",
    "InvalidTransition",
    "ActionInFlight",
    # Session / API
    "AuthSession",
    "CourseAPI",
    "CourseResponse",
    # Progress
    "EnrollmentProgress",
    # Unlock
    "LessonTarget",
    "SectionQuizTarget",
    "FinalQuizTarget",
    "UnlockTarget",
    "LessonAvailability",
    "is_section_cleared",
    "is_unlocked",
    "lesson_availability",
    "quiz_availability",
    # Navigator
    "CourseComplete",
    "NavigationTarget",
    "NavigationLesson",
    "NavigationQuiz",
    "NavigationSection",
    "NavigationSequencer",
    "filter_tree",
    "get_status_indicator",
    # Flows
    "RequestGenerations",
    "RequestToken",
    "CompletionState",
    "LessonCompletionFlow",
    "QuizState",
    "QuizAttemptFlow",
    "CertificateState",
    "CertificateView",
    "CertificateGate",
    "is_certificate_reachable",
    "PENDING_APPROVAL_NOTICE",
    # Layout
    "PanelLayout",
    "PanelState",
    "clamp_width",
    # Controller
    "ViewMode",
    "Notice",
    "AssistantContext",
    "CoursePlayerController",
]

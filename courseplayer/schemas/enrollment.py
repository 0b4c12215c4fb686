"""
Enrollment schemas for the course player.

Defines Pydantic models for a learner's server-side state including:
- Per-section lesson completion and section quiz scores
- Final quiz score and certificate reference
- Quiz submission results
- Certificate detail
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, Field

from .course import APIModel


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"
    ON_HOLD = "on-hold"


class QuizScore(APIModel):
    quiz_id: Optional[str] = None
    score: float = 0
    max_score: Optional[float] = None
    passed: bool = False
    attempt_count: int = 0
    last_attempt_at: Optional[datetime] = None


class LessonProgress(APIModel):
    lesson_id: str = Field(validation_alias=AliasChoices("lesson", "lessonId", "lesson_id"))
    is_completed: bool = False
    completed_at: Optional[datetime] = None


class SectionProgress(APIModel):
    section_id: str = Field(validation_alias=AliasChoices("section", "sectionId", "section_id"))
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    lessons: list[LessonProgress] = []
    section_quiz_score: Optional[QuizScore] = None


class CertificateRef(APIModel):
    """Certificate embedded in an enrollment instead of a bare id."""
    id: str = Field(alias="_id")
    status: Optional[str] = None


# Either a plain id string or an embedded object
CertificateReference = Union[str, CertificateRef]


def certificate_id_of(reference: Optional[CertificateReference]) -> Optional[str]:
    """Resolve a certificate reference to its id."""
    if reference is None:
        return None
    if isinstance(reference, CertificateRef):
        return reference.id
    return reference


class Enrollment(APIModel):
    id: Optional[str] = Field(None, alias="_id")
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    overall_progress: float = 0
    section_progress: list[SectionProgress] = []
    final_quiz_score: Optional[QuizScore] = None
    certificate_issued: bool = False
    certificate: Optional[CertificateReference] = None
    enrollment_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None

    @property
    def certificate_id(self) -> Optional[str]:
        return certificate_id_of(self.certificate)


# -----------------------------------------------------------------------------
# Quiz submission
# -----------------------------------------------------------------------------

class QuestionResult(APIModel):
    question_id: Optional[str] = None
    question: str = ""
    user_answer: str = ""
    is_correct: bool = False
    explanation: Optional[str] = None
    points: int = 0


class QuizResult(APIModel):
    """Server verdict for one quiz attempt. Never recomputed client-side."""
    enrollment_id: Optional[str] = None
    score: float
    max_score: Optional[float] = None
    passed: bool
    attempt_count: int = 1
    results: list[QuestionResult] = []
    certificate: Optional[CertificateReference] = None


# -----------------------------------------------------------------------------
# Certificate detail
# -----------------------------------------------------------------------------

class Certificate(APIModel):
    id: str = Field(alias="_id")
    status: str = Field(
        "pending",  # pending, approved or rejected
        validation_alias=AliasChoices("approvalStatus", "approval_status", "status"),
    )
    student_name: Optional[str] = None
    issued_date: Optional[datetime] = None
    certificate_number: Optional[str] = Field(
        None, validation_alias=AliasChoices("certificateId", "certificate_number")
    )
    pdf_url: Optional[str] = None
    shareable_url: Optional[str] = None

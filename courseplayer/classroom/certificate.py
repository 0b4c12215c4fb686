"""
CertificateGate - Certificate reachability and approval state.

The certificate view is reachable only once the enrollment reports
`certificateIssued`. The detail fetch then decides between pending, approved
and rejected; a failed fetch gives an explicit UNAVAILABLE state.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from courseplayer.schemas import Certificate, Course, Enrollment, EnrollmentStatus

from .api import CourseAPI
from .errors import CoursePlayerError


logger = logging.getLogger(__name__)

PENDING_APPROVAL_NOTICE = "Course completed! Your certificate will be issued after admin approval."


class CertificateState(str, Enum):
    NOT_ISSUED = "not_issued"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    UNAVAILABLE = "unavailable"


BANNERS = {
    CertificateState.NOT_ISSUED: (
        "Certificate Pending",
        "Your certificate is being generated. Please wait for admin approval.",
    ),
    CertificateState.PENDING: (
        "Certificate Pending Approval",
        "Your certificate is awaiting admin approval.",
    ),
    CertificateState.APPROVED: (
        "Certificate Issued!",
        "Congratulations! Your certificate has been approved and is ready for download.",
    ),
    CertificateState.REJECTED: (
        "Certificate Not Approved",
        "Your certificate request was not approved. Please contact support for more information.",
    ),
    CertificateState.UNAVAILABLE: (
        "Certificate Unavailable",
        "We could not load your certificate. Please try again later.",
    ),
}


@dataclass
class CertificateView:
    """Everything the certificate page needs to render."""
    state: CertificateState
    title: str
    message: str
    certificate: Optional[Certificate] = None
    summary: dict = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def can_print(self) -> bool:
        return self.state == CertificateState.APPROVED and bool(self.certificate and self.certificate.pdf_url)

    @property
    def can_share(self) -> bool:
        return self.state == CertificateState.APPROVED and bool(self.certificate and self.certificate.shareable_url)

    @property
    def show_preview(self) -> bool:
        return self.state == CertificateState.APPROVED


def is_certificate_reachable(enrollment: Optional[Enrollment]) -> bool:
    """Certificate view may be opened only once the server has issued one."""
    return bool(enrollment and enrollment.certificate_issued)


def state_for(enrollment: Enrollment, certificate: Optional[Certificate]) -> CertificateState:
    """Approval state from the enrollment flag and the certificate detail."""
    if not enrollment.certificate_issued:
        return CertificateState.NOT_ISSUED
    if certificate is None:
        return CertificateState.PENDING
    if certificate.status == "approved":
        return CertificateState.APPROVED
    if certificate.status == "rejected":
        return CertificateState.REJECTED
    return CertificateState.PENDING


def completion_summary(course: Course, enrollment: Enrollment) -> dict:
    """Course completion summary shown under the banner."""
    if enrollment.completion_date:
        completed_on = enrollment.completion_date.date().isoformat()
    elif enrollment.status == EnrollmentStatus.COMPLETED:
        completed_on = datetime.now().date().isoformat()
    else:
        completed_on = "In Progress"

    if enrollment.final_quiz_score is not None:
        final_score = f"{enrollment.final_quiz_score.score:g}%"
    elif enrollment.status == EnrollmentStatus.COMPLETED:
        final_score = "100%"
    else:
        final_score = "Not Taken"

    return {
        "course_title": course.title,
        "instructor": course.instructor.name if course.instructor and course.instructor.name else "Unknown Instructor",
        "completion_date": completed_on,
        "overall_progress": enrollment.overall_progress,
        "final_score": final_score,
        "template": course.certificate_template,
    }


class CertificateGate:
    """Builds the certificate view for an enrollment."""

    def __init__(self, api: CourseAPI):
        self.api = api

    def load(self, course: Course, enrollment: Enrollment) -> CertificateView:
        """
        Fetch certificate detail (when there is one) and build the view.

        Fetch failures produce an UNAVAILABLE view rather than raising.
        """
        summary = completion_summary(course, enrollment)
        certificate = None
        certificate_id = enrollment.certificate_id

        if enrollment.certificate_issued and certificate_id:
            try:
                certificate = self.api.get_certificate(certificate_id)
            except CoursePlayerError as e:
                logger.warning(f"Could not load certificate {certificate_id}: {e}")
                title, message = BANNERS[CertificateState.UNAVAILABLE]
                return CertificateView(
                    state=CertificateState.UNAVAILABLE,
                    title=title,
                    message=message,
                    summary=summary,
                    error=str(e),
                )

        state = state_for(enrollment, certificate)
        title, message = BANNERS[state]
        return CertificateView(
            state=state,
            title=title,
            message=message,
            certificate=certificate,
            summary=summary,
        )

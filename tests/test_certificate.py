"""
Tests for CertificateGate.
"""

from courseplayer.classroom import (
    CertificateGate,
    CertificateState,
    NetworkOrServerError,
    is_certificate_reachable,
)
from courseplayer.classroom.certificate import completion_summary, state_for

from conftest import make_course, make_enrollment


APPROVED = {
    "_id": "cert-1",
    "approvalStatus": "approved",
    "studentName": "Grace",
    "certificateId": "CERT-001",
    "pdfUrl": "https://example.test/cert.pdf",
    "shareableUrl": "https://example.test/share/cert-1",
}


def issued_enrollment(**extra):
    return make_enrollment(certificateIssued=True, certificate="cert-1", overallProgress=100, **extra)


class TestReachability:
    """When the certificate view may be opened."""

    def test_not_reachable_until_issued(self):
        assert not is_certificate_reachable(None)
        assert not is_certificate_reachable(make_enrollment(overallProgress=100))
        assert is_certificate_reachable(issued_enrollment())

    def test_state_without_issue(self):
        assert state_for(make_enrollment(), None) == CertificateState.NOT_ISSUED


class TestCertificateGate:
    """Certificate view construction."""

    def test_approved(self, api):
        api.certificate = APPROVED
        view = CertificateGate(api).load(make_course([(1, False)]), issued_enrollment())

        assert view.state == CertificateState.APPROVED
        assert view.title == "Certificate Issued!"
        assert view.can_print and view.can_share and view.show_preview
        assert api.called("get_certificate") == [("get_certificate", "cert-1")]

    def test_pending(self, api):
        api.certificate = {"_id": "cert-1", "approvalStatus": "pending"}
        view = CertificateGate(api).load(make_course([(1, False)]), issued_enrollment())
        assert view.state == CertificateState.PENDING
        assert not view.can_print
        assert not view.show_preview

    def test_rejected(self, api):
        api.certificate = {"_id": "cert-1", "approvalStatus": "rejected"}
        view = CertificateGate(api).load(make_course([(1, False)]), issued_enrollment())
        assert view.state == CertificateState.REJECTED
        assert "contact support" in view.message

    def test_approved_without_pdf_cannot_print(self, api):
        api.certificate = {"_id": "cert-1", "approvalStatus": "approved"}
        view = CertificateGate(api).load(make_course([(1, False)]), issued_enrollment())
        assert view.state == CertificateState.APPROVED
        assert not view.can_print

    def test_fetch_failure_is_unavailable(self, api):
        api.certificate = NetworkOrServerError("Forbidden", status=403)
        view = CertificateGate(api).load(make_course([(1, False)]), issued_enrollment())
        assert view.state == CertificateState.UNAVAILABLE
        assert view.error == "Forbidden"
        assert view.summary["course_title"] == "Python Basics"

    def test_issued_without_reference_is_pending(self, api):
        enrollment = make_enrollment(certificateIssued=True)
        view = CertificateGate(api).load(make_course([(1, False)]), enrollment)
        assert view.state == CertificateState.PENDING
        assert api.calls == []

    def test_embedded_reference(self, api):
        api.certificate = APPROVED
        enrollment = make_enrollment(certificateIssued=True, certificate={"_id": "cert-1"})
        CertificateGate(api).load(make_course([(1, False)]), enrollment)
        assert api.called("get_certificate") == [("get_certificate", "cert-1")]


class TestCompletionSummary:
    """Summary block under the banner."""

    def test_summary_fields(self):
        course = make_course([(1, False)])
        enrollment = issued_enrollment(final_passed=True, completionDate="2024-05-01T10:00:00Z")
        summary = completion_summary(course, enrollment)
        assert summary["instructor"] == "Ada"
        assert summary["completion_date"] == "2024-05-01"
        assert summary["final_score"] == "88%"
        assert summary["template"] == "standard"

    def test_in_progress_defaults(self):
        summary = completion_summary(make_course([(1, False)]), make_enrollment())
        assert summary["completion_date"] == "In Progress"
        assert summary["final_score"] == "Not Taken"

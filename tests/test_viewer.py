"""
Tests for the quiz and certificate renderers.
"""

from courseplayer.classroom import CertificateState, CertificateView
from courseplayer.schemas import Certificate, Question, Quiz
from courseplayer.viewer import (
    TRUE_FALSE_OPTIONS,
    format_score,
    question_options,
    render_all_feedback,
    render_certificate_banner,
    render_certificate_preview,
    render_completion_summary,
    render_quiz_header,
    render_quiz_result,
)

from conftest import make_quiz_data, make_result


class TestQuizRendering:
    """Quiz header, options and results."""

    def test_question_options(self):
        mc = Question.model_validate({"_id": "a", "question": "?", "options": [{"text": "X"}, {"text": "Y"}]})
        tf = Question.model_validate({"_id": "b", "question": "?", "type": "true-false"})
        short = Question.model_validate({"_id": "c", "question": "?", "type": "short-answer"})
        assert question_options(mc) == ["X", "Y"]
        assert question_options(tf) == TRUE_FALSE_OPTIONS
        assert question_options(short) == []

    def test_format_score(self):
        assert format_score(80.0) == "80%"
        assert format_score(66.5) == "66.5%"
        assert format_score(None) == "-"

    def test_header(self):
        quiz = Quiz.model_validate(make_quiz_data("q0", timeLimit=15))
        header = render_quiz_header(quiz)
        assert "Quiz q0" in header
        assert "2 questions" in header
        assert "15 min" in header

    def test_result_passed(self):
        quiz = Quiz.model_validate(make_quiz_data("q0"))
        html = render_quiz_result(make_result(passed=True), quiz)
        assert "Congratulations!" in html
        assert "quiz-result passed" in html

    def test_result_failed(self):
        quiz = Quiz.model_validate(make_quiz_data("q0"))
        html = render_quiz_result(make_result(passed=False, attempt_count=2), quiz)
        assert "Keep Learning" in html
        assert "70%" in html

    def test_feedback_escapes(self):
        result = make_result(passed=False)
        result.results[0].user_answer = "<script>"
        html = render_all_feedback(result.results)
        assert "✗ Incorrect" in html
        assert "&lt;script&gt;" in html
        assert render_all_feedback([]) == ""


def approved_view(**cert):
    certificate = Certificate.model_validate({"_id": "c", "approvalStatus": "approved", "studentName": "Grace", **cert})
    return CertificateView(
        state=CertificateState.APPROVED,
        title="Certificate Issued!",
        message="Ready",
        certificate=certificate,
        summary={"course_title": "Python Basics", "instructor": "Ada", "overall_progress": 100},
    )


class TestCertificateRendering:
    """Certificate banner, summary and preview."""

    def test_banner(self):
        html = render_certificate_banner(approved_view())
        assert "Certificate Issued!" in html

    def test_summary(self):
        html = render_completion_summary(approved_view())
        assert "Python Basics" in html
        assert "100%" in html
        assert "Final score" not in html

    def test_preview_only_when_approved(self):
        assert "Grace" in render_certificate_preview(approved_view())
        pending = CertificateView(state=CertificateState.PENDING, title="t", message="m")
        assert render_certificate_preview(pending) == ""

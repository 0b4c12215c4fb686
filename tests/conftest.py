"""
Shared fixtures: course/enrollment builders and an in-memory API.
"""

import pytest

from courseplayer.classroom import AuthSession, CourseResponse, NetworkOrServerError
from courseplayer.schemas import Certificate, Course, Enrollment, QuizResult, parse_quiz_payload


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------

def make_course(layout, final_quiz=False, course_id="c1"):
    """
    Build a Course from a compact layout.

    `layout` is a list of (lesson_count, has_quiz) tuples; ids are s{i},
    s{i}l{j} and q{i}. The final quiz id is "fq".
    """
    sections = []
    for s_idx, (lesson_count, has_quiz) in enumerate(layout):
        section = {
            "_id": f"s{s_idx}",
            "title": f"Section {s_idx}",
            "order": s_idx,
            "lessons": [
                {"_id": f"s{s_idx}l{l_idx}", "title": f"Lesson {s_idx}.{l_idx}", "order": l_idx, "content": "# Hi"}
                for l_idx in range(lesson_count)
            ],
        }
        if has_quiz:
            section["sectionQuiz"] = {"_id": f"q{s_idx}", "title": f"Quiz {s_idx}", "passingScore": 70}
        sections.append(section)

    data = {
        "_id": course_id,
        "title": "Python Basics",
        "instructor": {"_id": "u9", "name": "Ada"},
        "sections": sections,
    }
    if final_quiz:
        data["finalQuiz"] = {"_id": "fq", "title": "Final", "type": "final-quiz"}
    return Course.model_validate(data)


def make_enrollment(completed=(), passed_quizzes=(), final_passed=False, **extra):
    """
    Build an Enrollment.

    `completed` holds lesson ids like "s0l1"; the section is taken from the
    id prefix. `passed_quizzes` holds section ids.
    """
    by_section = {}
    for lesson_id in completed:
        section_id = lesson_id.split("l")[0]
        by_section.setdefault(section_id, []).append({"lesson": lesson_id, "isCompleted": True})
    for section_id in passed_quizzes:
        by_section.setdefault(section_id, [])

    section_progress = []
    for section_id, lessons in by_section.items():
        entry = {"section": section_id, "lessons": lessons}
        if section_id in passed_quizzes:
            entry["sectionQuizScore"] = {"score": 90, "passed": True, "attemptCount": 1}
        section_progress.append(entry)

    data = {"_id": "e1", "sectionProgress": section_progress, **extra}
    if final_passed:
        data["finalQuizScore"] = {"score": 88, "passed": True, "attemptCount": 1}
    return Enrollment.model_validate(data)


def make_quiz_data(quiz_id="q0", questions=2, **extra):
    return {
        "_id": quiz_id,
        "title": f"Quiz {quiz_id}",
        "passingScore": 70,
        "questions": [
            {
                "_id": f"{quiz_id}-{i}",
                "question": f"Question {i}?",
                "type": "multiple-choice",
                "options": [{"text": "A", "isCorrect": True}, {"text": "B", "isCorrect": False}],
            }
            for i in range(questions)
        ],
        **extra,
    }


def make_result(passed=True, score=None, attempt_count=1):
    return QuizResult.model_validate({
        "enrollmentId": "e1",
        "score": score if score is not None else (100 if passed else 40),
        "passed": passed,
        "attemptCount": attempt_count,
        "results": [{"questionId": "q0-0", "question": "Question 0?", "userAnswer": "A", "isCorrect": passed}],
    })


# -----------------------------------------------------------------------------
# Fake API
# -----------------------------------------------------------------------------

class FakeAPI:
    """
    Stand-in for CourseAPI.

    Each endpoint returns the configured value, raises it if it is an
    exception, or calls it if it is callable. Calls are recorded in `calls`.
    """

    def __init__(self, session=None):
        self.session = session if session is not None else AuthSession(token="token")
        self.calls = []
        self.course = None
        self.course_enrollment = None
        self.enrollment = None
        self.enroll_response = None
        self.lesson_response = None
        self.quizzes = {}
        self.submit_response = None
        self.certificate = None

    def _respond(self, value, *args):
        if isinstance(value, BaseException):
            raise value
        if callable(value):
            return value(*args)
        return value

    def get_course(self, course_id):
        self.calls.append(("get_course", course_id))
        course = self._respond(self.course, course_id)
        return CourseResponse(course=course, enrollment=self.course_enrollment)

    def enroll(self, course_id):
        self.calls.append(("enroll", course_id))
        result = self._respond(self.enroll_response, course_id)
        self.course_enrollment = result
        self.enrollment = result
        return result

    def get_enrollment(self, course_id):
        self.calls.append(("get_enrollment", course_id))
        return self._respond(self.enrollment, course_id)

    def complete_lesson(self, course_id, section_id, lesson_id, time_spent_minutes):
        self.calls.append(("complete_lesson", section_id, lesson_id, time_spent_minutes))
        return self._respond(self.lesson_response, section_id, lesson_id)

    def get_quiz(self, quiz_id):
        self.calls.append(("get_quiz", quiz_id))
        value = self.quizzes.get(quiz_id)
        if isinstance(value, dict):
            return parse_quiz_payload(value)
        if value is None:
            raise NetworkOrServerError("Quiz not found", status=404)
        return self._respond(value, quiz_id)

    def submit_quiz(self, quiz_id, course_id, section_id, answers):
        self.calls.append(("submit_quiz", quiz_id, section_id, dict(answers)))
        return self._respond(self.submit_response, quiz_id, answers)

    def get_certificate(self, certificate_id):
        self.calls.append(("get_certificate", certificate_id))
        if isinstance(self.certificate, dict):
            return Certificate.model_validate(self.certificate)
        return self._respond(self.certificate, certificate_id)

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def api():
    return FakeAPI()


@pytest.fixture
def two_section_course():
    """Two sections of two lessons, each with a quiz, plus a final quiz."""
    return make_course([(2, True), (2, True)], final_quiz=True)

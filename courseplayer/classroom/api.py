"""
CourseAPI - REST client for course, enrollment, quiz and certificate calls.

Provides:
- Course and enrollment fetching
- Enrollment, lesson completion and quiz submission
- Certificate detail lookup
- Auth/suspension handling shared by every call
"""

import json
import logging
from dataclasses import dataclass
from http.client import HTTPException
from typing import Any, Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from pydantic import ValidationError

from courseplayer.schemas import (
    Certificate,
    Course,
    Enrollment,
    Quiz,
    QuizResult,
    parse_quiz_payload,
)

from .errors import AccountSuspended, AuthRequired, NetworkOrServerError
from .session import AuthSession


logger = logging.getLogger(__name__)

USER_AGENT = "CoursePlayer/1.0"
TOKEN_ERROR_HINTS = ("token", "expired", "invalid")


@dataclass
class CourseResponse:
    """Result of GET /courses/:id."""
    course: Course
    enrollment: Optional[Enrollment]


class CourseAPI:
    """
    Thin JSON client over urllib.

    Every call either returns parsed models or raises a CoursePlayerError;
    nothing is retried here.
    """

    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        timeout: float = 30.0,
        opener: Callable[..., Any] = urlopen,
    ):
        """
        Args:
            base_url: API root, e.g. http://localhost:5000/api
            session: Auth session supplying the bearer token
            timeout: Socket timeout in seconds
            opener: urlopen-compatible callable (swapped out in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._open = opener

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, path: str, body: Optional[dict] = None, auth: bool = True) -> dict:
        if auth and not self.session.is_authenticated:
            raise AuthRequired()

        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        data = json.dumps(body).encode("utf-8") if body is not None else None

        request = Request(url, data=data, headers=headers, method=method)
        logger.debug(f"{method} {url}")
        try:
            with self._open(request, timeout=self.timeout) as response:
                raw = response.read()
        except HTTPError as e:
            self._raise_for_http_error(e, path)
        except URLError as e:
            logger.warning(f"{method} {url} failed: {e.reason}")
            raise NetworkOrServerError(f"Network error: {e.reason}") from e
        except (OSError, HTTPException) as e:
            # timeouts, resets and dropped connections surface outside URLError
            logger.warning(f"{method} {url} failed: {e!r}")
            raise NetworkOrServerError(f"Network error: {e or type(e).__name__}") from e

        try:
            payload = json.loads(raw.decode("utf-8")) if raw else {}
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise NetworkOrServerError(f"Malformed response from {path}") from e
        if not isinstance(payload, dict):
            raise NetworkOrServerError(f"Malformed response from {path}")
        return payload

    def _raise_for_http_error(self, error: HTTPError, path: str):
        try:
            payload = json.loads(error.read().decode("utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError):
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        message = payload.get("message") or payload.get("error") or f"HTTP error! status: {error.code}"

        if error.code == 403 and (payload.get("isSuspended") or payload.get("accountStatus") == "suspended"):
            logger.warning("Account suspended; clearing session")
            self.session.clear()
            raise AccountSuspended(payload.get("message") or "Your account has been suspended.") from error

        if error.code == 401 and not payload.get("needsEmailVerification"):
            lowered = message.lower()
            # admin endpoints handle their own auth
            if "/admin/" not in path and any(hint in lowered for hint in TOKEN_ERROR_HINTS):
                self.session.clear()
            raise AuthRequired(message) from error

        logger.warning(f"{path} returned {error.code}: {message}")
        raise NetworkOrServerError(message, status=error.code) from error

    @staticmethod
    def _parse(model, data: Any, what: str):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise NetworkOrServerError(f"Unexpected {what} payload: {e.error_count()} errors") from e

    # -------------------------------------------------------------------------
    # Courses and enrollment
    # -------------------------------------------------------------------------

    def get_course(self, course_id: str) -> CourseResponse:
        """GET /courses/:id (token sent when present; enrollment only then)."""
        payload = self._request("GET", f"/courses/{quote(course_id)}", auth=False)
        course = self._parse(Course, payload.get("data"), "course")
        enrollment = payload.get("enrollment")
        return CourseResponse(
            course=course,
            enrollment=self._parse(Enrollment, enrollment, "enrollment") if enrollment else None,
        )

    def enroll(self, course_id: str) -> Optional[Enrollment]:
        """POST /courses/enroll."""
        payload = self._request("POST", "/courses/enroll", {"courseId": course_id})
        enrollment = payload.get("enrollment")
        return self._parse(Enrollment, enrollment, "enrollment") if enrollment else None

    def get_enrollment(self, course_id: str) -> Enrollment:
        """GET /courses/:id/enrollment."""
        payload = self._request("GET", f"/courses/{quote(course_id)}/enrollment")
        return self._parse(Enrollment, payload.get("data"), "enrollment")

    def complete_lesson(
        self,
        course_id: str,
        section_id: str,
        lesson_id: str,
        time_spent_minutes: int,
    ) -> Enrollment:
        """PUT /courses/:id/progress/lesson, returning the full updated enrollment."""
        payload = self._request(
            "PUT",
            f"/courses/{quote(course_id)}/progress/lesson",
            {
                "courseId": course_id,
                "sectionId": section_id,
                "lessonId": lesson_id,
                "timeSpentMinutes": time_spent_minutes,
            },
        )
        return self._parse(Enrollment, payload.get("data"), "enrollment")

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    def get_quiz(self, quiz_id: str) -> Quiz:
        """GET /courses/quizzes/:quizId (wrapped or bare quiz)."""
        payload = self._request("GET", f"/courses/quizzes/{quote(quiz_id)}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise NetworkOrServerError("Quiz response had no data")
        try:
            return parse_quiz_payload(data)
        except ValidationError as e:
            raise NetworkOrServerError(f"Unexpected quiz payload: {e.error_count()} errors") from e

    def submit_quiz(
        self,
        quiz_id: str,
        course_id: str,
        section_id: Optional[str],
        answers: dict[str, str],
    ) -> QuizResult:
        """POST /courses/quizzes/:quizId/submit."""
        payload = self._request(
            "POST",
            f"/courses/quizzes/{quote(quiz_id)}/submit",
            {"quizId": quiz_id, "courseId": course_id, "sectionId": section_id, "answers": answers},
        )
        return self._parse(QuizResult, payload.get("data"), "quiz result")

    # -------------------------------------------------------------------------
    # Certificates
    # -------------------------------------------------------------------------

    def get_certificate(self, certificate_id: str) -> Certificate:
        """GET /admin/courses/certificates/:id."""
        payload = self._request("GET", f"/admin/courses/certificates/{quote(certificate_id)}")
        return self._parse(Certificate, payload.get("data"), "certificate")

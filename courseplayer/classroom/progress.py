"""
EnrollmentProgress - Normalized, read-only view of a learner's enrollment.

Answers the questions the unlock and navigation rules ask:
- Lesson completion status
- Section quiz results
- Final quiz result
- Overall and per-section progress
"""

from typing import Optional

from courseplayer.schemas import Course, Enrollment, QuizScore, Section, SectionProgress


class EnrollmentProgress:
    """
    Index over one Enrollment.

    The enrollment is never modified here. After any server round trip the
    controller builds a new EnrollmentProgress from the returned enrollment.
    """

    def __init__(self, enrollment: Enrollment):
        """
        Initialize progress view.

        Args:
            enrollment: Enrollment as returned by the server
        """
        self.enrollment = enrollment
        self._sections: dict[str, SectionProgress] = {
            sp.section_id: sp for sp in enrollment.section_progress
        }
        self._completed: dict[str, set[str]] = {
            sp.section_id: {lp.lesson_id for lp in sp.lessons if lp.is_completed}
            for sp in enrollment.section_progress
        }

    # -------------------------------------------------------------------------
    # Lessons
    # -------------------------------------------------------------------------

    def is_lesson_completed(self, section_id: str, lesson_id: str) -> bool:
        """Check if a lesson is completed."""
        return lesson_id in self._completed.get(section_id, ())

    def completed_lesson_ids(self, section_id: Optional[str] = None) -> set[str]:
        """Completed lesson IDs in one section, or across the course."""
        if section_id is not None:
            return set(self._completed.get(section_id, ()))
        result = set()
        for ids in self._completed.values():
            result |= ids
        return result

    def section_completion(self, section: Section) -> tuple[int, int]:
        """(completed, total) lessons of a section."""
        done = self._completed.get(section.id, set())
        completed = sum(1 for lesson in section.lessons if lesson.id in done)
        return completed, len(section.lessons)

    def is_section_complete(self, section: Section) -> bool:
        """All lessons of the section completed (true for an empty section)."""
        completed, total = self.section_completion(section)
        return completed == total

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    def section_quiz_score(self, section_id: str) -> Optional[QuizScore]:
        sp = self._sections.get(section_id)
        return sp.section_quiz_score if sp else None

    def is_section_quiz_passed(self, section_id: str) -> bool:
        score = self.section_quiz_score(section_id)
        return bool(score and score.passed)

    @property
    def final_quiz_score(self) -> Optional[QuizScore]:
        return self.enrollment.final_quiz_score

    def is_final_quiz_passed(self) -> bool:
        score = self.enrollment.final_quiz_score
        return bool(score and score.passed)

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    @property
    def overall_progress(self) -> float:
        """Server-computed percentage, clamped to 0-100."""
        return max(0.0, min(100.0, float(self.enrollment.overall_progress)))

    @property
    def certificate_issued(self) -> bool:
        return self.enrollment.certificate_issued

    def computed_progress(self, course: Course) -> float:
        """Share of course lessons completed, for sidebar display only."""
        total = course.total_lessons
        if total == 0:
            return 0.0
        completed = sum(self.section_completion(section)[0] for section in course.sections)
        return round(completed / total * 100, 1)

    def get_completion_stats(self, course: Course) -> dict:
        """
        Get completion statistics.

        Args:
            course: Course the enrollment belongs to

        Returns:
            Dictionary with completion stats
        """
        completed = sum(self.section_completion(section)[0] for section in course.sections)
        quizzes = [s for s in course.sections if s.section_quiz is not None]
        quizzes_passed = sum(1 for s in quizzes if self.is_section_quiz_passed(s.id))

        return {
            "total_lessons": course.total_lessons,
            "completed": completed,
            "not_started": course.total_lessons - completed,
            "section_quizzes": len(quizzes),
            "section_quizzes_passed": quizzes_passed,
            "final_quiz_passed": self.is_final_quiz_passed(),
            "completion_percent": self.overall_progress,
            "lesson_percent": self.computed_progress(course),
        }

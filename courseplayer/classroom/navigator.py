"""
Navigator - Course sequencing and the sidebar curriculum tree.

Provides:
- Next/previous targets across lessons, section quizzes and the final quiz
- Course position for the "Lesson n of N" indicator
- Curriculum tree with availability and status indicators
- Sidebar filtering
"""

from dataclasses import dataclass
from typing import Optional, Union

from courseplayer.schemas import Course, Lesson, Section

from .progress import EnrollmentProgress
from .unlock import (
    FinalQuizTarget,
    LessonAvailability,
    LessonTarget,
    SectionQuizTarget,
    lesson_availability,
    quiz_availability,
)


@dataclass(frozen=True)
class CourseComplete:
    """End of the sequence; the certificate check takes over."""
    pass


NavigationTarget = Union[LessonTarget, SectionQuizTarget, FinalQuizTarget, CourseComplete]


@dataclass
class NavigationLesson:
    """Lesson with navigation metadata."""
    lesson: Lesson
    target: LessonTarget
    availability: LessonAvailability
    is_current: bool


@dataclass
class NavigationQuiz:
    """Section quiz entry in the tree."""
    target: SectionQuizTarget
    title: str
    availability: LessonAvailability
    is_current: bool


@dataclass
class NavigationSection:
    """Section with lessons and navigation metadata."""
    section: Section
    index: int
    lessons: list[NavigationLesson]
    quiz: Optional[NavigationQuiz]
    completed_count: int
    total_count: int


class NavigationSequencer:
    """
    Structural ordering of a course.

    The sequencer does not check unlock state; callers decide whether to
    honor a target.
    """

    def __init__(self, course: Course):
        """
        Initialize sequencer.

        Args:
            course: Course whose sections are already in traversal order
        """
        self.course = course
        self._sequence: list[NavigationTarget] = []
        self._lessons: list[LessonTarget] = []
        self._refresh_sequence()

    def _refresh_sequence(self):
        """Build the flattened traversal order."""
        sequence: list[NavigationTarget] = []
        for s_idx, section in enumerate(self.course.sections):
            for l_idx in range(len(section.lessons)):
                sequence.append(LessonTarget(s_idx, l_idx))
            if section.section_quiz is not None:
                sequence.append(SectionQuizTarget(s_idx))
        if self.course.final_quiz is not None:
            sequence.append(FinalQuizTarget())
        self._sequence = sequence
        self._lessons = [t for t in sequence if isinstance(t, LessonTarget)]

    @property
    def sequence(self) -> list[NavigationTarget]:
        return list(self._sequence)

    @property
    def total_lessons(self) -> int:
        return len(self._lessons)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def first(self) -> Optional[NavigationTarget]:
        """First item of the course, or None for an empty course."""
        return self._sequence[0] if self._sequence else None

    def next(self, current: NavigationTarget) -> Optional[NavigationTarget]:
        """
        Target after `current`.

        Returns CourseComplete after the last item, None if `current` is not
        part of this course.
        """
        if isinstance(current, CourseComplete):
            return CourseComplete()
        try:
            idx = self._sequence.index(current)
        except ValueError:
            return None
        if idx + 1 >= len(self._sequence):
            return CourseComplete()
        return self._sequence[idx + 1]

    def previous(self, current: NavigationTarget) -> Optional[LessonTarget]:
        """
        Lesson before `current`.

        From a quiz this is always the last lesson of that quiz's section (the
        last lesson of the course for the final quiz), whichever way the
        learner arrived. From a lesson it is the previous lesson, skipping
        quizzes. None at the start of the course.
        """
        if isinstance(current, SectionQuizTarget):
            return self._last_lesson_at_or_before(current.section_index)
        if isinstance(current, (FinalQuizTarget, CourseComplete)):
            return self._lessons[-1] if self._lessons else None
        try:
            idx = self._lessons.index(current)
        except ValueError:
            return None
        if idx == 0:
            return None
        return self._lessons[idx - 1]

    def _last_lesson_at_or_before(self, section_index: int) -> Optional[LessonTarget]:
        for s_idx in range(min(section_index, len(self.course.sections) - 1), -1, -1):
            lessons = self.course.sections[s_idx].lessons
            if lessons:
                return LessonTarget(s_idx, len(lessons) - 1)
        return None

    def get_lesson_position(self, target: LessonTarget) -> tuple[int, int]:
        """
        Get lesson position as (current, total).

        Returns (0, total) if lesson not found.
        """
        try:
            return (self._lessons.index(target) + 1, len(self._lessons))
        except ValueError:
            return (0, len(self._lessons))

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve_lesson(self, target: LessonTarget) -> Optional[tuple[Section, Lesson]]:
        """Section and lesson objects for a lesson target."""
        sections = self.course.sections
        if not 0 <= target.section_index < len(sections):
            return None
        section = sections[target.section_index]
        if not 0 <= target.lesson_index < len(section.lessons):
            return None
        return section, section.lessons[target.lesson_index]

    def find_lesson(self, lesson_id: str) -> Optional[LessonTarget]:
        """Target for a lesson id."""
        for s_idx, section in enumerate(self.course.sections):
            l_idx = section.lesson_index(lesson_id)
            if l_idx is not None:
                return LessonTarget(s_idx, l_idx)
        return None

    # -------------------------------------------------------------------------
    # Curriculum Tree
    # -------------------------------------------------------------------------

    def get_navigation_tree(
        self,
        progress: Optional[EnrollmentProgress],
        current: Optional[NavigationTarget] = None,
    ) -> list[NavigationSection]:
        """
        Get full curriculum tree with navigation metadata.

        Each lesson and quiz is annotated with its availability and whether
        it is the current view.
        """
        tree = []
        for s_idx, section in enumerate(self.course.sections):
            nav_lessons = []
            completed_count = 0
            for l_idx, lesson in enumerate(section.lessons):
                target = LessonTarget(s_idx, l_idx)
                availability = lesson_availability(self.course, progress, target)
                if availability == LessonAvailability.COMPLETED:
                    completed_count += 1
                nav_lessons.append(NavigationLesson(
                    lesson=lesson,
                    target=target,
                    availability=availability,
                    is_current=target == current,
                ))

            nav_quiz = None
            if section.section_quiz is not None:
                quiz_target = SectionQuizTarget(s_idx)
                nav_quiz = NavigationQuiz(
                    target=quiz_target,
                    title=section.section_quiz.title or "Section Quiz",
                    availability=quiz_availability(self.course, progress, quiz_target),
                    is_current=quiz_target == current,
                )

            tree.append(NavigationSection(
                section=section,
                index=s_idx,
                lessons=nav_lessons,
                quiz=nav_quiz,
                completed_count=completed_count,
                total_count=len(section.lessons),
            ))

        return tree


def filter_tree(tree: list[NavigationSection], query: str) -> list[NavigationSection]:
    """
    Filter the curriculum tree by a search string.

    A section stays when its title matches (with all lessons) or when any
    lesson title matches (with just those lessons).
    """
    needle = query.strip().lower()
    if not needle:
        return tree

    result = []
    for nav_section in tree:
        if needle in nav_section.section.title.lower():
            result.append(nav_section)
            continue
        lessons = [nl for nl in nav_section.lessons if needle in nl.lesson.title.lower()]
        if lessons:
            result.append(NavigationSection(
                section=nav_section.section,
                index=nav_section.index,
                lessons=lessons,
                quiz=nav_section.quiz,
                completed_count=nav_section.completed_count,
                total_count=nav_section.total_count,
            ))
    return result


def get_status_indicator(availability: LessonAvailability, is_current: bool = False) -> str:
    """
    Get status indicator for sidebar display.

    Returns:
        → for current
        ✓ for completed
        ○ for available
        🔒 for locked
    """
    if is_current:
        return "→"
    elif availability == LessonAvailability.COMPLETED:
        return "✓"
    elif availability == LessonAvailability.AVAILABLE:
        return "○"
    else:
        return "🔒"

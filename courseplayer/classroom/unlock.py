"""
Unlock rules - Decide whether a lesson or quiz may be opened.

All functions are pure: they read the course structure and an
EnrollmentProgress and return a boolean (or availability), never raising on
missing data. Results are recomputed on every render.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from courseplayer.schemas import Course

from .progress import EnrollmentProgress


@dataclass(frozen=True)
class LessonTarget:
    section_index: int
    lesson_index: int


@dataclass(frozen=True)
class SectionQuizTarget:
    section_index: int


@dataclass(frozen=True)
class FinalQuizTarget:
    pass


UnlockTarget = Union[LessonTarget, SectionQuizTarget, FinalQuizTarget]


class LessonAvailability(str, Enum):
    """Availability status for sidebar display."""
    LOCKED = "locked"           # Previous content not finished
    AVAILABLE = "available"     # Can open
    COMPLETED = "completed"     # Finished


def is_section_cleared(course: Course, progress: Optional[EnrollmentProgress], section_index: int) -> bool:
    """
    Whether a learner may move past a section.

    A section with a quiz is cleared once the quiz is passed. Without a quiz it
    is cleared once all its lessons are completed. A section with neither
    lessons nor quiz inherits its predecessor's state.
    """
    if progress is None or not 0 <= section_index < len(course.sections):
        return False

    section = course.sections[section_index]
    if section.section_quiz is not None:
        return progress.is_section_quiz_passed(section.id)
    if section.lessons:
        return progress.is_section_complete(section)
    if section_index == 0:
        return True
    return is_section_cleared(course, progress, section_index - 1)


def is_unlocked(course: Course, progress: Optional[EnrollmentProgress], target: UnlockTarget) -> bool:
    """
    Check whether `target` is accessible.

    Rules, in order:
    1. First lesson of the first section: always.
    2. Lesson i > 0: lesson i-1 of the same section is completed.
    3. Lesson 0 of section s > 0: section s-1 is cleared.
    4. Section quiz: every lesson of its section is completed.
    5. Final quiz: every section is cleared and every lesson completed.
    """
    sections = course.sections
    if not sections:
        return False

    if isinstance(target, LessonTarget):
        if not 0 <= target.section_index < len(sections):
            return False
        section = sections[target.section_index]
        if not 0 <= target.lesson_index < len(section.lessons):
            return False

        if target.section_index == 0 and target.lesson_index == 0:
            return True
        if progress is None:
            return False
        if target.lesson_index > 0:
            previous = section.lessons[target.lesson_index - 1]
            return progress.is_lesson_completed(section.id, previous.id)
        return is_section_cleared(course, progress, target.section_index - 1)

    if progress is None:
        return False

    if isinstance(target, SectionQuizTarget):
        if not 0 <= target.section_index < len(sections):
            return False
        section = sections[target.section_index]
        if section.section_quiz is None:
            return False
        return progress.is_section_complete(section)

    if isinstance(target, FinalQuizTarget):
        if course.final_quiz is None:
            return False
        return all(
            progress.is_section_complete(section) and is_section_cleared(course, progress, idx)
            for idx, section in enumerate(sections)
        )

    return False


def lesson_availability(
    course: Course,
    progress: Optional[EnrollmentProgress],
    target: LessonTarget,
) -> LessonAvailability:
    """Availability of a lesson for the sidebar tree."""
    if progress is not None and 0 <= target.section_index < len(course.sections):
        section = course.sections[target.section_index]
        if 0 <= target.lesson_index < len(section.lessons):
            lesson = section.lessons[target.lesson_index]
            if progress.is_lesson_completed(section.id, lesson.id):
                return LessonAvailability.COMPLETED
    if is_unlocked(course, progress, target):
        return LessonAvailability.AVAILABLE
    return LessonAvailability.LOCKED


def quiz_availability(
    course: Course,
    progress: Optional[EnrollmentProgress],
    target: Union[SectionQuizTarget, FinalQuizTarget],
) -> LessonAvailability:
    """Availability of a section or final quiz for the sidebar tree."""
    if progress is not None:
        if isinstance(target, FinalQuizTarget):
            passed = progress.is_final_quiz_passed()
        elif 0 <= target.section_index < len(course.sections):
            passed = progress.is_section_quiz_passed(course.sections[target.section_index].id)
        else:
            passed = False
        if passed:
            return LessonAvailability.COMPLETED
    if is_unlocked(course, progress, target):
        return LessonAvailability.AVAILABLE
    return LessonAvailability.LOCKED

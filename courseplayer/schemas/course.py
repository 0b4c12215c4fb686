"""
Course structure schemas for the course player.

Defines Pydantic models for course content including:
- Courses, sections and lessons in traversal order
- Section and final quizzes (questions without answer keys)
- The two shapes the quiz endpoint may return
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Literal, Union


class APIModel(BaseModel):
    """Base for models read from the REST API (`_id` and camelCase keys)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# -----------------------------------------------------------------------------
# Quizzes
# -----------------------------------------------------------------------------

QuestionType = Literal["multiple-choice", "true-false", "short-answer", "coding"]


class QuestionOption(APIModel):
    """Answer option as shown to the learner. `isCorrect` is never kept."""
    text: str


class Question(APIModel):
    id: str = Field(alias="_id")
    text: str = Field(alias="question")
    type: QuestionType = "multiple-choice"
    options: list[QuestionOption] = []
    points: int = 1
    explanation: Optional[str] = None


class Quiz(APIModel):
    id: str = Field(alias="_id")
    title: str = ""
    description: Optional[str] = None
    kind: Literal["section-quiz", "final-quiz"] = Field("section-quiz", alias="type")
    passing_score: float = Field(70, ge=0, le=100)
    time_limit: Optional[int] = None  # minutes
    max_retakes: Optional[int] = None
    questions: list[Question] = []

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)


class WrappedQuizPayload(APIModel):
    """`{ data: { quiz: {...}, previousScore, canRetake } }` shape."""
    quiz: Quiz
    previous_score: Optional[dict] = None
    can_retake: Optional[bool] = None


QuizPayload = Union[WrappedQuizPayload, Quiz]

_quiz_payload_adapter = TypeAdapter(QuizPayload)


def parse_quiz_payload(data: dict) -> Quiz:
    """
    Resolve the quiz endpoint's `data` field to a Quiz.

    The endpoint returns either a wrapper object holding `quiz` or the quiz
    itself; both validate against QuizPayload and are unwrapped here.

    Raises:
        pydantic.ValidationError: if neither shape matches
    """
    payload = _quiz_payload_adapter.validate_python(data)
    if isinstance(payload, WrappedQuizPayload):
        return payload.quiz
    return payload


# -----------------------------------------------------------------------------
# Course structure
# -----------------------------------------------------------------------------

class Instructor(APIModel):
    id: Optional[str] = Field(None, alias="_id")
    name: str = ""
    email: Optional[str] = None


class Lesson(APIModel):
    id: str = Field(alias="_id")
    title: str = ""
    description: Optional[str] = None
    content: str = ""  # markdown, opaque to the progression engine
    type: Optional[Literal["video", "text", "code", "quiz"]] = None
    video_url: Optional[str] = None
    duration: Optional[int] = None
    order: int = 0

    model_config = ConfigDict(frozen=True)


class Section(APIModel):
    id: str = Field(alias="_id")
    title: str = ""
    description: str = ""
    order: int = 0
    lessons: list[Lesson] = []
    section_quiz: Optional[Quiz] = None

    @model_validator(mode="after")
    def _order_lessons(self):
        self.lessons.sort(key=lambda lesson: lesson.order)
        return self

    def lesson_index(self, lesson_id: str) -> Optional[int]:
        """Position of a lesson in this section, or None."""
        for idx, lesson in enumerate(self.lessons):
            if lesson.id == lesson_id:
                return idx
        return None


class Course(APIModel):
    id: str = Field(alias="_id")
    title: str = ""
    description: str = ""
    language: str = ""
    difficulty: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    estimated_hours: Optional[float] = None
    instructor: Optional[Instructor] = None
    sections: list[Section] = []
    final_quiz: Optional[Quiz] = None
    certificate_template: str = "standard"

    @model_validator(mode="after")
    def _order_sections(self):
        self.sections.sort(key=lambda section: section.order)
        return self

    @property
    def total_lessons(self) -> int:
        return sum(len(section.lessons) for section in self.sections)

    def section_index(self, section_id: str) -> Optional[int]:
        """Position of a section in traversal order, or None."""
        for idx, section in enumerate(self.sections):
            if section.id == section_id:
                return idx
        return None

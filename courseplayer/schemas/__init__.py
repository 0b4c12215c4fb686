"""
Course Player Schemas - Pydantic models for the learning platform API.

This module exports all schema classes for:
- Course: courses, sections, lessons, quizzes
- Enrollment: learner progress, quiz results, certificates
"""

# Course schemas
from .course import (
    APIModel,
    QuestionType,
    QuestionOption,
    Question,
    Quiz,
    WrappedQuizPayload,
    QuizPayload,
    parse_quiz_payload,
    Instructor,
    Lesson,
    Section,
    Course,
)

# Enrollment schemas
from .enrollment import (
    EnrollmentStatus,
    QuizScore,
    LessonProgress,
    SectionProgress,
    CertificateRef,
    CertificateReference,
    certificate_id_of,
    Enrollment,
    QuestionResult,
    QuizResult,
    Certificate,
)

__all__ = [
    # Course
    'APIModel',
    'QuestionType',
    'QuestionOption',
    'Question',
    'Quiz',
    'WrappedQuizPayload',
    'QuizPayload',
    'parse_quiz_payload',
    'Instructor',
    'Lesson',
    'Section',
    'Course',
    # Enrollment
    'EnrollmentStatus',
    'QuizScore',
    'LessonProgress',
    'SectionProgress',
    'CertificateRef',
    'CertificateReference',
    'certificate_id_of',
    'Enrollment',
    'QuestionResult',
    'QuizResult',
    'Certificate',
]

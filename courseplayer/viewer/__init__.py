"""
Course Player Viewer - Rendering components for the player views.

This module provides:
- Quiz header, result and per-question feedback rendering
- Certificate banner, completion summary and preview rendering
"""

from .quiz import (
    get_quiz_css,
    question_options,
    format_score,
    render_quiz_header,
    render_quiz_result,
    render_question_feedback,
    render_all_feedback,
    TRUE_FALSE_OPTIONS,
)

from .certificate import (
    render_certificate_banner,
    render_completion_summary,
    render_certificate_preview,
)

__all__ = [
    # Quiz
    "get_quiz_css",
    "question_options",
    "format_score",
    "render_quiz_header",
    "render_quiz_result",
    "render_question_feedback",
    "render_all_feedback",
    "TRUE_FALSE_OPTIONS",
    # Certificate
    "render_certificate_banner",
    "render_completion_summary",
    "render_certificate_preview",
]

"""
Quiz renderer - Quiz questions, results and per-question feedback.

Provides:
- Question option labels for Streamlit inputs
- Result header (score, passing score, attempts)
- Per-question feedback cards
"""

import html
from typing import Optional

from courseplayer.schemas import Question, QuestionResult, Quiz, QuizResult


TRUE_FALSE_OPTIONS = ["True", "False"]


def get_quiz_css() -> str:
    """Get CSS styles for quiz display."""
    return """
    <style>
    .quiz-result {
        border-radius: 12px;
        padding: 1.5em;
        margin: 1.5em 0;
        text-align: center;
    }
    .quiz-result.passed {
        background: #e8f5e9;
        border: 1px solid #a5d6a7;
    }
    .quiz-result.failed {
        background: #ffebee;
        border: 1px solid #ef9a9a;
    }
    .quiz-result-title {
        font-size: 1.6em;
        font-weight: 700;
        margin-bottom: 0.3em;
    }
    .quiz-result-stats {
        display: flex;
        justify-content: center;
        gap: 2.5em;
        margin-top: 1em;
    }
    .quiz-stat-value {
        font-size: 1.8em;
        font-weight: 700;
        color: #333;
    }
    .quiz-stat-label {
        color: #666;
        font-size: 0.9em;
    }
    .quiz-feedback {
        border-radius: 8px;
        padding: 1em;
        margin: 0.8em 0;
    }
    .quiz-feedback.correct {
        background: #e8f5e9;
        border-left: 4px solid #388E3C;
    }
    .quiz-feedback.incorrect {
        background: #ffebee;
        border-left: 4px solid #D32F2F;
    }
    .quiz-feedback-question {
        font-weight: 600;
        margin-bottom: 0.4em;
    }
    .quiz-feedback-badge {
        float: right;
        font-size: 0.85em;
        font-weight: 600;
    }
    .quiz-feedback-explanation {
        color: #555;
        font-size: 0.95em;
        margin-top: 0.5em;
    }
    </style>
    """


def question_options(question: Question) -> list[str]:
    """Choices to offer for a question; empty means free-text input."""
    if question.type == "true-false" and not question.options:
        return list(TRUE_FALSE_OPTIONS)
    if question.type in ("multiple-choice", "true-false"):
        return [option.text for option in question.options]
    return []


def format_score(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:g}%"


def render_quiz_header(quiz: Quiz) -> str:
    """Title, description and rules line above the questions."""
    parts = [f"<h2>{html.escape(quiz.title or 'Quiz')}</h2>"]
    if quiz.description:
        parts.append(f"<p>{html.escape(quiz.description)}</p>")
    rules = [f"{len(quiz.questions)} questions", f"passing score {format_score(quiz.passing_score)}"]
    if quiz.time_limit:
        rules.append(f"{quiz.time_limit} min")
    parts.append(f"<p><em>{' · '.join(rules)}</em></p>")
    return "".join(parts)


def render_quiz_result(result: QuizResult, quiz: Quiz) -> str:
    """Render the pass/fail header with score, passing score and attempts."""
    status = "passed" if result.passed else "failed"
    title = "Congratulations!" if result.passed else "Keep Learning"
    subtitle = "You passed the quiz!" if result.passed else "You didn't pass this time, but don't give up!"

    return f"""
    <div class="quiz-result {status}">
        <div class="quiz-result-title">{title}</div>
        <div>{subtitle}</div>
        <div class="quiz-result-stats">
            <div><div class="quiz-stat-value">{format_score(result.score)}</div><div class="quiz-stat-label">Your score</div></div>
            <div><div class="quiz-stat-value">{format_score(quiz.passing_score)}</div><div class="quiz-stat-label">Passing score</div></div>
            <div><div class="quiz-stat-value">{result.attempt_count}</div><div class="quiz-stat-label">Attempts</div></div>
        </div>
    </div>
    """


def render_question_feedback(index: int, feedback: QuestionResult) -> str:
    """Render one question's correct/incorrect card."""
    status = "correct" if feedback.is_correct else "incorrect"
    badge = "✓ Correct" if feedback.is_correct else "✗ Incorrect"

    parts = [f'<div class="quiz-feedback {status}">']
    parts.append(f'<span class="quiz-feedback-badge">{badge}</span>')
    parts.append(f'<div class="quiz-feedback-question">{index + 1}. {html.escape(feedback.question)}</div>')
    parts.append(f'<div>Your answer: {html.escape(feedback.user_answer)}</div>')
    if feedback.explanation:
        parts.append(f'<div class="quiz-feedback-explanation">{html.escape(feedback.explanation)}</div>')
    parts.append('</div>')
    return ''.join(parts)


def render_all_feedback(results: list[QuestionResult]) -> str:
    """Render feedback cards for every graded question."""
    if not results:
        return ""
    return ''.join(render_question_feedback(i, r) for i, r in enumerate(results))

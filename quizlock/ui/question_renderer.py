"""Question rendering for the session view."""

from __future__ import annotations

from quizlock.core.markdown_math_renderer import renderer
from quizlock.core.models import Question


def render_question_document(question: Question, number: int, total: int, font_size: int = 14) -> str:
    """Render the prompt of ``question`` as a full HTML document.

    Options are rendered as Qt buttons next to the view, so only their count
    is mentioned here.

    Args:
        question: The question being shown
        number: 1-based position of the question in the quiz
        total: Number of questions in the quiz
        font_size: Font size in points for the prompt text (default 14)

    Returns:
        HTML string ready for display in QWebEngineView
    """
    markdown = "\n\n".join(
        [
            f"**Question {number} of {total}**",
            question.prompt.strip() or "(No question text)",
            f"*Choose one of {len(question.options)} options.*",
        ]
    )
    return renderer.render_full_document(markdown, title=f"Question {number}", font_size=font_size)

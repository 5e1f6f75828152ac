"""Qt UI components for the learner client."""

from .dialog_helpers import confirm_abandon_quiz, confirm_start_quiz, show_error, show_info, show_warning
from .question_renderer import render_question_document
from .quiz_main_window import QuizMainWindow
from .window_lock import WindowPresentationLock

__all__ = [
    "QuizMainWindow",
    "WindowPresentationLock",
    "confirm_abandon_quiz",
    "confirm_start_quiz",
    "show_error",
    "show_info",
    "show_warning",
    "render_question_document",
]

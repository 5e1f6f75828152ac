"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizLock"

LISTING_TITLE: str = "Your Quizzes"
LISTING_EMPTY_STATE: str = "No quizzes are available right now."
LISTING_REFRESH_BUTTON: str = "Refresh"
LISTING_START_BUTTON: str = "Start Quiz"
LISTING_ATTEMPTED_TEMPLATE: str = "{title} — Submitted ({score}/{total})"
LISTING_OPEN_TEMPLATE: str = "{title} — {count} question(s)"
LISTING_REGISTERING_MESSAGE: str = "Registering and entering secure full screen…"

SESSION_NEXT_BUTTON: str = "Next Question"
SESSION_SUBMIT_BUTTON: str = "Submit Quiz"
SESSION_PROGRESS_TEMPLATE: str = "Question {current} of {total}"
SESSION_TIMER_TEMPLATE: str = "{seconds}s remaining"
SESSION_SUBMITTING_MESSAGE: str = "Submitting your answers…"

OVERLAY_TITLE: str = "Secure mode lost"
OVERLAY_TEMPLATE: str = (
    "Return to full screen within {seconds}s or your quiz will be submitted automatically."
)
OVERLAY_RESUME_BUTTON: str = "Return to Full Screen"
INTRO_TEMPLATE: str = "Starting in {seconds}…"

RESULT_TITLE: str = "Quiz Result"
RESULT_FAILED_TITLE: str = "Submission failed"
RESULT_BACK_BUTTON: str = "Back to Quizzes"
RESULT_ANALYTICS_PENDING: str = "Loading class statistics…"

EMPTY_QUIZ_TITLE: str = "Quiz unavailable"

VIEW_REFRESH_INTERVAL_MS: int = 200
DEFAULT_GAME_FONT_SIZE: int = 14

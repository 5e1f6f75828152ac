"""Quiz session constants shared across UI and core layers."""

QUESTION_BUDGET_SECONDS: int = 30
PROCTORING_GRACE_SECONDS: int = 5
INTRO_COUNTDOWN_SECONDS: int = 3
TICK_INTERVAL_MS: int = 1000
TIME_LIMIT_EMPHASIS_WINDOW_SECONDS: int = 9
DEFAULT_QUESTION_COINS: int = 10

# Gestures swallowed while a session is active.
BLOCKED_GESTURES: frozenset[str] = frozenset(
    {
        "copy",
        "cut",
        "paste",
        "context_menu",
        "devtools",
        "screenshot",
    }
)

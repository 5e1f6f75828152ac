"""Network configuration constants for the quiz client and development service."""

DEFAULT_API_BASE_URL: str = "http://127.0.0.1:8000"
REQUEST_TIMEOUT_SECONDS: float = 10.0
API_URL_ENV_VAR: str = "QUIZLOCK_API_URL"
API_TOKEN_ENV_VAR: str = "QUIZLOCK_TOKEN"

DEV_SERVER_HOST: str = "127.0.0.1"
DEV_SERVER_PORT: int = 8000
DEV_SERVER_TOKEN: str = "dev-learner-token"

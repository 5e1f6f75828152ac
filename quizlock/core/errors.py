"""Exception hierarchy for the quiz session engine."""

from __future__ import annotations

from quizlock.core.models import SubmitReason


class QuizSessionError(Exception):
    """Base class for every error raised by the session engine."""


class PreconditionFailed(QuizSessionError):
    """The quiz cannot be started (no questions, already attempted, session busy)."""


class LockdownUnavailable(QuizSessionError):
    """The platform refused the exclusive presentation mode."""


class RequestError(QuizSessionError):
    """A request to the quiz service failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RegistrationFailed(RequestError):
    """Registering for a quiz failed."""


class AlreadyRegistered(RegistrationFailed):
    pass


class NotFound(RegistrationFailed):
    pass


class Unauthorized(RequestError):
    """The bearer credential was missing, invalid or not allowed."""


class AlreadySubmitted(RequestError):
    """The service already holds an attempt for this user and quiz."""


class ServerError(RequestError):
    """Transport failure, 5xx response or a payload that could not be parsed."""


class AnalyticsUnavailable(RequestError):
    """Post-submit statistics could not be fetched."""


class SubmissionFailed(QuizSessionError):
    """Finalize failed; the session is terminal and must not be resubmitted."""

    def __init__(self, reason: SubmitReason, cause: Exception) -> None:
        super().__init__(f"Submission failed: {cause}")
        self.reason = reason
        self.cause = cause

    def describe(self) -> str:
        trigger = {
            SubmitReason.MANUAL: "Your submission",
            SubmitReason.TIMEOUT: "The automatic submission after the time limit",
            SubmitReason.PROCTORING: "The automatic submission after leaving secure mode",
        }[self.reason]
        detail = getattr(self.cause, "message", None) or str(self.cause)
        return f"{trigger} could not be recorded: {detail}"

"""State machine that runs one proctored quiz attempt at a time.

The controller is the only place that decides when answers are submitted.
Three triggers compete for that decision: the learner pressing submit on the
last question, the countdown running out on the last question, and the
proctoring monitor confirming a violation. Whichever acquires the session's
submission guard first issues the single finalize call; the guard is taken
before the call is dispatched, so triggers arriving while the request is in
flight find it already owned.

All handlers run on the Qt main thread. Network calls go through the task
runner and their completions come back as ordinary handler invocations, which
check that the session they belong to is still the current one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from functools import partial
import logging
from typing import Any, Protocol

from quizlock.core.errors import (
    LockdownUnavailable,
    PreconditionFailed,
    RegistrationFailed,
    RequestError,
    SubmissionFailed,
)
from quizlock.core.models import QuizListing, RegistrationToken, SessionResult, SubmitReason
from quizlock.core.schemas import AggregateStats, ScoreReport
from quizlock.core.services.countdown_scheduler import CountdownScheduler
from quizlock.core.services.proctoring_monitor import ProctoringEvent, ProctoringMonitor
from quizlock.core.services.submission_client import SubmissionClient
from quizlock.core.session_state import SessionConfig, SessionPhase, SessionState

logger = logging.getLogger(__name__)


class TaskRunner(Protocol):
    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None: ...


class NoticeKind(Enum):
    PHASE_CHANGED = auto()
    QUESTION_CHANGED = auto()
    VIOLATION_PENDING = auto()
    VIOLATION_CANCELLED = auto()
    RESULT_UPDATED = auto()
    QUIZZES_LOADED = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class SessionNotice:
    kind: NoticeKind
    message: str = ""


class SessionController:
    """Owns ``SessionState`` and drives it from ticks, lock events, input and network results."""

    def __init__(
        self,
        client: SubmissionClient,
        monitor: ProctoringMonitor,
        scheduler: CountdownScheduler,
        runner: TaskRunner,
        config: SessionConfig | None = None,
    ) -> None:
        self._client = client
        self._monitor = monitor
        self._scheduler = scheduler
        self._runner = runner
        self._config = config or SessionConfig()
        self._state: SessionState | None = None
        self._listings: list[QuizListing] = []
        self._listeners: list[Callable[[SessionNotice], None]] = []

        monitor.on(ProctoringEvent.VIOLATION_PENDING, self._handle_violation_pending)
        monitor.on(ProctoringEvent.VIOLATION_CANCELLED, self._handle_violation_cancelled)
        monitor.on(ProctoringEvent.VIOLATION_CONFIRMED, self._handle_violation_confirmed)

    # --- Observation ---

    def add_listener(self, callback: Callable[[SessionNotice], None]) -> None:
        self._listeners.append(callback)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def state(self) -> SessionState | None:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase if self._state is not None else SessionPhase.LISTING

    @property
    def listings(self) -> list[QuizListing]:
        return list(self._listings)

    @property
    def grace_seconds(self) -> int:
        return self._monitor.grace_seconds

    @property
    def grace_remaining(self) -> int:
        return self._monitor.grace_remaining

    def can_advance(self) -> bool:
        state = self._state
        return (
            state is not None
            and state.phase is SessionPhase.ACTIVE
            and not state.in_intro
            and not state.is_last_question
            and state.current_answer is not None
        )

    def can_submit(self) -> bool:
        state = self._state
        return (
            state is not None
            and state.phase is SessionPhase.ACTIVE
            and not state.in_intro
            and state.is_last_question
        )

    # --- Listing ---

    def load_quizzes(self) -> None:
        self._runner.submit(self._client.list_quizzes, self._on_quizzes_loaded, self._on_quizzes_failed)

    def _on_quizzes_loaded(self, listings: list[QuizListing]) -> None:
        self._listings = list(listings)
        self._notify(NoticeKind.QUIZZES_LOADED)

    def _on_quizzes_failed(self, error: Exception) -> None:
        logger.error("Failed to load quizzes: %s", error)
        self._notify(NoticeKind.ERROR, "Failed to load quizzes. Please try again later.")

    # --- Starting a session ---

    def start_quiz(self, listing: QuizListing) -> None:
        """Begin registration for ``listing``.

        Raises:
            PreconditionFailed: a session is already running, the quiz was
                already attempted, or it has no questions. No request is made.
        """
        if self._state is not None and not self._state.phase.is_terminal:
            raise PreconditionFailed("A quiz session is already in progress.")
        quiz = listing.quiz
        if listing.attempted:
            raise PreconditionFailed(f"You have already attempted '{quiz.title}'.")
        if not quiz.questions:
            raise PreconditionFailed("This quiz has no questions yet. Please contact the administrator.")

        state = SessionState.begin(quiz, self._config.question_budget_seconds)
        self._state = state
        logger.info("Registering for quiz %s (%d questions)", quiz.id, quiz.question_count)
        self._notify(NoticeKind.PHASE_CHANGED)
        self._runner.submit(
            partial(self._client.register, quiz.id),
            partial(self._on_registered, state),
            partial(self._on_registration_failed, state),
        )

    def _on_registered(self, state: SessionState, token: RegistrationToken) -> None:
        if not self._is_current(state, SessionPhase.REGISTERING):
            return
        try:
            self._monitor.enter_lockdown()
        except LockdownUnavailable as exc:
            # The server-side registration stays in place.
            self._state = None
            logger.warning("Quiz %s registered but lockdown unavailable: %s", token.quiz_id, exc)
            self._notify(
                NoticeKind.ERROR,
                "Secure full screen is required to start the quiz. Please allow it and try again.",
            )
            self._notify(NoticeKind.PHASE_CHANGED)
            return

        state.phase = SessionPhase.ACTIVE
        state.move_to(0, self._config.question_budget_seconds)
        state.intro_remaining = self._config.intro_countdown_seconds
        self._scheduler.start(self._handle_tick)
        logger.info("Session for quiz %s is active (%s)", token.quiz_id, token.message)
        self._notify(NoticeKind.PHASE_CHANGED)

    def _on_registration_failed(self, state: SessionState, error: Exception) -> None:
        if not self._is_current(state, SessionPhase.REGISTERING):
            return
        self._state = None
        if not isinstance(error, RequestError):
            error = RegistrationFailed(str(error))
        logger.warning("Registration for quiz %s failed: %s", state.quiz.id, error)
        self._notify(NoticeKind.ERROR, f"Failed to register for the quiz: {error.message}")
        self._notify(NoticeKind.PHASE_CHANGED)

    # --- Learner input ---

    def select_option(self, option_index: int) -> bool:
        state = self._state
        if state is None or state.phase is not SessionPhase.ACTIVE or state.in_intro:
            return False
        state.record_answer(option_index)
        return True

    def advance(self) -> bool:
        if not self.can_advance():
            return False
        self._move_to_next_question(self._state)
        return True

    def submit(self) -> bool:
        if not self.can_submit():
            return False
        return self._begin_submission(SubmitReason.MANUAL)

    def resume_lockdown(self) -> bool:
        """Ask for secure full screen again while the violation overlay is shown.

        Returns True when the lock was granted; the pending violation is then
        cancelled by the monitor.
        """
        state = self._state
        if state is None or state.phase is not SessionPhase.PROCTORING_GRACE_BREACH:
            return False
        return self._monitor.resume_lockdown()

    def dismiss(self) -> bool:
        """Leave a terminal session and return to the listing."""
        state = self._state
        if state is None or not state.phase.is_terminal:
            return False
        self._state = None
        self._notify(NoticeKind.PHASE_CHANGED)
        return True

    def shutdown(self) -> None:
        """Cancel every timer and release the lock; the current session is discarded."""
        self._scheduler.stop()
        self._monitor.teardown()
        if self._state is not None:
            logger.info("Discarding session for quiz %s (phase %s)", self._state.quiz.id, self._state.phase.name)
        self._state = None

    # --- Timers and proctoring ---

    def _handle_tick(self) -> None:
        state = self._state
        if state is None or not state.is_live:
            return
        if state.phase is SessionPhase.PROCTORING_GRACE_BREACH and self._config.pause_on_violation:
            return
        if state.in_intro:
            state.intro_remaining -= 1
            return
        state.seconds_remaining -= 1
        if state.seconds_remaining > 0:
            return
        if not state.is_last_question:
            self._move_to_next_question(state)
            return
        reason = SubmitReason.TIMEOUT
        if self._monitor.violation_pending and self._monitor.grace_remaining <= 1:
            # The grace window runs out on this same tick.
            reason = SubmitReason.PROCTORING
        self._begin_submission(reason)

    def _move_to_next_question(self, state: SessionState) -> None:
        state.move_to(state.current_index + 1, self._config.question_budget_seconds)
        self._notify(NoticeKind.QUESTION_CHANGED)

    def _handle_violation_pending(self) -> None:
        state = self._state
        if state is None or state.phase is not SessionPhase.ACTIVE:
            return
        state.phase = SessionPhase.PROCTORING_GRACE_BREACH
        state.violation_count += 1
        self._notify(NoticeKind.VIOLATION_PENDING, "Return to full screen to continue the quiz.")

    def _handle_violation_cancelled(self) -> None:
        state = self._state
        if state is None or state.phase is not SessionPhase.PROCTORING_GRACE_BREACH:
            return
        state.phase = SessionPhase.ACTIVE
        self._notify(NoticeKind.VIOLATION_CANCELLED, "Secure full screen restored.")

    def _handle_violation_confirmed(self) -> None:
        self._begin_submission(SubmitReason.PROCTORING)

    # --- Submission ---

    def _begin_submission(self, reason: SubmitReason) -> bool:
        state = self._state
        if state is None or not state.is_live:
            return False
        if not state.submission_guard.acquire(reason):
            logger.debug("Ignoring %s submission; guard already taken", reason.value)
            return False

        state.phase = SessionPhase.SUBMITTING
        self._scheduler.stop()
        self._monitor.teardown()
        answers = tuple(state.answers)
        logger.info(
            "Submitting quiz %s (%s): %d/%d answered",
            state.quiz.id,
            reason.value,
            state.answered_count,
            len(answers),
        )
        self._notify(NoticeKind.PHASE_CHANGED)
        self._runner.submit(
            partial(self._client.finalize, state.quiz.id, answers, state.violation_count),
            partial(self._on_finalized, state),
            partial(self._on_finalize_failed, state),
        )
        return True

    def _on_finalized(self, state: SessionState, report: ScoreReport) -> None:
        if not self._is_current(state, SessionPhase.SUBMITTING):
            return
        state.result = SessionResult(
            score=report.score,
            total_questions=report.total_questions,
            earned_coins=report.earned_coins,
            new_balance=report.new_balance,
            accuracy=report.accuracy,
            reason=state.submission_guard.reason or SubmitReason.MANUAL,
        )
        state.phase = SessionPhase.COMPLETED
        self._notify(NoticeKind.PHASE_CHANGED)
        self._runner.submit(
            partial(self._client.fetch_analytics, state.quiz.id),
            partial(self._on_analytics, state),
            partial(self._on_analytics_failed, state),
        )

    def _on_finalize_failed(self, state: SessionState, error: Exception) -> None:
        if not self._is_current(state, SessionPhase.SUBMITTING):
            return
        reason = state.submission_guard.reason or SubmitReason.MANUAL
        state.error = SubmissionFailed(reason, error)
        state.phase = SessionPhase.FAILED
        logger.error("Finalize for quiz %s failed (%s): %s", state.quiz.id, reason.value, error)
        self._notify(NoticeKind.ERROR, state.error.describe())
        self._notify(NoticeKind.PHASE_CHANGED)

    def _on_analytics(self, state: SessionState, stats: AggregateStats) -> None:
        # Dropped once the learner has left the result view.
        if self._state is not state or state.result is None:
            return
        state.result.average_score = stats.average_score
        state.result.success_rate = stats.success_rate
        self._notify(NoticeKind.RESULT_UPDATED)

    def _on_analytics_failed(self, state: SessionState, error: Exception) -> None:
        logger.warning("Analytics unavailable for quiz %s: %s", state.quiz.id, error)

    # --- Helpers ---

    def _is_current(self, state: SessionState, phase: SessionPhase) -> bool:
        if self._state is state and state.phase is phase:
            return True
        logger.debug("Dropping stale completion for quiz %s", state.quiz.id)
        return False

    def _notify(self, kind: NoticeKind, message: str = "") -> None:
        notice = SessionNotice(kind, message)
        for callback in list(self._listeners):
            callback(notice)

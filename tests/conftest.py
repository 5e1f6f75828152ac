"""Shared fixtures and in-memory fakes for the session engine tests."""

from __future__ import annotations

from collections import deque
import os
from types import SimpleNamespace

import pytest
from PySide6.QtWidgets import QApplication

from quizlock.core.errors import LockdownUnavailable
from quizlock.core.models import Question, QuizDefinition, QuizListing, RegistrationToken
from quizlock.core.schemas import AggregateStats, ScoreReport
from quizlock.core.services.presentation_lock import LockState
from quizlock.core.services.proctoring_monitor import ProctoringMonitor
from quizlock.core.session_controller import SessionController
from quizlock.core.session_state import SessionConfig


class ManualScheduler:
    """Countdown scheduler driven by the test instead of a timer."""

    def __init__(self) -> None:
        self._on_tick = None
        self.start_count = 0

    def start(self, on_tick) -> None:
        self._on_tick = on_tick
        self.start_count += 1

    def stop(self) -> None:
        self._on_tick = None

    def is_running(self) -> bool:
        return self._on_tick is not None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self._on_tick is None:
                return
            self._on_tick()


class FakeLock:
    def __init__(self) -> None:
        self.deny = False
        self.locked = False
        self.suppressed = False
        self.request_count = 0
        self.exit_count = 0
        self._callbacks = []

    def request_lock(self) -> None:
        self.request_count += 1
        if self.deny:
            raise LockdownUnavailable("full screen denied")
        if not self.locked:
            self.emit(LockState.LOCKED)

    def exit_lock(self) -> None:
        self.exit_count += 1
        self.locked = False

    def is_locked(self) -> bool:
        return self.locked

    def subscribe(self, callback):
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def set_input_suppressed(self, suppressed: bool) -> None:
        self.suppressed = suppressed

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def emit(self, state: LockState) -> None:
        self.locked = state is LockState.LOCKED
        for callback in list(self._callbacks):
            callback(state)


class DeferredRunner:
    """Issues each call right away and holds its completion until the test releases it."""

    def __init__(self) -> None:
        self.queue = deque()

    def submit(self, fn, on_success, on_failure) -> None:
        try:
            result = fn()
        except Exception as exc:
            self.queue.append((on_failure, exc))
            return
        self.queue.append((on_success, result))

    def run_next(self) -> None:
        callback, value = self.queue.popleft()
        callback(value)

    def run_all(self) -> None:
        while self.queue:
            self.run_next()


class FakeClient:
    def __init__(self, listings=None) -> None:
        self.listings = list(listings or [])
        self.register_calls: list[str] = []
        self.finalize_calls: list[tuple] = []
        self.analytics_calls: list[str] = []
        self.register_error: Exception | None = None
        self.finalize_error: Exception | None = None
        self.analytics_error: Exception | None = None
        self.stats = AggregateStats(average_score=1.5, success_rate=50.0, total_attempts=2)

    def list_quizzes(self):
        return list(self.listings)

    def register(self, quiz_id: str) -> RegistrationToken:
        self.register_calls.append(quiz_id)
        if self.register_error is not None:
            raise self.register_error
        return RegistrationToken(quiz_id=quiz_id, message="Registered successfully")

    def finalize(self, quiz_id: str, answers, violations: int = 0) -> ScoreReport:
        self.finalize_calls.append((quiz_id, tuple(answers), violations))
        if self.finalize_error is not None:
            raise self.finalize_error
        score = sum(1 for answer in answers if answer == 0)
        return ScoreReport(
            score=score,
            total_questions=len(answers),
            earned_coins=score * 10,
            new_balance=100 + score * 10,
        )

    def fetch_analytics(self, quiz_id: str) -> AggregateStats:
        self.analytics_calls.append(quiz_id)
        if self.analytics_error is not None:
            raise self.analytics_error
        return self.stats


def make_quiz(question_count: int = 3, quiz_id: str = "quiz-1", title: str = "Sample Quiz") -> QuizDefinition:
    questions = tuple(
        Question(prompt=f"Question {idx + 1}?", options=("Right", "Wrong", "Also wrong", "Nope"))
        for idx in range(question_count)
    )
    return QuizDefinition(id=quiz_id, title=title, questions=questions)


def make_listing(question_count: int = 3, **kwargs) -> QuizListing:
    attempted = kwargs.pop("attempted", False)
    return QuizListing(quiz=make_quiz(question_count, **kwargs), attempted=attempted)


@pytest.fixture(scope="session")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def build_env():
    """Factory for a controller wired to fakes; returns a namespace of all parts."""

    def factory(
        budget: int = 30,
        grace: int = 5,
        pause_on_violation: bool = True,
        intro: int = 0,
        listings=None,
    ) -> SimpleNamespace:
        lock = FakeLock()
        scheduler = ManualScheduler()
        grace_scheduler = ManualScheduler()
        runner = DeferredRunner()
        client = FakeClient(listings)
        monitor = ProctoringMonitor(lock, grace_scheduler, grace_seconds=grace)
        config = SessionConfig(
            question_budget_seconds=budget,
            pause_on_violation=pause_on_violation,
            intro_countdown_seconds=intro,
        )
        controller = SessionController(client, monitor, scheduler, runner, config)
        notices = []
        controller.add_listener(notices.append)
        return SimpleNamespace(
            lock=lock,
            scheduler=scheduler,
            grace_scheduler=grace_scheduler,
            runner=runner,
            client=client,
            monitor=monitor,
            controller=controller,
            notices=notices,
        )

    return factory


@pytest.fixture
def env(build_env):
    return build_env()


def start_active(env, listing: QuizListing) -> None:
    """Start ``listing`` and complete its registration."""
    env.controller.start_quiz(listing)
    env.runner.run_next()

from __future__ import annotations

import pytest

from conftest import make_listing, start_active
from quizlock.core.errors import (
    AlreadyRegistered,
    AlreadySubmitted,
    AnalyticsUnavailable,
    PreconditionFailed,
    ServerError,
    SubmissionFailed,
)
from quizlock.core.models import SubmitReason
from quizlock.core.services.presentation_lock import LockState
from quizlock.core.session_controller import NoticeKind
from quizlock.core.session_state import SessionPhase


def kinds(env):
    return [notice.kind for notice in env.notices]


# --- Starting ---


def test_start_quiz_registers_before_showing_questions(env):
    listing = make_listing(3)

    env.controller.start_quiz(listing)

    assert env.controller.phase is SessionPhase.REGISTERING
    assert env.client.register_calls == ["quiz-1"]
    assert env.lock.request_count == 0
    assert not env.scheduler.is_running()

    env.runner.run_next()

    state = env.controller.state
    assert state.phase is SessionPhase.ACTIVE
    assert state.current_index == 0
    assert state.seconds_remaining == 30
    assert state.answers == [None, None, None]
    assert env.lock.locked
    assert env.lock.suppressed
    assert env.scheduler.is_running()


def test_quiz_without_questions_is_rejected_without_registering(env):
    with pytest.raises(PreconditionFailed):
        env.controller.start_quiz(make_listing(0))

    assert env.client.register_calls == []
    assert env.controller.state is None


def test_attempted_quiz_is_rejected(env):
    with pytest.raises(PreconditionFailed):
        env.controller.start_quiz(make_listing(2, attempted=True))
    assert env.client.register_calls == []


def test_second_quiz_cannot_start_while_one_is_running(env):
    start_active(env, make_listing(2))

    with pytest.raises(PreconditionFailed):
        env.controller.start_quiz(make_listing(2, quiz_id="quiz-2"))

    assert env.client.register_calls == ["quiz-1"]


def test_registration_failure_returns_to_listing(env):
    env.client.register_error = AlreadyRegistered("Already registered for this quiz.", 400)

    start_active(env, make_listing(2))

    assert env.controller.state is None
    assert env.controller.phase is SessionPhase.LISTING
    assert env.lock.request_count == 0
    errors = [n for n in env.notices if n.kind is NoticeKind.ERROR]
    assert errors and "Already registered" in errors[0].message


def test_lockdown_denied_after_registration_returns_to_listing(env):
    env.lock.deny = True

    start_active(env, make_listing(2))

    assert env.client.register_calls == ["quiz-1"]
    assert env.controller.state is None
    assert not env.scheduler.is_running()
    assert not env.lock.suppressed
    assert NoticeKind.ERROR in kinds(env)
    assert env.client.finalize_calls == []


# --- Navigation and countdown ---


def test_advance_requires_a_selection(env):
    start_active(env, make_listing(3))

    assert env.controller.advance() is False
    assert env.controller.select_option(2) is True
    assert env.controller.advance() is True

    state = env.controller.state
    assert state.current_index == 1
    assert state.answers == [2, None, None]
    assert state.seconds_remaining == 30


def test_select_option_out_of_range_raises(env):
    start_active(env, make_listing(1))
    with pytest.raises(ValueError):
        env.controller.select_option(7)


def test_ticks_count_down_and_advance_at_zero(env):
    start_active(env, make_listing(3))

    env.scheduler.fire(29)
    assert env.controller.state.current_index == 0
    assert env.controller.state.seconds_remaining == 1

    env.scheduler.fire()
    assert env.controller.state.current_index == 1
    assert env.controller.state.seconds_remaining == 30
    assert NoticeKind.QUESTION_CHANGED in kinds(env)


def test_intro_countdown_holds_the_first_question(build_env):
    env = build_env(intro=3)
    start_active(env, make_listing(1))
    state = env.controller.state

    assert state.in_intro
    assert env.controller.select_option(0) is False
    assert env.controller.can_submit() is False

    env.scheduler.fire(3)
    assert not state.in_intro
    assert state.seconds_remaining == 30
    assert state.answers == [None]

    assert env.controller.select_option(0) is True
    env.scheduler.fire()
    assert state.seconds_remaining == 29


def test_intro_is_not_repeated_for_later_questions(build_env):
    env = build_env(intro=2)
    start_active(env, make_listing(2))

    env.scheduler.fire(2)
    env.controller.select_option(1)
    env.controller.advance()

    assert not env.controller.state.in_intro
    env.scheduler.fire()
    assert env.controller.state.seconds_remaining == 29


def test_submit_is_only_available_on_last_question(env):
    start_active(env, make_listing(2))

    assert env.controller.submit() is False
    env.controller.select_option(0)
    env.controller.advance()
    assert env.controller.can_submit()


def test_unanswered_last_question_times_out_with_fixed_length_answers(env):
    start_active(env, make_listing(2))
    env.scheduler.fire(5)
    env.controller.select_option(0)
    env.controller.advance()

    env.scheduler.fire(30)

    assert env.controller.phase is SessionPhase.SUBMITTING
    assert env.client.finalize_calls == [("quiz-1", (0, None), 0)]
    assert env.controller.state.submission_guard.reason is SubmitReason.TIMEOUT
    assert not env.scheduler.is_running()
    assert not env.lock.locked

    env.runner.run_next()

    result = env.controller.state.result
    assert env.controller.phase is SessionPhase.COMPLETED
    assert result.reason is SubmitReason.TIMEOUT
    assert result.score == 1
    assert result.total_questions == 2


# --- Submission guard ---


def test_manual_submit_finalizes_once_and_ignores_later_triggers(env):
    start_active(env, make_listing(1))
    env.controller.select_option(0)

    assert env.controller.submit() is True
    assert env.controller.submit() is False
    env.scheduler.fire(40)
    env.lock.emit(LockState.UNLOCKED)
    env.grace_scheduler.fire(10)

    assert len(env.client.finalize_calls) == 1
    assert env.controller.phase is SessionPhase.SUBMITTING


def test_triggers_while_finalize_in_flight_do_not_resubmit(env):
    start_active(env, make_listing(1))
    env.lock.emit(LockState.UNLOCKED)
    env.grace_scheduler.fire(5)

    assert env.controller.phase is SessionPhase.SUBMITTING
    assert env.controller.submit() is False
    env.scheduler.fire(30)

    env.runner.run_next()
    assert len(env.client.finalize_calls) == 1
    assert env.controller.state.result.reason is SubmitReason.PROCTORING


def test_already_submitted_fails_without_retry(env):
    env.client.finalize_error = AlreadySubmitted("You have already attempted this quiz.", 400)
    start_active(env, make_listing(1))
    env.controller.submit()

    env.runner.run_next()

    state = env.controller.state
    assert state.phase is SessionPhase.FAILED
    assert isinstance(state.error, SubmissionFailed)
    assert isinstance(state.error.cause, AlreadySubmitted)
    assert state.error.reason is SubmitReason.MANUAL
    assert len(env.client.finalize_calls) == 1
    assert not env.runner.queue
    assert env.controller.submit() is False


def test_server_error_on_timeout_submission_mentions_trigger(env):
    env.client.finalize_error = ServerError("Unable to reach the quiz service")
    start_active(env, make_listing(1))
    env.scheduler.fire(30)
    env.runner.run_next()

    message = env.controller.state.error.describe()
    assert "time limit" in message
    assert "Unable to reach" in message


# --- Proctoring ---


def test_violation_pauses_countdown_until_lock_restored(env):
    start_active(env, make_listing(2))
    env.scheduler.fire(10)

    env.lock.emit(LockState.UNLOCKED)
    state = env.controller.state
    assert state.phase is SessionPhase.PROCTORING_GRACE_BREACH
    assert state.violation_count == 1
    assert env.controller.grace_remaining == 5

    env.scheduler.fire(3)
    env.grace_scheduler.fire(2)
    assert state.seconds_remaining == 20
    assert env.controller.grace_remaining == 3
    assert env.controller.select_option(0) is False

    env.lock.emit(LockState.LOCKED)
    assert state.phase is SessionPhase.ACTIVE
    assert not env.grace_scheduler.is_running()

    env.scheduler.fire()
    assert state.seconds_remaining == 19
    assert env.client.finalize_calls == []


def test_grace_expiry_submits_with_proctoring_reason(env):
    start_active(env, make_listing(3))
    env.controller.select_option(1)

    env.lock.emit(LockState.UNLOCKED)
    env.grace_scheduler.fire(4)
    assert env.client.finalize_calls == []
    env.grace_scheduler.fire()

    assert env.client.finalize_calls == [("quiz-1", (1, None, None), 1)]
    assert env.controller.state.submission_guard.reason is SubmitReason.PROCTORING
    assert env.lock.exit_count == 1
    assert not env.lock.suppressed
    assert env.lock.subscriber_count == 0


def test_each_breach_is_counted(env):
    start_active(env, make_listing(2))
    for _ in range(2):
        env.lock.emit(LockState.UNLOCKED)
        env.lock.emit(LockState.LOCKED)

    assert env.controller.state.violation_count == 2
    assert env.controller.phase is SessionPhase.ACTIVE


def test_resume_lockdown_cancels_violation_without_submitting(env):
    start_active(env, make_listing(2))
    env.lock.emit(LockState.UNLOCKED)
    env.grace_scheduler.fire(2)
    requests_before = env.lock.request_count

    assert env.controller.resume_lockdown() is True

    assert env.lock.request_count == requests_before + 1
    assert env.lock.locked
    assert env.controller.phase is SessionPhase.ACTIVE
    assert NoticeKind.VIOLATION_CANCELLED in kinds(env)
    assert not env.grace_scheduler.is_running()
    env.grace_scheduler.fire(10)
    assert env.client.finalize_calls == []


def test_resume_lockdown_outside_a_breach_does_nothing(env):
    assert env.controller.resume_lockdown() is False

    start_active(env, make_listing(2))
    requests_before = env.lock.request_count

    assert env.controller.resume_lockdown() is False
    assert env.lock.request_count == requests_before


def test_denied_resume_keeps_the_grace_window_running(env):
    start_active(env, make_listing(2))
    env.lock.emit(LockState.UNLOCKED)
    env.lock.deny = True

    assert env.controller.resume_lockdown() is False

    assert env.controller.phase is SessionPhase.PROCTORING_GRACE_BREACH
    env.grace_scheduler.fire(5)
    assert env.controller.state.submission_guard.reason is SubmitReason.PROCTORING


def test_last_second_with_expiring_grace_prefers_proctoring(build_env):
    env = build_env(budget=3, grace=5, pause_on_violation=False)
    start_active(env, make_listing(1))

    env.lock.emit(LockState.UNLOCKED)
    env.grace_scheduler.fire(4)
    env.scheduler.fire(3)

    assert len(env.client.finalize_calls) == 1
    assert env.controller.state.submission_guard.reason is SubmitReason.PROCTORING
    env.grace_scheduler.fire()
    assert len(env.client.finalize_calls) == 1


def test_last_second_with_grace_left_is_a_timeout(build_env):
    env = build_env(budget=3, grace=5, pause_on_violation=False)
    start_active(env, make_listing(1))

    env.lock.emit(LockState.UNLOCKED)
    env.scheduler.fire(3)

    assert env.controller.state.submission_guard.reason is SubmitReason.TIMEOUT
    assert not env.grace_scheduler.is_running()


# --- Results and analytics ---


def test_analytics_are_merged_into_result(env):
    start_active(env, make_listing(1))
    env.controller.select_option(0)
    env.controller.submit()
    env.runner.run_next()

    result = env.controller.state.result
    assert not result.has_analytics
    assert result.completed_at.tzinfo is not None
    assert len(env.runner.queue) == 1

    env.runner.run_next()

    assert env.client.analytics_calls == ["quiz-1"]
    assert result.average_score == 1.5
    assert result.success_rate == 50.0
    assert NoticeKind.RESULT_UPDATED in kinds(env)


def test_analytics_failure_keeps_result(env):
    env.client.analytics_error = AnalyticsUnavailable("Service unavailable", 503)
    start_active(env, make_listing(1))
    env.controller.submit()
    env.runner.run_all()

    state = env.controller.state
    assert state.phase is SessionPhase.COMPLETED
    assert state.result is not None
    assert not state.result.has_analytics


def test_analytics_after_dismiss_are_dropped(env):
    start_active(env, make_listing(1))
    env.controller.submit()
    env.runner.run_next()
    finished = env.controller.state

    assert env.controller.dismiss() is True
    env.runner.run_next()

    assert env.controller.state is None
    assert not finished.result.has_analytics


def test_accuracy_falls_back_to_score_ratio(env):
    start_active(env, make_listing(3))
    env.controller.select_option(0)
    env.scheduler.fire(90)
    env.runner.run_next()

    assert env.controller.state.result.accuracy_percent == pytest.approx(100 / 3)


def test_finalize_completion_after_shutdown_is_dropped(env):
    start_active(env, make_listing(1))
    env.controller.submit()
    env.controller.shutdown()

    env.runner.run_next()

    assert env.controller.state is None
    assert env.client.analytics_calls == []


def test_dismiss_only_leaves_terminal_sessions(env):
    start_active(env, make_listing(1))
    assert env.controller.dismiss() is False
    env.controller.submit()
    env.runner.run_next()
    assert env.controller.dismiss() is True
    assert env.controller.phase is SessionPhase.LISTING


def test_load_quizzes_publishes_listings(build_env):
    env = build_env(listings=[make_listing(2), make_listing(1, quiz_id="quiz-2", attempted=True)])

    env.controller.load_quizzes()
    env.runner.run_next()

    assert [listing.quiz.id for listing in env.controller.listings] == ["quiz-1", "quiz-2"]
    assert kinds(env) == [NoticeKind.QUIZZES_LOADED]

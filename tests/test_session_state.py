from __future__ import annotations

import pytest

from conftest import make_quiz
from quizlock.core.errors import AlreadySubmitted, SubmissionFailed
from quizlock.core.markdown_math_renderer import MarkdownMathRenderer
from quizlock.core.models import SessionResult, SubmitReason
from quizlock.core.session_state import SessionPhase, SessionState, SubmissionGuard


def test_guard_is_taken_by_the_first_trigger():
    guard = SubmissionGuard()

    assert guard.acquire(SubmitReason.PROCTORING)
    assert not guard.acquire(SubmitReason.MANUAL)
    assert guard.taken
    assert guard.reason is SubmitReason.PROCTORING


def test_state_starts_with_every_question_unanswered():
    state = SessionState.begin(make_quiz(4), budget_seconds=30)

    assert state.answers == [None] * 4
    assert state.phase is SessionPhase.REGISTERING
    assert not state.is_live
    assert state.answered_count == 0


def test_move_to_resets_budget_and_rejects_out_of_range():
    state = SessionState.begin(make_quiz(2), budget_seconds=30)
    state.seconds_remaining = 4

    state.move_to(1, 30)

    assert state.is_last_question
    assert state.seconds_remaining == 30
    with pytest.raises(IndexError):
        state.move_to(2, 30)


def test_terminal_phases():
    assert SessionPhase.COMPLETED.is_terminal
    assert SessionPhase.FAILED.is_terminal
    assert not SessionPhase.SUBMITTING.is_terminal


def test_accuracy_prefers_service_value():
    result = SessionResult(
        score=1,
        total_questions=4,
        earned_coins=10,
        new_balance=None,
        reason=SubmitReason.MANUAL,
        accuracy=80.0,
    )
    assert result.accuracy_percent == 80.0


def test_accuracy_of_empty_result_is_zero():
    result = SessionResult(score=0, total_questions=0, earned_coins=0, new_balance=None, reason=SubmitReason.MANUAL)
    assert result.accuracy_percent == 0.0


def test_submission_failure_names_the_trigger():
    error = SubmissionFailed(SubmitReason.PROCTORING, AlreadySubmitted("You have already attempted this quiz.", 400))

    message = error.describe()

    assert "leaving secure mode" in message
    assert "already attempted" in message


def test_plain_labels_drop_math_delimiters():
    assert MarkdownMathRenderer.render_plain_label(r"$60\,\text{km/h}$") == "60 km/h"
    assert MarkdownMathRenderer.render_plain_label("`len(x)`") == "len(x)"
    assert MarkdownMathRenderer.render_plain_label("   ") == "(empty)"

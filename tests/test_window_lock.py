from __future__ import annotations

from PySide6.QtCore import QEvent, QPoint, Qt
from PySide6.QtGui import QContextMenuEvent, QKeyEvent
from PySide6.QtWidgets import QWidget
import pytest

from quizlock.core.services.presentation_lock import LockState
from quizlock.ui.window_lock import WindowPresentationLock

ACTIVE = Qt.ApplicationState.ApplicationActive
INACTIVE = Qt.ApplicationState.ApplicationInactive
CTRL = Qt.KeyboardModifier.ControlModifier


@pytest.fixture
def window(qt_app):
    widget = QWidget()
    yield widget
    widget.close()
    widget.deleteLater()


@pytest.fixture
def lock(window):
    lock = WindowPresentationLock(window)
    yield lock
    lock.set_input_suppressed(False)


def _key(key, modifiers=Qt.KeyboardModifier.NoModifier) -> QKeyEvent:
    return QKeyEvent(QEvent.Type.KeyPress, key, modifiers)


def _record(lock) -> list:
    states = []
    lock.subscribe(states.append)
    return states


@pytest.mark.parametrize(
    ("key", "modifiers"),
    [
        (Qt.Key_C, CTRL),
        (Qt.Key_V, CTRL),
        (Qt.Key_X, CTRL),
        (Qt.Key_F12, Qt.KeyboardModifier.NoModifier),
        (Qt.Key_I, CTRL | Qt.KeyboardModifier.ShiftModifier),
        (Qt.Key_Print, Qt.KeyboardModifier.NoModifier),
    ],
)
def test_blocked_keys(lock, key, modifiers):
    assert lock._is_blocked(_key(key, modifiers))


def test_context_menu_is_blocked(lock):
    assert lock._is_blocked(QContextMenuEvent(QContextMenuEvent.Reason.Mouse, QPoint(1, 1)))


def test_ordinary_typing_passes(lock):
    assert not lock._is_blocked(_key(Qt.Key_A))
    assert not lock._is_blocked(_key(Qt.Key_C))


def test_gestures_outside_the_configured_set_pass(window):
    lock = WindowPresentationLock(window, blocked_gestures={"paste"})

    assert lock._is_blocked(_key(Qt.Key_V, Qt.KeyboardModifier.ControlModifier))
    assert not lock._is_blocked(_key(Qt.Key_C, Qt.KeyboardModifier.ControlModifier))
    assert not lock._is_blocked(_key(Qt.Key_F12))


def test_filter_swallows_only_while_suppressed(lock, window):
    copy = _key(Qt.Key_C, Qt.KeyboardModifier.ControlModifier)
    assert not lock.eventFilter(window, copy)

    lock.set_input_suppressed(True)
    assert lock.eventFilter(window, copy)
    assert not lock.eventFilter(window, _key(Qt.Key_A))

    lock.set_input_suppressed(False)
    assert not lock.eventFilter(window, copy)


def test_request_lock_while_active_publishes_locked_once(lock):
    lock._handle_application_state(ACTIVE)
    states = _record(lock)

    lock.request_lock()

    assert states == [LockState.LOCKED]
    assert lock.is_locked()


def test_focus_loss_and_return_toggle_the_lock(lock):
    lock._handle_application_state(ACTIVE)
    lock.request_lock()
    states = _record(lock)

    lock._handle_application_state(INACTIVE)
    lock._handle_application_state(ACTIVE)

    assert states == [LockState.UNLOCKED, LockState.LOCKED]


def test_leaving_full_screen_unlocks(lock, window):
    lock._handle_application_state(ACTIVE)
    lock.request_lock()
    states = _record(lock)

    window.showNormal()

    assert states == [LockState.UNLOCKED]
    assert not lock.is_locked()


def test_request_lock_while_inactive_waits_for_activation(lock):
    lock._handle_application_state(INACTIVE)
    states = _record(lock)

    lock.request_lock()
    assert states == []
    assert not lock.is_locked()

    lock._handle_application_state(ACTIVE)
    assert states == [LockState.LOCKED]


def test_exit_lock_leaves_full_screen_quietly(lock, window):
    lock._handle_application_state(ACTIVE)
    lock.request_lock()
    states = _record(lock)

    lock.exit_lock()

    assert not window.isFullScreen()
    assert not lock.is_locked()
    assert states == []

"""Presentation lock backed by a full-screen Qt window."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtGui import QGuiApplication, QKeySequence
from PySide6.QtWidgets import QApplication, QWidget

from quizlock.constants.quiz_constants import BLOCKED_GESTURES
from quizlock.core.errors import LockdownUnavailable
from quizlock.core.services.presentation_lock import LockState

_CLIPBOARD_KEYS = {
    "copy": QKeySequence.StandardKey.Copy,
    "cut": QKeySequence.StandardKey.Cut,
    "paste": QKeySequence.StandardKey.Paste,
}
_DEVTOOLS_LETTERS = {Qt.Key_I, Qt.Key_J, Qt.Key_C}


class WindowPresentationLock(QObject):
    """Locked means: the window is full screen and the application is active.

    Leaving full screen or switching to another application counts as an
    ``unlocked`` transition. While input is suppressed an application-wide
    event filter swallows the blocked gestures.
    """

    def __init__(self, window: QWidget, blocked_gestures: Iterable[str] = BLOCKED_GESTURES) -> None:
        super().__init__(window)
        self._window = window
        self._blocked = frozenset(blocked_gestures)
        self._callbacks: list[Callable[[LockState], None]] = []
        self._locked = False
        self._suppressed = False
        self._app_active = QGuiApplication.applicationState() == Qt.ApplicationState.ApplicationActive
        window.installEventFilter(self)
        app = QGuiApplication.instance()
        if app is not None:
            app.applicationStateChanged.connect(self._handle_application_state)

    def request_lock(self) -> None:
        self._window.showFullScreen()
        self._window.raise_()
        self._window.activateWindow()
        if not self._window.isFullScreen():
            raise LockdownUnavailable("The window manager refused full-screen mode.")
        # Stays unlocked until the application is also active.
        self._publish_current_state()

    def exit_lock(self) -> None:
        self._locked = False
        if self._window.isFullScreen():
            self._window.showNormal()

    def is_locked(self) -> bool:
        return self._locked

    def subscribe(self, callback: Callable[[LockState], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def set_input_suppressed(self, suppressed: bool) -> None:
        if suppressed == self._suppressed:
            return
        self._suppressed = suppressed
        app = QApplication.instance()
        if app is None:
            return
        if suppressed:
            app.installEventFilter(self)
        else:
            app.removeEventFilter(self)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._window and event.type() == QEvent.Type.WindowStateChange:
            self._publish_current_state()
        if self._suppressed and self._is_blocked(event):
            return True
        return super().eventFilter(watched, event)

    def _handle_application_state(self, state: Qt.ApplicationState) -> None:
        self._app_active = state == Qt.ApplicationState.ApplicationActive
        self._publish_current_state()

    def _publish_current_state(self) -> None:
        locked_now = self._window.isFullScreen() and self._app_active
        if locked_now == self._locked:
            return
        self._locked = locked_now
        state = LockState.LOCKED if locked_now else LockState.UNLOCKED
        for callback in list(self._callbacks):
            callback(state)

    def _is_blocked(self, event: QEvent) -> bool:
        event_type = event.type()
        if event_type == QEvent.Type.ContextMenu:
            return "context_menu" in self._blocked
        if event_type != QEvent.Type.KeyPress:
            return False
        for gesture, sequence in _CLIPBOARD_KEYS.items():
            if gesture in self._blocked and event.matches(sequence):
                return True
        key = event.key()
        if "screenshot" in self._blocked and key == Qt.Key_Print:
            return True
        if "devtools" in self._blocked:
            modifiers = event.modifiers()
            if key == Qt.Key_F12:
                return True
            ctrl_shift = Qt.ControlModifier | Qt.ShiftModifier
            if (modifiers & ctrl_shift) == ctrl_shift and key in _DEVTOOLS_LETTERS:
                return True
        return False

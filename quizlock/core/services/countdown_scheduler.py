"""Repeating one-second tick source used by question and grace countdowns."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

from quizlock.constants.quiz_constants import TICK_INTERVAL_MS


class CountdownScheduler(QObject):
    """Emits one tick per interval until stopped. Holds no countdown state itself."""

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._on_tick: Callable[[], None] | None = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._handle_timeout)

    def start(self, on_tick: Callable[[], None]) -> None:
        # Restarting replaces the running timer instead of adding a second one.
        self.stop()
        self._on_tick = on_tick
        self._timer.start()

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
        self._on_tick = None

    def is_running(self) -> bool:
        return self._timer.isActive()

    def _handle_timeout(self) -> None:
        if self._on_tick is not None:
            self._on_tick()

"""Watches the presentation lock during a session and applies the grace-period policy.

An ``unlocked`` transition opens a grace window. Re-locking inside the window
cancels the pending violation; letting it run out confirms the violation once
and ends monitoring for the session. The grace window is counted down by its
own scheduler so it runs independently of the question timer.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from enum import Enum
import logging

from quizlock.constants.quiz_constants import PROCTORING_GRACE_SECONDS
from quizlock.core.errors import LockdownUnavailable
from quizlock.core.services.countdown_scheduler import CountdownScheduler
from quizlock.core.services.presentation_lock import LockState, PresentationLock

logger = logging.getLogger(__name__)


class ProctoringEvent(Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    VIOLATION_PENDING = "violation_pending"
    VIOLATION_CANCELLED = "violation_cancelled"
    VIOLATION_CONFIRMED = "violation_confirmed"


class ProctoringMonitor:
    """Session-scoped observer of a ``PresentationLock``."""

    def __init__(
        self,
        lock: PresentationLock,
        grace_scheduler: CountdownScheduler,
        grace_seconds: int = PROCTORING_GRACE_SECONDS,
    ) -> None:
        self._lock = lock
        self._grace_scheduler = grace_scheduler
        self._grace_seconds = grace_seconds
        self._listeners: dict[ProctoringEvent, list[Callable[[], None]]] = defaultdict(list)
        self._unsubscribe: Callable[[], None] | None = None
        self._engaged = False
        self._monitoring = False
        self._violation_pending = False
        self._grace_remaining = 0

    def on(self, event: ProctoringEvent, callback: Callable[[], None]) -> None:
        self._listeners[event].append(callback)

    @property
    def grace_seconds(self) -> int:
        return self._grace_seconds

    @property
    def grace_remaining(self) -> int:
        return self._grace_remaining

    @property
    def violation_pending(self) -> bool:
        return self._violation_pending

    @property
    def is_monitoring(self) -> bool:
        return self._monitoring

    def enter_lockdown(self) -> None:
        """Request the exclusive presentation mode and start watching transitions.

        Raises:
            LockdownUnavailable: the platform denied the request.
        """
        if self._engaged:
            self.teardown()
        try:
            self._lock.request_lock()
        except LockdownUnavailable:
            logger.warning("Presentation lock request denied")
            raise
        self._engaged = True
        self._monitoring = True
        self._violation_pending = False
        self._grace_remaining = 0
        self._unsubscribe = self._lock.subscribe(self._handle_transition)
        self._lock.set_input_suppressed(True)
        logger.info("Lockdown engaged; monitoring presentation lock")

    def resume_lockdown(self) -> bool:
        """Re-request the lock during a pending violation. False if nothing was pending or the request failed."""
        if not self._monitoring or not self._violation_pending:
            return False
        try:
            self._lock.request_lock()
        except LockdownUnavailable:
            logger.warning("Presentation lock could not be restored")
            return False
        return self._lock.is_locked()

    def teardown(self) -> None:
        """Stop monitoring, release input suppression and leave the lock. Idempotent."""
        self._grace_scheduler.stop()
        self._violation_pending = False
        self._grace_remaining = 0
        self._monitoring = False
        if not self._engaged:
            return
        self._engaged = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._lock.set_input_suppressed(False)
        try:
            self._lock.exit_lock()
        except Exception:  # the user may already have left full screen
            logger.warning("Failed to exit presentation lock", exc_info=True)
        logger.info("Lockdown released")

    def _handle_transition(self, state: LockState) -> None:
        if not self._monitoring:
            return
        if state is LockState.UNLOCKED:
            self._emit(ProctoringEvent.UNLOCKED)
            if not self._violation_pending:
                self._open_grace_window()
        else:
            self._emit(ProctoringEvent.LOCKED)
            if self._violation_pending:
                self._cancel_grace_window()

    def _open_grace_window(self) -> None:
        self._violation_pending = True
        self._grace_remaining = self._grace_seconds
        self._grace_scheduler.start(self._tick_grace)
        logger.info("Presentation lock lost; grace window of %ss started", self._grace_seconds)
        self._emit(ProctoringEvent.VIOLATION_PENDING)

    def _cancel_grace_window(self) -> None:
        self._grace_scheduler.stop()
        self._violation_pending = False
        self._grace_remaining = 0
        logger.info("Presentation lock restored inside the grace window")
        self._emit(ProctoringEvent.VIOLATION_CANCELLED)

    def _tick_grace(self) -> None:
        if not self._violation_pending:
            return
        self._grace_remaining -= 1
        if self._grace_remaining > 0:
            return
        self._grace_scheduler.stop()
        self._violation_pending = False
        self._monitoring = False
        logger.warning("Grace window elapsed; proctoring violation confirmed")
        self._emit(ProctoringEvent.VIOLATION_CONFIRMED)

    def _emit(self, event: ProctoringEvent) -> None:
        for callback in list(self._listeners[event]):
            callback()

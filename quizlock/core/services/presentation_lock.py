"""Capability interface for the exclusive, distraction-free presentation mode."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Protocol


class LockState(Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class PresentationLock(Protocol):
    """Platform capability injected into the proctoring monitor.

    ``request_lock`` raises ``LockdownUnavailable`` when the platform denies the
    request. A denial is never reported through ``subscribe``; subscribers only
    see real transitions of the display surface.
    """

    def request_lock(self) -> None: ...

    def exit_lock(self) -> None: ...

    def is_locked(self) -> bool: ...

    def subscribe(self, callback: Callable[[LockState], None]) -> Callable[[], None]:
        """Register a transition callback and return a function that removes it."""
        ...

    def set_input_suppressed(self, suppressed: bool) -> None: ...

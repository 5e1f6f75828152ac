"""Runs blocking calls on a worker pool and hands results back to the Qt main thread."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot


class _Completion(QObject):
    """Lives on the main thread; worker emissions arrive here as queued signals."""

    succeeded = Signal(object)
    failed = Signal(object)

    def __init__(
        self,
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
        on_done: Callable[["_Completion"], None],
    ) -> None:
        super().__init__()
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_done = on_done
        self.succeeded.connect(self._deliver_success)
        self.failed.connect(self._deliver_failure)

    @Slot(object)
    def _deliver_success(self, result: Any) -> None:
        self._on_done(self)
        self._on_success(result)

    @Slot(object)
    def _deliver_failure(self, error: Exception) -> None:
        self._on_done(self)
        self._on_failure(error)


class _Job(QRunnable):
    def __init__(self, fn: Callable[[], Any], completion: _Completion) -> None:
        super().__init__()
        self._fn = fn
        self._completion = completion

    def run(self) -> None:
        try:
            result = self._fn()
        except Exception as exc:
            self._completion.failed.emit(exc)
            return
        self._completion.succeeded.emit(result)


class QtTaskRunner:
    """Dispatches ``fn`` to a ``QThreadPool``; exactly one callback runs afterwards."""

    def __init__(self, pool: QThreadPool | None = None) -> None:
        self._pool = pool or QThreadPool.globalInstance()
        self._pending: set[_Completion] = set()

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        completion = _Completion(on_success, on_failure, self._pending.discard)
        self._pending.add(completion)
        self._pool.start(_Job(fn, completion))

    def pending_count(self) -> int:
        return len(self._pending)

    def wait_for_done(self, timeout_ms: int = -1) -> bool:
        return self._pool.waitForDone(timeout_ms)

from __future__ import annotations

import threading

from PySide6.QtTest import QTest

from quizlock.core.services.task_runner import QtTaskRunner


def _drain(runner: QtTaskRunner, timeout_ms: int = 2000) -> None:
    runner.wait_for_done(timeout_ms)
    waited = 0
    while runner.pending_count() and waited < timeout_ms:
        QTest.qWait(10)
        waited += 10


def test_success_is_delivered_on_the_calling_thread(qt_app):
    runner = QtTaskRunner()
    results = []
    main_thread = threading.get_ident()

    def record(value) -> None:
        results.append((value, threading.get_ident() == main_thread))

    runner.submit(lambda: 21 * 2, record, lambda exc: results.append(exc))
    _drain(runner)

    assert results == [(42, True)]
    assert runner.pending_count() == 0


def test_failure_is_delivered_to_the_failure_callback(qt_app):
    runner = QtTaskRunner()
    successes, failures = [], []

    def boom():
        raise ValueError("bad payload")

    runner.submit(boom, successes.append, failures.append)
    _drain(runner)

    assert successes == []
    assert len(failures) == 1
    assert isinstance(failures[0], ValueError)

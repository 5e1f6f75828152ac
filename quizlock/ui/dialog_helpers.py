"""Helper functions for common dialog patterns in the learner UI."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_start_quiz(parent: QWidget, title: str, rules: str) -> bool:
    """Show the quiz rules and ask whether to start.

    Args:
        parent: Parent widget for the dialog
        title: Quiz title shown in the dialog heading
        rules: Rules text describing the time limit and proctoring

    Returns:
        True if user confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        f"Start '{title}'?",
        rules,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_abandon_quiz(parent: QWidget) -> bool:
    """Ask before closing the window while a quiz is running.

    Returns:
        True if user confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Quiz in progress",
        "Closing now discards this attempt without submitting it. Close anyway?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)

"""Component showing the outcome of a finished session."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFormLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from quizlock.constants.ui_constants import (
    RESULT_ANALYTICS_PENDING,
    RESULT_BACK_BUTTON,
    RESULT_FAILED_TITLE,
    RESULT_TITLE,
)
from quizlock.core.session_controller import SessionController
from quizlock.core.session_state import SessionPhase
from quizlock.styling.styles import Styles


class ResultPanel(QWidget):
    """Score, coins and class statistics, or the reason the submission failed."""

    def __init__(self, controller: SessionController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel(RESULT_TITLE, self)
        self.title_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.title_label)

        self.reason_label = QLabel("", self)
        self.reason_label.setWordWrap(True)
        self.reason_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.reason_label)

        self.details_widget = QWidget(self)
        form = QFormLayout()
        self.details_widget.setLayout(form)
        self.score_label = QLabel("", self)
        self.accuracy_label = QLabel("", self)
        self.coins_label = QLabel("", self)
        self.balance_label = QLabel("", self)
        self.average_label = QLabel(RESULT_ANALYTICS_PENDING, self)
        self.success_rate_label = QLabel("", self)
        self.completed_label = QLabel("", self)
        form.addRow("Score:", self.score_label)
        form.addRow("Accuracy:", self.accuracy_label)
        form.addRow("Coins earned:", self.coins_label)
        form.addRow("New balance:", self.balance_label)
        form.addRow("Class average:", self.average_label)
        form.addRow("Success rate:", self.success_rate_label)
        form.addRow("Submitted at:", self.completed_label)
        layout.addWidget(self.details_widget)
        layout.addStretch()

        self.back_button = QPushButton(RESULT_BACK_BUTTON, self)
        self.back_button.clicked.connect(self._handle_back_click)
        layout.addWidget(self.back_button, alignment=Qt.AlignCenter)

    def refresh(self) -> None:
        state = self.controller.state
        if state is None:
            return
        if state.phase is SessionPhase.FAILED:
            self.title_label.setText(RESULT_FAILED_TITLE)
            self.title_label.setStyleSheet(Styles.get_status_style(success=False))
            self.reason_label.setText(state.error.describe() if state.error is not None else "")
            self.details_widget.setVisible(False)
            return

        result = state.result
        if result is None:
            return
        self.title_label.setText(f"{RESULT_TITLE}: {state.quiz.title}")
        self.title_label.setStyleSheet(Styles.get_status_style(success=True))
        self.reason_label.setText(result.reason.describe())
        self.details_widget.setVisible(True)
        self.score_label.setText(f"{result.score} / {result.total_questions}")
        self.accuracy_label.setText(f"{result.accuracy_percent:.2f}%")
        self.coins_label.setText(str(result.earned_coins))
        self.balance_label.setText("—" if result.new_balance is None else str(result.new_balance))
        self.completed_label.setText(result.completed_at.astimezone().strftime("%H:%M:%S"))
        if result.has_analytics:
            average = "—" if result.average_score is None else f"{result.average_score:.2f}"
            rate = "—" if result.success_rate is None else f"{result.success_rate:.2f}%"
            self.average_label.setText(average)
            self.success_rate_label.setText(rate)
        else:
            self.average_label.setText(RESULT_ANALYTICS_PENDING)
            self.success_rate_label.setText("")

    def _handle_back_click(self) -> None:
        if self.controller.dismiss():
            self.controller.load_quizzes()

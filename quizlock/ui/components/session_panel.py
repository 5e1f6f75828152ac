"""Component for answering the questions of a running session."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizlock.constants.quiz_constants import TIME_LIMIT_EMPHASIS_WINDOW_SECONDS
from quizlock.constants.ui_constants import (
    INTRO_TEMPLATE,
    OVERLAY_RESUME_BUTTON,
    OVERLAY_TEMPLATE,
    OVERLAY_TITLE,
    SESSION_NEXT_BUTTON,
    SESSION_PROGRESS_TEMPLATE,
    SESSION_SUBMIT_BUTTON,
    SESSION_SUBMITTING_MESSAGE,
    SESSION_TIMER_TEMPLATE,
)
from quizlock.core.markdown_math_renderer import MarkdownMathRenderer
from quizlock.core.session_controller import SessionController
from quizlock.core.session_state import SessionPhase, SessionState
from quizlock.styling.styles import Styles
from quizlock.ui.question_renderer import render_question_document


class SessionPanel(QWidget):
    """UI component for the question view, countdown and violation overlay."""

    def __init__(self, controller: SessionController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._font_size = 14
        self._shown_key: tuple[str, int] | None = None
        self.option_buttons: list[QPushButton] = []
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.progress_label = QLabel("", self)
        self.progress_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.progress_label)
        header_row.addStretch()
        self.time_limit_label = QLabel("", self)
        self.time_limit_label.setStyleSheet(Styles.get_countdown_style(self._font_size, emphasized=False))
        header_row.addWidget(self.time_limit_label)
        layout.addLayout(header_row)

        self.time_limit_progress = QProgressBar(self)
        self.time_limit_progress.setRange(0, 1000)
        self.time_limit_progress.setTextVisible(False)
        layout.addWidget(self.time_limit_progress)

        self.overlay_label = QLabel("", self)
        self.overlay_label.setAlignment(Qt.AlignCenter)
        self.overlay_label.setWordWrap(True)
        self.overlay_label.setStyleSheet(Styles.get_overlay_style())
        self.overlay_label.setVisible(False)
        layout.addWidget(self.overlay_label)
        self.resume_button = QPushButton(OVERLAY_RESUME_BUTTON, self)
        self.resume_button.clicked.connect(self._handle_resume_click)
        self.resume_button.setVisible(False)
        layout.addWidget(self.resume_button, alignment=Qt.AlignCenter)

        self.preview_view = QWebEngineView(self)
        self.preview_view.setContextMenuPolicy(Qt.NoContextMenu)
        layout.addWidget(self.preview_view, stretch=1)

        self.options_layout = QVBoxLayout()
        layout.addLayout(self.options_layout)
        self.option_group = QButtonGroup(self)
        self.option_group.setExclusive(True)
        self.option_group.idClicked.connect(self._handle_option_clicked)

        footer_row = QHBoxLayout()
        self.status_label = QLabel("", self)
        footer_row.addWidget(self.status_label)
        footer_row.addStretch()
        self.next_button = QPushButton(SESSION_NEXT_BUTTON, self)
        self.next_button.clicked.connect(self._handle_next_click)
        footer_row.addWidget(self.next_button)
        layout.addLayout(footer_row)

    def reset_state(self) -> None:
        self._shown_key = None
        self.overlay_label.setVisible(False)
        self.resume_button.setVisible(False)
        self.status_label.setText("")
        self.preview_view.setHtml("")
        self._rebuild_option_buttons([])

    def refresh(self) -> None:
        """Sync the view with the controller; the prompt is re-rendered only on question change."""
        state = self.controller.state
        if state is None:
            return
        key = (state.quiz.id, state.current_index)
        if key != self._shown_key:
            self._shown_key = key
            self._display_question(state)
        self._update_time_limit_indicator(state)
        self._update_overlay(state)
        self._update_controls(state)

    def _display_question(self, state: SessionState) -> None:
        question = state.current_question
        number = state.current_index + 1
        total = state.quiz.question_count
        self.progress_label.setText(SESSION_PROGRESS_TEMPLATE.format(current=number, total=total))
        self.preview_view.setHtml(render_question_document(question, number, total, self._font_size))
        self._rebuild_option_buttons(question.options)
        self.next_button.setText(SESSION_SUBMIT_BUTTON if state.is_last_question else SESSION_NEXT_BUTTON)

    def _rebuild_option_buttons(self, options: tuple[str, ...] | list[str]) -> None:
        for button in self.option_buttons:
            self.option_group.removeButton(button)
            self.options_layout.removeWidget(button)
            button.deleteLater()
        self.option_buttons = []
        for idx, option in enumerate(options):
            letter = chr(ord("A") + idx)
            text = f"{letter}. {MarkdownMathRenderer.render_plain_label(option)}"
            button = QPushButton(text, self)
            button.setCheckable(True)
            button.setStyleSheet(f"font-size: {self._font_size}pt; text-align: left;")
            self.option_group.addButton(button, idx)
            self.options_layout.addWidget(button)
            self.option_buttons.append(button)

    def _update_time_limit_indicator(self, state: SessionState) -> None:
        total_seconds = self.controller.config.question_budget_seconds
        remaining = max(0, state.seconds_remaining)
        fraction = 0.0 if total_seconds <= 0 else max(0.0, min(1.0, remaining / total_seconds))
        self.time_limit_progress.setValue(int(fraction * 1000))
        self.time_limit_label.setText(SESSION_TIMER_TEMPLATE.format(seconds=remaining))
        emphasized = state.is_live and 0 < remaining <= min(TIME_LIMIT_EMPHASIS_WINDOW_SECONDS, total_seconds)
        self.time_limit_label.setStyleSheet(
            Styles.get_countdown_style(self._font_size, emphasized, blink_state=(remaining % 2 == 0))
        )

    def _update_overlay(self, state: SessionState) -> None:
        breached = state.phase is SessionPhase.PROCTORING_GRACE_BREACH
        self.overlay_label.setVisible(breached)
        self.resume_button.setVisible(breached)
        if breached:
            seconds = self.controller.grace_remaining
            self.overlay_label.setText(f"{OVERLAY_TITLE}\n\n{OVERLAY_TEMPLATE.format(seconds=seconds)}")

    def _update_controls(self, state: SessionState) -> None:
        active = state.phase is SessionPhase.ACTIVE and not state.in_intro
        for idx, button in enumerate(self.option_buttons):
            button.setEnabled(active)
            if button.isChecked() != (state.current_answer == idx):
                button.setChecked(state.current_answer == idx)
        if state.is_last_question:
            self.next_button.setEnabled(self.controller.can_submit())
        else:
            self.next_button.setEnabled(self.controller.can_advance())
        if state.phase is SessionPhase.SUBMITTING:
            self.status_label.setText(SESSION_SUBMITTING_MESSAGE)
        elif state.in_intro:
            self.status_label.setText(INTRO_TEMPLATE.format(seconds=state.intro_remaining))
        else:
            self.status_label.setText("")

    def _handle_option_clicked(self, option_index: int) -> None:
        self.controller.select_option(option_index)
        self.refresh()

    def _handle_resume_click(self) -> None:
        self.controller.resume_lockdown()
        self.refresh()

    def _handle_next_click(self) -> None:
        state = self.controller.state
        if state is None:
            return
        if state.is_last_question:
            self.controller.submit()
        else:
            self.controller.advance()
        self.refresh()

    def apply_font_size(self, font_size: int) -> None:
        self._font_size = font_size
        self._shown_key = None
        self.refresh()

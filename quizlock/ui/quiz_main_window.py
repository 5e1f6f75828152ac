"""Qt main window hosting the listing, session and result views."""

from __future__ import annotations

from enum import Enum, auto

from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quizlock.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from quizlock.constants.ui_constants import DEFAULT_GAME_FONT_SIZE, VIEW_REFRESH_INTERVAL_MS, WINDOW_TITLE
from quizlock.core.services.countdown_scheduler import CountdownScheduler
from quizlock.core.services.proctoring_monitor import ProctoringMonitor
from quizlock.core.services.submission_client import SubmissionClient
from quizlock.core.services.task_runner import QtTaskRunner
from quizlock.core.session_controller import NoticeKind, SessionController, SessionNotice
from quizlock.core.session_state import SessionConfig, SessionPhase
from quizlock.styling.styles import Styles
from quizlock.ui.components.listing_panel import ListingPanel
from quizlock.ui.components.result_panel import ResultPanel
from quizlock.ui.components.session_panel import SessionPanel
from quizlock.ui.dialog_helpers import confirm_abandon_quiz, show_error, show_info
from quizlock.ui.window_lock import WindowPresentationLock


class ViewMode(Enum):
    LISTING = auto()
    SESSION = auto()
    RESULT = auto()


_PHASE_VIEWS = {
    SessionPhase.LISTING: ViewMode.LISTING,
    SessionPhase.REGISTERING: ViewMode.LISTING,
    SessionPhase.ACTIVE: ViewMode.SESSION,
    SessionPhase.PROCTORING_GRACE_BREACH: ViewMode.SESSION,
    SessionPhase.SUBMITTING: ViewMode.SESSION,
    SessionPhase.COMPLETED: ViewMode.RESULT,
    SessionPhase.FAILED: ViewMode.RESULT,
}


class QuizMainWindow(QMainWindow):
    """Main window; owns the session controller and its Qt-backed collaborators."""

    def __init__(self, client: SubmissionClient, config: SessionConfig | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.client = client

        self.presentation_lock = WindowPresentationLock(self)
        monitor = ProctoringMonitor(self.presentation_lock, CountdownScheduler(parent=self))
        self.controller = SessionController(
            client,
            monitor,
            CountdownScheduler(parent=self),
            QtTaskRunner(),
            config,
        )
        self.controller.add_listener(self._handle_notice)

        self._mode = ViewMode.LISTING
        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())
        self._apply_font_size(DEFAULT_GAME_FONT_SIZE)

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        header_row = QHBoxLayout()
        self.header_label = QLabel(f"{APP_NAME} v{APP_VERSION}", self)
        header_row.addWidget(self.header_label)
        header_row.addStretch()
        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        header_row.addWidget(self.about_button)
        root_layout.addLayout(header_row)

        self.mode_stack = QStackedWidget(self)
        self.listing_panel = ListingPanel(self.controller, self)
        self.session_panel = SessionPanel(self.controller, self)
        self.result_panel = ResultPanel(self.controller, self)
        self.mode_stack.addWidget(self.listing_panel)
        self.mode_stack.addWidget(self.session_panel)
        self.mode_stack.addWidget(self.result_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(ViewMode.LISTING)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(VIEW_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == ViewMode.SESSION:
            self.session_panel.refresh()

    def _set_mode(self, mode: ViewMode) -> None:
        self._mode = mode
        index_map = {ViewMode.LISTING: 0, ViewMode.SESSION: 1, ViewMode.RESULT: 2}
        self.mode_stack.setCurrentIndex(index_map[mode])
        self.about_button.setEnabled(mode != ViewMode.SESSION)

    def _handle_notice(self, notice: SessionNotice) -> None:
        if notice.kind is NoticeKind.QUIZZES_LOADED:
            self.listing_panel.refresh_listings()
        elif notice.kind is NoticeKind.PHASE_CHANGED:
            self._sync_with_phase()
        elif notice.kind in (
            NoticeKind.QUESTION_CHANGED,
            NoticeKind.VIOLATION_PENDING,
            NoticeKind.VIOLATION_CANCELLED,
        ):
            self.session_panel.refresh()
        elif notice.kind is NoticeKind.RESULT_UPDATED:
            self.result_panel.refresh()
        elif notice.kind is NoticeKind.ERROR:
            if self.controller.phase is SessionPhase.FAILED:
                # The result view shows the failure itself.
                return
            show_error(self, "QuizLock", notice.message)

    def _sync_with_phase(self) -> None:
        phase = self.controller.phase
        mode = _PHASE_VIEWS[phase]
        if mode == ViewMode.SESSION and self._mode != ViewMode.SESSION:
            self.session_panel.reset_state()
        self._set_mode(mode)
        self.listing_panel.show_phase(phase)
        if mode == ViewMode.SESSION:
            self.session_panel.refresh()
        elif mode == ViewMode.RESULT:
            self.result_panel.refresh()

    def _apply_font_size(self, font_size: int) -> None:
        self.listing_panel.apply_font_size(font_size)
        self.session_panel.apply_font_size(font_size)

    def _handle_about(self) -> None:
        details = f"{APP_NAME} v{APP_VERSION}\nLicense: {APP_LICENSE}\n\n{APP_ABOUT_TEXT}"
        show_info(self, f"About {APP_NAME}", details)

    def closeEvent(self, event: QCloseEvent) -> None:
        state = self.controller.state
        if state is not None and state.is_live and not confirm_abandon_quiz(self):
            event.ignore()
            return
        self.refresh_timer.stop()
        self.controller.shutdown()
        self.client.close()
        super().closeEvent(event)

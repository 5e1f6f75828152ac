"""Component listing the learner's quizzes."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizlock.constants.about import RULES_TEXT
from quizlock.constants.ui_constants import (
    EMPTY_QUIZ_TITLE,
    LISTING_ATTEMPTED_TEMPLATE,
    LISTING_EMPTY_STATE,
    LISTING_OPEN_TEMPLATE,
    LISTING_REFRESH_BUTTON,
    LISTING_REGISTERING_MESSAGE,
    LISTING_START_BUTTON,
    LISTING_TITLE,
)
from quizlock.core.errors import PreconditionFailed
from quizlock.core.models import QuizListing
from quizlock.core.session_controller import SessionController
from quizlock.core.session_state import SessionPhase
from quizlock.styling.styles import Styles
from quizlock.ui.dialog_helpers import confirm_start_quiz, show_warning


class ListingPanel(QWidget):
    """UI component for picking a quiz to start."""

    def __init__(self, controller: SessionController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._snapshot: list[tuple[str, bool]] = []
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel(LISTING_TITLE, self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.title_label)

        self.quiz_list = QListWidget(self)
        self.quiz_list.setAlternatingRowColors(True)
        self.quiz_list.currentRowChanged.connect(self._update_buttons)
        self.quiz_list.itemDoubleClicked.connect(lambda _item: self._handle_start_click())
        layout.addWidget(self.quiz_list, stretch=1)

        self.empty_label = QLabel(LISTING_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        self.status_label = QLabel("", self)
        self.status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.status_label)

        button_row = QHBoxLayout()
        self.refresh_button = QPushButton(LISTING_REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self.controller.load_quizzes)
        button_row.addWidget(self.refresh_button)
        button_row.addStretch()
        self.start_button = QPushButton(LISTING_START_BUTTON, self)
        self.start_button.clicked.connect(self._handle_start_click)
        button_row.addWidget(self.start_button)
        layout.addLayout(button_row)

        self._update_buttons()

    def refresh_listings(self) -> None:
        listings = self.controller.listings
        snapshot = [(listing.quiz.id, listing.attempted) for listing in listings]
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        self.quiz_list.clear()
        for listing in listings:
            item = QListWidgetItem(self._describe(listing), self.quiz_list)
            item.setData(Qt.UserRole, listing.quiz.id)
            if listing.attempted:
                item.setForeground(Qt.gray)
        self.empty_label.setVisible(not listings)
        self._update_buttons()

    def show_phase(self, phase: SessionPhase) -> None:
        registering = phase is SessionPhase.REGISTERING
        self.status_label.setText(LISTING_REGISTERING_MESSAGE if registering else "")
        self.quiz_list.setEnabled(not registering)
        self._update_buttons()

    @staticmethod
    def _describe(listing: QuizListing) -> str:
        quiz = listing.quiz
        if listing.attempted:
            return LISTING_ATTEMPTED_TEMPLATE.format(
                title=quiz.title,
                score=listing.score if listing.score is not None else "?",
                total=listing.total_questions if listing.total_questions is not None else "?",
            )
        return LISTING_OPEN_TEMPLATE.format(title=quiz.title, count=quiz.question_count)

    def _selected_listing(self) -> QuizListing | None:
        row = self.quiz_list.currentRow()
        listings = self.controller.listings
        if row < 0 or row >= len(listings):
            return None
        return listings[row]

    def _update_buttons(self, *_args) -> None:
        listing = self._selected_listing()
        idle = self.controller.phase is SessionPhase.LISTING
        self.start_button.setEnabled(idle and listing is not None and not listing.attempted)
        self.refresh_button.setEnabled(idle)

    def _handle_start_click(self) -> None:
        listing = self._selected_listing()
        if listing is None or listing.attempted:
            return
        if not listing.quiz.questions:
            show_warning(self, EMPTY_QUIZ_TITLE, "This quiz has no questions yet. Please contact the administrator.")
            return
        rules = RULES_TEXT.format(
            budget=self.controller.config.question_budget_seconds,
            grace=self.controller.grace_seconds,
        )
        if not confirm_start_quiz(self, listing.quiz.title, rules):
            return
        try:
            self.controller.start_quiz(listing)
        except PreconditionFailed as exc:
            show_warning(self, "Cannot start quiz", str(exc))

    def apply_font_size(self, font_size: int) -> None:
        self.quiz_list.setStyleSheet(f"font-size: {font_size}pt;")
        self.start_button.setStyleSheet(f"font-size: {font_size}pt;")

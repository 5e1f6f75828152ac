"""State owned by a single quiz attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from quizlock.constants.quiz_constants import INTRO_COUNTDOWN_SECONDS, QUESTION_BUDGET_SECONDS
from quizlock.core.errors import SubmissionFailed
from quizlock.core.models import Question, QuizDefinition, SessionResult, SubmitReason


class SessionPhase(Enum):
    LISTING = auto()
    REGISTERING = auto()
    ACTIVE = auto()
    PROCTORING_GRACE_BREACH = auto()
    SUBMITTING = auto()
    COMPLETED = auto()
    FAILED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.COMPLETED, SessionPhase.FAILED)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Tunables for a session; the grace period belongs to the proctoring monitor."""

    question_budget_seconds: int = QUESTION_BUDGET_SECONDS
    # Freeze the question countdown while the violation overlay is shown.
    pause_on_violation: bool = True
    # Ticks shown as a 3-2-1 countdown before the first question becomes answerable.
    intro_countdown_seconds: int = INTRO_COUNTDOWN_SECONDS


class SubmissionGuard:
    """Check-and-set token: the first trigger to acquire it owns the finalize call."""

    __slots__ = ("_reason",)

    def __init__(self) -> None:
        self._reason: SubmitReason | None = None

    def acquire(self, reason: SubmitReason) -> bool:
        if self._reason is not None:
            return False
        self._reason = reason
        return True

    @property
    def taken(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> SubmitReason | None:
        return self._reason


@dataclass(slots=True)
class SessionState:
    quiz: QuizDefinition
    answers: list[int | None]
    seconds_remaining: int
    phase: SessionPhase = SessionPhase.REGISTERING
    current_index: int = 0
    violation_count: int = 0
    intro_remaining: int = 0
    submission_guard: SubmissionGuard = field(default_factory=SubmissionGuard)
    result: SessionResult | None = None
    error: SubmissionFailed | None = None

    @classmethod
    def begin(cls, quiz: QuizDefinition, budget_seconds: int) -> "SessionState":
        return cls(
            quiz=quiz,
            answers=[None] * quiz.question_count,
            seconds_remaining=budget_seconds,
        )

    @property
    def is_live(self) -> bool:
        """True while questions are on screen (including the grace overlay)."""
        return self.phase in (SessionPhase.ACTIVE, SessionPhase.PROCTORING_GRACE_BREACH)

    @property
    def in_intro(self) -> bool:
        return self.intro_remaining > 0

    @property
    def current_question(self) -> Question:
        return self.quiz.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == self.quiz.question_count - 1

    @property
    def current_answer(self) -> int | None:
        return self.answers[self.current_index]

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer is not None)

    def record_answer(self, option_index: int) -> None:
        options = self.current_question.options
        if not 0 <= option_index < len(options):
            raise ValueError(f"Option index {option_index} out of range")
        self.answers[self.current_index] = option_index

    def move_to(self, index: int, budget_seconds: int) -> None:
        if not 0 <= index < self.quiz.question_count:
            raise IndexError(f"Question index {index} out of range")
        self.current_index = index
        self.seconds_remaining = budget_seconds

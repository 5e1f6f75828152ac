"""Domain models for the quiz session client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question as served to the learner (no correct answer)."""

    prompt: str
    options: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class QuizDefinition:
    """Read-only snapshot of a quiz taken from the content service."""

    id: str
    title: str
    questions: tuple[Question, ...]
    description: str = ""

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True, slots=True)
class QuizListing:
    """Entry of the learner's quiz list."""

    quiz: QuizDefinition
    attempted: bool = False
    score: int | None = None
    total_questions: int | None = None


class SubmitReason(Enum):
    """What triggered the one and only finalize call of a session."""

    MANUAL = "manual"
    TIMEOUT = "timeout"
    PROCTORING = "proctoring"

    def describe(self) -> str:
        if self is SubmitReason.TIMEOUT:
            return "Time ran out on the last question; your answers were submitted automatically."
        if self is SubmitReason.PROCTORING:
            return "Secure full screen was left for too long; your answers were submitted automatically."
        return "You submitted the quiz."


@dataclass(slots=True)
class SessionResult:
    """Outcome shown after a successful finalize."""

    score: int
    total_questions: int
    earned_coins: int
    new_balance: int | None
    reason: SubmitReason
    accuracy: float | None = None
    average_score: float | None = None
    success_rate: float | None = None
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def accuracy_percent(self) -> float:
        """Accuracy from the service, or score / total * 100 when it was omitted."""
        if self.accuracy is not None:
            return self.accuracy
        if self.total_questions <= 0:
            return 0.0
        return self.score / self.total_questions * 100

    @property
    def has_analytics(self) -> bool:
        return self.average_score is not None or self.success_rate is not None


@dataclass(frozen=True, slots=True)
class RegistrationToken:
    """Proof that the service accepted the registration for a quiz."""

    quiz_id: str
    message: str

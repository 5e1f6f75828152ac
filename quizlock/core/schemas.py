"""Wire schemas for the quiz service contract (camelCase JSON)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from quizlock.core.models import Question, QuizDefinition, QuizListing


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionPayload(WireModel):
    question: str
    options: list[str] = Field(min_length=2)


class QuizStatusPayload(WireModel):
    """One row of ``GET /quiz/status/me``."""

    id: str
    title: str
    description: str = ""
    attempted: bool = False
    score: int | None = None
    total_questions: int | None = None
    questions: list[QuestionPayload] = Field(default_factory=list)

    def to_listing(self) -> QuizListing:
        quiz = QuizDefinition(
            id=self.id,
            title=self.title,
            description=self.description,
            questions=tuple(
                Question(prompt=item.question, options=tuple(item.options))
                for item in self.questions
            ),
        )
        return QuizListing(
            quiz=quiz,
            attempted=self.attempted,
            score=self.score,
            total_questions=self.total_questions,
        )


class MessagePayload(WireModel):
    message: str = ""


class SubmitPayload(WireModel):
    answers: list[int | None]
    violations: int = 0


class ScoreReport(WireModel):
    """Authoritative score returned by ``POST /quiz/submit/{quizId}``."""

    score: int
    total_questions: int
    earned_coins: int = 0
    new_balance: int | None = None
    accuracy: float | None = None
    message: str = ""


class AggregateStats(WireModel):
    """Class-wide statistics from ``GET /quiz/{quizId}/analytics``."""

    average_score: float
    success_rate: float
    total_attempts: int = 0

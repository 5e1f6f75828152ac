"""In-memory quizzes, registrations, attempts and balances for the development service."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock

from quizlock.core.schemas import (
    AggregateStats,
    QuestionPayload,
    QuizStatusPayload,
    ScoreReport,
)


class StoreError(Exception):
    status_code = 400


class QuizNotFoundError(StoreError):
    status_code = 404


class DuplicateRegistrationError(StoreError):
    pass


class DuplicateAttemptError(StoreError):
    pass


class InvalidSubmissionError(StoreError):
    pass


@dataclass(slots=True)
class StoredQuestion:
    prompt: str
    options: list[str]
    correct_option_index: int
    coins: int = 10


@dataclass(slots=True)
class StoredQuiz:
    id: str
    title: str
    questions: list[StoredQuestion]
    description: str = ""
    participants: set[str] = field(default_factory=set)


@dataclass(slots=True)
class Attempt:
    quiz_id: str
    user_id: str
    answers: list[int | None]
    score: int
    earned_coins: int
    violations: int


class QuizStore:
    """Thread-safe store; uvicorn serves sync endpoints from a worker pool."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, StoredQuiz] = {}
        self._attempts: dict[tuple[str, str], Attempt] = {}
        self._balances: dict[str, int] = {}
        self._tokens: dict[str, str] = {}

    # --- Setup ---

    def add_quiz(self, quiz: StoredQuiz) -> None:
        with self._lock:
            self._quizzes[quiz.id] = quiz

    def add_user(self, token: str, user_id: str, balance: int = 0) -> None:
        with self._lock:
            self._tokens[token] = user_id
            self._balances.setdefault(user_id, balance)

    def user_for_token(self, token: str) -> str | None:
        with self._lock:
            return self._tokens.get(token)

    def balance_of(self, user_id: str) -> int:
        with self._lock:
            return self._balances.get(user_id, 0)

    # --- Learner operations ---

    def status_for(self, user_id: str) -> list[QuizStatusPayload]:
        with self._lock:
            rows: list[QuizStatusPayload] = []
            for quiz in self._quizzes.values():
                attempt = self._attempts.get((quiz.id, user_id))
                questions = [] if attempt else [
                    QuestionPayload(question=q.prompt, options=list(q.options)) for q in quiz.questions
                ]
                rows.append(
                    QuizStatusPayload(
                        id=quiz.id,
                        title=quiz.title,
                        description=quiz.description,
                        attempted=attempt is not None,
                        score=attempt.score if attempt else None,
                        total_questions=len(quiz.questions),
                        questions=questions,
                    )
                )
            return rows

    def register(self, user_id: str, quiz_id: str) -> None:
        with self._lock:
            quiz = self._get_quiz(quiz_id)
            if user_id in quiz.participants:
                raise DuplicateRegistrationError("Already registered for this quiz.")
            quiz.participants.add(user_id)

    def submit(
        self,
        user_id: str,
        quiz_id: str,
        answers: list[int | None],
        violations: int = 0,
    ) -> ScoreReport:
        with self._lock:
            quiz = self._get_quiz(quiz_id)
            # Submitting without a prior registration registers implicitly.
            quiz.participants.add(user_id)
            if len(answers) != len(quiz.questions):
                raise InvalidSubmissionError("Invalid answers submitted")
            if (quiz_id, user_id) in self._attempts:
                raise DuplicateAttemptError("You have already attempted this quiz.")

            score = 0
            earned_coins = 0
            for question, answer in zip(quiz.questions, answers):
                if answer is not None and answer == question.correct_option_index:
                    score += 1
                    earned_coins += question.coins

            self._attempts[(quiz_id, user_id)] = Attempt(
                quiz_id=quiz_id,
                user_id=user_id,
                answers=list(answers),
                score=score,
                earned_coins=earned_coins,
                violations=violations,
            )
            balance = self._balances.get(user_id, 0) + earned_coins
            self._balances[user_id] = balance
            return ScoreReport(
                message="Quiz submitted successfully",
                score=score,
                total_questions=len(quiz.questions),
                earned_coins=earned_coins,
                new_balance=balance,
            )

    def analytics(self, quiz_id: str) -> AggregateStats:
        with self._lock:
            quiz = self._get_quiz(quiz_id)
            attempts = [a for (qid, _), a in self._attempts.items() if qid == quiz_id]
            if not attempts:
                return AggregateStats(average_score=0, success_rate=0, total_attempts=0)
            total = len(attempts)
            passing = sum(1 for a in attempts if a.score >= len(quiz.questions) / 2)
            return AggregateStats(
                average_score=sum(a.score for a in attempts) / total,
                success_rate=passing / total * 100,
                total_attempts=total,
            )

    def _get_quiz(self, quiz_id: str) -> StoredQuiz:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFoundError("Quiz not found")
        return quiz

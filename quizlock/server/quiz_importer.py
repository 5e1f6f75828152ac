"""Load scored quizzes for the development service from a plain-text file.

File format (optional header, then question blocks separated by blank lines
or '---'):

    TITLE: Quiz title
    DESCRIPTION: One line shown in the learner's quiz list

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text   (options A-F, at least two)
    CORRECT: B
    COINS: 10              (optional, coins awarded for a correct answer)

Example:

    Q: What is $2 + 2$?
    A: 3
    B: 4
    CORRECT: B
"""

from __future__ import annotations

from pathlib import Path

from quizlock.constants.quiz_constants import DEFAULT_QUESTION_COINS
from quizlock.server.quiz_store import StoredQuestion, StoredQuiz


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


_OPTION_ORDER = ["A", "B", "C", "D", "E", "F"]


def load_quiz_from_file(file_path: Path, quiz_id: str | None = None) -> StoredQuiz:
    text = file_path.read_text(encoding="utf-8")
    return parse_quiz_text(text, quiz_id=quiz_id or file_path.stem, default_title=file_path.stem)


def parse_quiz_text(text: str, quiz_id: str, default_title: str = "Untitled quiz") -> StoredQuiz:
    title = default_title
    description = ""
    body_lines: list[str] = []
    for raw_line in text.splitlines():
        upper = raw_line.strip().upper()
        if upper.startswith("TITLE:"):
            title = raw_line.split(":", 1)[1].strip() or default_title
        elif upper.startswith("DESCRIPTION:"):
            description = raw_line.split(":", 1)[1].strip()
        else:
            body_lines.append(raw_line)

    questions = [_parse_block(block) for block in _split_blocks(body_lines)]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return StoredQuiz(id=quiz_id, title=title, description=description, questions=questions)


def _split_blocks(lines: list[str]) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in lines:
        stripped = raw_line.strip()
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_block(block: str) -> StoredQuestion:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    coins = DEFAULT_QUESTION_COINS
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("COINS:"):
            raw_value = line.split(":", 1)[1].strip()
            try:
                coins = int(raw_value)
            except ValueError as exc:
                raise QuizImportError("COINS must be an integer.") from exc
            if coins < 0:
                raise QuizImportError("COINS must not be negative.")
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    prompt = "\n".join(question_lines).strip()
    if not prompt:
        raise QuizImportError("Question text missing (Q: ...)")

    letters = _OPTION_ORDER[: len(options)]
    if len(options) < 2 or sorted(options) != letters:
        raise QuizImportError("Options must be consecutive letters starting at A, at least two.")
    option_list = [options[letter].strip() for letter in letters]
    if any(not option for option in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("Each question needs a CORRECT line.")
    if correct_letter not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    return StoredQuestion(
        prompt=prompt,
        options=option_list,
        correct_option_index=letters.index(correct_letter),
        coins=coins,
    )

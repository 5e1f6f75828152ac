from __future__ import annotations

from pathlib import Path

import pytest

from quizlock.server.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_text

SAMPLE = """TITLE: Units
DESCRIPTION: Two quick ones.

Q: What is the SI unit of force?
A: Joule
B: Newton
CORRECT: B
COINS: 15

---

Q: Which of these
spans two lines?
A: This one
B: Not this
C: Nor this
CORRECT: a
"""


def test_parse_header_and_questions():
    quiz = parse_quiz_text(SAMPLE, quiz_id="units")

    assert quiz.id == "units"
    assert quiz.title == "Units"
    assert quiz.description == "Two quick ones."
    assert len(quiz.questions) == 2
    first, second = quiz.questions
    assert first.options == ["Joule", "Newton"]
    assert first.correct_option_index == 1
    assert first.coins == 15
    assert second.prompt == "Which of these\nspans two lines?"
    assert second.correct_option_index == 0
    assert second.coins == 10


def test_title_defaults_to_file_stem(tmp_path: Path):
    path = tmp_path / "algebra.txt"
    path.write_text("Q: $1+1$?\nA: 1\nB: 2\nCORRECT: B\n", encoding="utf-8")

    quiz = load_quiz_from_file(path)

    assert quiz.id == "algebra"
    assert quiz.title == "algebra"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Q: Missing options\nA: only one\nCORRECT: A",
        "Q: Gap\nA: one\nC: three\nCORRECT: A",
        "Q: No answer\nA: one\nB: two",
        "Q: Bad answer\nA: one\nB: two\nCORRECT: D",
        "Q: Coins\nA: one\nB: two\nCORRECT: A\nCOINS: lots",
        "stray text\nQ: Late\nA: one\nB: two\nCORRECT: A",
    ],
)
def test_invalid_files_are_rejected(text):
    with pytest.raises(QuizImportError):
        parse_quiz_text(text, quiz_id="broken")

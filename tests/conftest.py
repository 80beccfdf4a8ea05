# tests/conftest.py

from typing import List, Optional, Sequence

import pytest

from aptitude_core.schema import Question
from aptitude_core.errors import GenerationError


def make_question(n: int, difficulty: str = "medium", correct: int = 0) -> Question:
    return Question(
        text=f"Question {n}?",
        options=(f"A{n}", f"B{n}", f"C{n}", f"D{n}"),
        correct_option_index=correct,
        difficulty=difficulty,
    )


class FakeGenerator:
    """
    In-memory generation collaborator.
    - every question's correct option is index 0
    - fail_next: number of upcoming calls that raise GenerationError
    - short_by: drop that many questions from the next batch
    - on_call: hook run inside the call (to simulate re-entrant callers)
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.fail_next = 0
        self.short_by = 0
        self.on_call = None
        self._counter = 0

    def generate_questions(self, topic: str, difficulty_mix: Sequence[str]) -> List[Question]:
        self.calls.append((topic, list(difficulty_mix)))
        if self.on_call is not None:
            self.on_call()
        if self.fail_next > 0:
            self.fail_next -= 1
            raise GenerationError("scripted failure")

        out = []
        for diff in difficulty_mix:
            self._counter += 1
            out.append(make_question(self._counter, diff))
        if self.short_by:
            out = out[: len(out) - self.short_by]
            self.short_by = 0
        return out


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()

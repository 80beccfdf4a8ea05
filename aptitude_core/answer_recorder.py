# aptitude_core/answer_recorder.py

from __future__ import annotations

from typing import Dict, Optional

from .schema import SessionState
from .errors import InvalidIndexError


def _is_index(value) -> bool:
    # bool is an int subclass, True must not stand in for 1
    return isinstance(value, int) and not isinstance(value, bool)


class AnswerRecorder:
    """
    question index -> chosen option index, for the questions of one session.
    Partial completion is normal: missing keys are unanswered questions.
    """

    def __init__(self, state: SessionState):
        self._state = state

    def record_answer(self, question_index: int, option_index: int) -> None:
        """Store (or overwrite) the chosen option for an existing question."""
        questions = self._state.questions
        if not _is_index(question_index) or not 0 <= question_index < len(questions):
            raise InvalidIndexError(question_index, len(questions), what="question")

        n_options = len(questions[question_index].options)
        if not _is_index(option_index) or not 0 <= option_index < n_options:
            raise InvalidIndexError(option_index, n_options, what="option")

        self._state.answers[question_index] = option_index

    def answer_for(self, question_index: int) -> Optional[int]:
        return self._state.answers.get(question_index)

    def answers(self) -> Dict[int, int]:
        """Copy of the answer map, safe to hand to the presentation layer."""
        return dict(self._state.answers)

    @property
    def answered_count(self) -> int:
        return len(self._state.answers)

    @property
    def unanswered_count(self) -> int:
        return len(self._state.questions) - len(self._state.answers)

    def clear(self) -> None:
        self._state.answers.clear()

# aptitude_core/sequencer.py

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .schema import (
    Question,
    SessionState,
    SubmissionResult,
    STATE_IDLE,
    STATE_PENDING,
    STATE_READY,
    STATE_SUBMITTED,
    STATE_ABANDONED,
)
from .errors import (
    GenerationError,
    GenerationPendingError,
    SessionStateError,
)
from .difficulty_policy import AssessmentConfig
from .difficulty_controller import DifficultyController
from .answer_recorder import AnswerRecorder
from .scorer import score, grade
from .review import build_review

logger = logging.getLogger(__name__)


class AssessmentSession:
    """
    One adaptive test run.

    Lifecycle:
        idle -> pending -> ready -> (pending -> ready)* -> submitted | abandoned

    The generator is any object exposing
        generate_questions(topic: str, difficulty_mix: Sequence[str]) -> List[Question]
    and is the only call that may block. At most one generation request is
    outstanding per session: start()/advance() raise GenerationPendingError
    while the session is 'pending'.
    """

    def __init__(self, generator: Any, config: Optional[AssessmentConfig] = None):
        self.generator = generator
        self.config = config or AssessmentConfig()

        self._state = SessionState()
        self._controller = DifficultyController(
            difficulty=self.config.start_difficulty,
            threshold=self.config.streak_threshold,
        )
        self._recorder = AnswerRecorder(self._state)
        self._lock = Lock()
        self._topic: Optional[str] = None

        # Highest question index reached in forward order, and the indexes
        # whose first answer already drove the difficulty controller.
        self._frontier = 0
        self._adapted: set = set()
        self._result: Optional[SubmissionResult] = None

    # ------------------------------
    # Read accessors
    # ------------------------------
    @property
    def state(self) -> str:
        return self._state.status

    @property
    def is_pending(self) -> bool:
        return self._state.status == STATE_PENDING

    @property
    def topic(self) -> Optional[str]:
        return self._topic

    @property
    def cursor(self) -> int:
        return self._state.cursor

    @property
    def difficulty(self) -> str:
        return self._controller.difficulty

    @property
    def correct_streak(self) -> int:
        return self._controller.correct_streak

    @property
    def incorrect_streak(self) -> int:
        return self._controller.incorrect_streak

    @property
    def questions(self) -> Tuple[Question, ...]:
        return tuple(self._state.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self._state.cursor < len(self._state.questions):
            return self._state.questions[self._state.cursor]
        return None

    @property
    def answers(self) -> Dict[int, int]:
        return self._recorder.answers()

    def answer_for(self, question_index: int) -> Optional[int]:
        return self._recorder.answer_for(question_index)

    @property
    def answered_count(self) -> int:
        return self._recorder.answered_count

    @property
    def unanswered_count(self) -> int:
        return self._recorder.unanswered_count

    @property
    def is_last(self) -> bool:
        """Cursor on the final question the session may ever hold."""
        n = len(self._state.questions)
        return n >= self.config.max_length and self._state.cursor == n - 1

    @property
    def can_advance(self) -> bool:
        return self._state.status == STATE_READY and not self.is_last

    @property
    def can_go_back(self) -> bool:
        return self._state.status == STATE_READY and self._state.cursor > 0

    @property
    def result(self) -> Optional[SubmissionResult]:
        return self._result

    # ------------------------------
    # Lifecycle guard
    # ------------------------------
    def _begin_generation(self, operation: str, allowed: str) -> str:
        """Atomically move to 'pending'; returns the status to restore on failure."""
        with self._lock:
            status = self._state.status
            if status == STATE_PENDING:
                raise GenerationPendingError(
                    f"{operation}() called while a generation request is outstanding"
                )
            if status != allowed:
                raise SessionStateError(operation, status)
            self._state.status = STATE_PENDING
            return status

    def _require(self, operation: str, *allowed: str) -> None:
        if self._state.status not in allowed:
            raise SessionStateError(operation, self._state.status)

    def _request(self, topic: str, mix: Sequence[str]) -> List[Question]:
        """Call the generator and accept the batch only if it is complete."""
        try:
            batch = self.generator.generate_questions(topic, list(mix))
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Question generation failed: {e}", cause=e) from e

        if batch is None:
            raise GenerationError("Generator returned no questions", expected=len(mix), received=0)
        batch = list(batch)
        if len(batch) != len(mix):
            raise GenerationError(
                f"Expected {len(mix)} questions, got {len(batch)}",
                expected=len(mix),
                received=len(batch),
            )
        for q in batch:
            if not isinstance(q, Question):
                raise GenerationError(f"Generator returned a non-Question item: {type(q).__name__}")
        return batch

    # ------------------------------
    # Operations
    # ------------------------------
    def start(self, topic: str) -> List[Question]:
        """Request the whole initial batch in one call; nothing is kept on failure."""
        previous = self._begin_generation("start", STATE_IDLE)
        mix = self.config.initial_mix.expand()
        logger.info(f"🚀 Starting assessment on '{topic}' ({len(mix)} questions)")
        try:
            batch = self._request(topic, mix)
        except GenerationError as e:
            self._rollback(previous)
            logger.warning(f"⚠️ Initial batch rejected: {e}")
            raise
        except BaseException:
            self._rollback(previous)
            logger.warning("⚠️ Initial batch request interrupted")
            raise

        if not self._commit(batch):
            return []
        self._topic = topic
        self._state.cursor = 0
        self._frontier = 0
        return list(batch)

    def advance(self) -> None:
        """
        Move to the next question. On the last available question the session
        first fetches exactly one more at the current difficulty; at max_length
        this is a no-op.
        """
        self._require("advance", STATE_READY, STATE_PENDING)
        if self._state.status == STATE_PENDING:
            raise GenerationPendingError("advance() called while a generation request is outstanding")

        n = len(self._state.questions)
        if self._state.cursor + 1 < n:
            self._move_to(self._state.cursor + 1)
            return

        if n >= self.config.max_length:
            logger.debug("advance() at max_length, submission required")
            return

        previous = self._begin_generation("advance", STATE_READY)
        difficulty = self._controller.difficulty
        logger.info(f"➕ Requesting question {n + 1} at {difficulty}")
        try:
            batch = self._request(self._topic or "", [difficulty])
        except GenerationError as e:
            self._rollback(previous)
            logger.warning(f"⚠️ Extension failed, staying on question {self._state.cursor + 1}: {e}")
            raise
        except BaseException:
            self._rollback(previous)
            logger.warning(f"⚠️ Extension interrupted, staying on question {self._state.cursor + 1}")
            raise

        if not self._commit(batch):
            return
        self._move_to(self._state.cursor + 1)

    def _rollback(self, previous: str) -> None:
        with self._lock:
            if self._state.status == STATE_PENDING:
                self._state.status = previous

    def _commit(self, batch: List[Question]) -> bool:
        """Append a complete batch unless the session was abandoned meanwhile."""
        with self._lock:
            if self._state.status != STATE_PENDING:
                logger.info(f"Discarding {len(batch)} question(s) generated for a closed session")
                return False
            self._state.questions.extend(batch)
            self._state.status = STATE_READY
            return True

    def go_back(self) -> None:
        """Step back one question. Never generates, never touches answers or streaks."""
        self._require("go_back", STATE_READY)
        if self._state.cursor > 0:
            self._state.cursor -= 1
            logger.debug(f"Cursor -> {self._state.cursor}")

    def _move_to(self, index: int) -> None:
        self._state.cursor = index
        self._frontier = max(self._frontier, index)
        logger.debug(f"Cursor -> {index}")

    def record_answer(self, question_index: int, option_index: int) -> None:
        """Plain Answer Recorder write, no difficulty adaptation."""
        self._require("record_answer", STATE_READY, STATE_PENDING)
        self._recorder.record_answer(question_index, option_index)

    def answer_current(self, option_index: int) -> bool:
        """
        Record the answer for the question under the cursor.

        Only the first answer given on the forward frontier feeds the
        difficulty controller; re-answers after go_back() just overwrite.
        Returns whether the chosen option is correct.
        """
        self._require("answer_current", STATE_READY)
        index = self._state.cursor
        self._recorder.record_answer(index, option_index)

        question = self._state.questions[index]
        correct = option_index == question.correct_option_index
        if index == self._frontier and index not in self._adapted:
            self._adapted.add(index)
            self._controller.record_outcome(correct)
        return correct

    def submit(self) -> SubmissionResult:
        """Score and review once; repeated calls return the same result."""
        if self._state.status == STATE_SUBMITTED and self._result is not None:
            return self._result
        self._require("submit", STATE_READY)

        result = score(self._state)
        self._result = SubmissionResult(
            score=result,
            grade=grade(result),
            review=tuple(build_review(self._state)),
        )
        self._state.status = STATE_SUBMITTED
        logger.info(
            f"🏁 Submitted: {result.correct_count}/{result.total_questions} "
            f"({result.percentage}%) - {self._result.grade}"
        )
        return self._result

    def abandon(self) -> None:
        """Test-taker exited: discard everything, nothing is persisted."""
        with self._lock:
            self._state.questions.clear()
            self._recorder.clear()
            self._state.cursor = 0
            self._state.status = STATE_ABANDONED
            self._adapted.clear()
            self._frontier = 0
        logger.info("🛑 Session abandoned")

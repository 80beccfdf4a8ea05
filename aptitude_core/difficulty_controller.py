# aptitude_core/difficulty_controller.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from .schema import EASY, HARD, DIFFICULTY_LEVELS
from .difficulty_policy import DEFAULT_START_DIFFICULTY, STREAK_THRESHOLD, step_difficulty

logger = logging.getLogger(__name__)


@dataclass
class DifficultyController:
    """
    Streak-threshold adaptation rule.

    Every recorded outcome bumps its own streak and zeroes the opposite one.
    Reaching the threshold moves the difficulty one level and restarts that
    streak, so a fresh run of answers is needed before the next move.
    A new controller always starts at medium, nothing carries over between
    sessions.
    """
    difficulty: str = DEFAULT_START_DIFFICULTY
    correct_streak: int = 0
    incorrect_streak: int = 0
    threshold: int = STREAK_THRESHOLD

    def __post_init__(self):
        if self.difficulty not in DIFFICULTY_LEVELS:
            raise ValueError(f"Unknown difficulty: {self.difficulty!r}")

    def record_outcome(self, correct: bool) -> str:
        """Apply one answer outcome and return the difficulty after the update."""
        before = self.difficulty

        if correct:
            self.correct_streak += 1
            self.incorrect_streak = 0
            if self.correct_streak >= self.threshold and self.difficulty != HARD:
                self.difficulty = step_difficulty(self.difficulty, +1)
                self.correct_streak = 0
        else:
            self.incorrect_streak += 1
            self.correct_streak = 0
            if self.incorrect_streak >= self.threshold and self.difficulty != EASY:
                self.difficulty = step_difficulty(self.difficulty, -1)
                self.incorrect_streak = 0

        if self.difficulty != before:
            logger.debug(f"Difficulty {before} -> {self.difficulty}")
        return self.difficulty

# aptitude_core/difficulty_policy.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .schema import MEDIUM, DIFFICULTY_LEVELS


# ============================
# Mix of difficulties
# ============================

@dataclass(frozen=True)
class DifficultyMix:
    """Number of easy/medium/hard questions requested in one batch."""
    easy: int
    medium: int
    hard: int

    def __post_init__(self):
        for name in DIFFICULTY_LEVELS:
            if getattr(self, name) < 0:
                raise ValueError(f"DifficultyMix.{name} must be >= 0")

    def total(self) -> int:
        return self.easy + self.medium + self.hard

    def expand(self) -> List[str]:
        """
        Slot-by-slot difficulty list sent to the generator, e.g. 3/4/3 ->
        ["easy", "easy", "easy", "medium", ..., "hard"].
        """
        out: List[str] = []
        for level in DIFFICULTY_LEVELS:
            out.extend([level] * getattr(self, level))
        return out

    @classmethod
    def parse(cls, raw: str) -> "DifficultyMix":
        """Parse "3,4,3" (easy,medium,hard)."""
        parts = [p.strip() for p in str(raw).split(",") if p.strip()]
        if len(parts) != 3:
            raise ValueError(f"Difficulty mix needs 3 comma separated counts, got {raw!r}")
        try:
            easy, medium, hard = (int(p) for p in parts)
        except ValueError as e:
            raise ValueError(f"Difficulty mix counts must be integers: {raw!r}") from e
        return cls(easy=easy, medium=medium, hard=hard)


def default_initial_mix() -> DifficultyMix:
    return DifficultyMix(easy=3, medium=4, hard=3)


# ============================
# Session configuration
# ============================

DEFAULT_MAX_LENGTH = 15
DEFAULT_START_DIFFICULTY = MEDIUM
STREAK_THRESHOLD = 2


@dataclass(frozen=True)
class AssessmentConfig:
    """
    Constants of one assessment run.
    - max_length: hard cap on generated questions
    - initial_mix: difficulty mix of the first batch; its total is the batch size
    - streak_threshold: consecutive same-outcome answers needed to move one level
    """
    max_length: int = DEFAULT_MAX_LENGTH
    initial_mix: DifficultyMix = field(default_factory=default_initial_mix)
    start_difficulty: str = DEFAULT_START_DIFFICULTY
    streak_threshold: int = STREAK_THRESHOLD

    def __post_init__(self):
        if self.initial_mix.total() <= 0:
            raise ValueError("Initial batch must contain at least one question")
        if self.initial_mix.total() > self.max_length:
            raise ValueError(
                f"Initial batch ({self.initial_mix.total()}) exceeds max_length ({self.max_length})"
            )
        if self.start_difficulty not in DIFFICULTY_LEVELS:
            raise ValueError(f"Unknown start difficulty: {self.start_difficulty!r}")
        if self.streak_threshold < 1:
            raise ValueError("streak_threshold must be >= 1")

    @property
    def initial_batch_size(self) -> int:
        return self.initial_mix.total()


def step_difficulty(current: str, direction: int) -> str:
    """Move one level up (+1) or down (-1), clamped to easy..hard."""
    idx = DIFFICULTY_LEVELS.index(current)
    idx = min(max(idx + direction, 0), len(DIFFICULTY_LEVELS) - 1)
    return DIFFICULTY_LEVELS[idx]

# aptitude_core/schema.py

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


# ============================
# Difficulty levels
# ============================

EASY = "easy"
MEDIUM = "medium"
HARD = "hard"

# Ordered from lowest to highest, escalation walks this tuple.
DIFFICULTY_LEVELS: Tuple[str, ...] = (EASY, MEDIUM, HARD)

OPTION_COUNT = 4


def normalize_difficulty(value: str) -> str:
    """Map 'Easy', ' HARD ' ... to the canonical lowercase tag."""
    tag = str(value).strip().lower()
    if tag not in DIFFICULTY_LEVELS:
        raise ValueError(f"Unknown difficulty: {value!r}")
    return tag


# ============================
# Session lifecycle states
# ============================

STATE_IDLE = "idle"            # created, initial batch not requested yet
STATE_PENDING = "pending"      # one generation call is outstanding
STATE_READY = "ready"          # questions available, test in progress
STATE_SUBMITTED = "submitted"
STATE_ABANDONED = "abandoned"


@dataclass(frozen=True)
class Question:
    """
    One multiple-choice question as produced by the generation collaborator.
    - options: exactly 4 strings, order is meaningful
    - correct_option_index: 0..3
    - difficulty: "easy" | "medium" | "hard"
    """
    text: str
    options: Tuple[str, ...]
    correct_option_index: int
    difficulty: str

    def __post_init__(self):
        # Frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "difficulty", normalize_difficulty(self.difficulty))
        if len(self.options) != OPTION_COUNT:
            raise ValueError(f"Expected {OPTION_COUNT} options, got {len(self.options)}")
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError(
                f"correct_option_index {self.correct_option_index} out of range for {len(self.options)} options"
            )

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]


@dataclass
class SessionState:
    """
    Mutable state of one adaptive test run. Owned by AssessmentSession,
    never persisted.
    """
    questions: List[Question] = field(default_factory=list)
    answers: Dict[int, int] = field(default_factory=dict)  # {question_index: option_index}
    cursor: int = 0
    status: str = STATE_IDLE


@dataclass(frozen=True)
class ScoreResult:
    correct_count: int
    total_answered: int
    total_questions: int
    percentage: int

    @property
    def incorrect_count(self) -> int:
        # Unanswered questions count as incorrect
        return self.total_questions - self.correct_count

    @property
    def unanswered_count(self) -> int:
        return self.total_questions - self.total_answered


@dataclass(frozen=True)
class ReviewEntry:
    index: int
    question: Question
    chosen_option_index: Optional[int]
    is_correct: bool
    correct_option_index: int

    @property
    def chosen_option(self) -> Optional[str]:
        if self.chosen_option_index is None:
            return None
        return self.question.options[self.chosen_option_index]

    @property
    def correct_option(self) -> str:
        return self.question.options[self.correct_option_index]


@dataclass(frozen=True)
class SubmissionResult:
    score: ScoreResult
    grade: str
    review: Tuple[ReviewEntry, ...]

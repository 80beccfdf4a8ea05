# aptitude_core/__init__.py

"""
Adaptive Assessment Engine

Includes:
- Question / ScoreResult / ReviewEntry schema and difficulty levels
- Streak-threshold difficulty controller (easy <-> medium <-> hard)
- Session sequencer: initial batch + on-demand extension up to max_length
- Answer recorder, scorer with grade bands, review assembler

Common exports:
    Question, ScoreResult, ReviewEntry, SubmissionResult
    DifficultyMix, AssessmentConfig, DifficultyController
    AssessmentSession, AnswerRecorder
    score, grade, grade_for, build_review
    GenerationError, InvalidIndexError, GenerationPendingError, SessionStateError
"""

# Schema models
from .schema import (
    EASY,
    MEDIUM,
    HARD,
    DIFFICULTY_LEVELS,
    OPTION_COUNT,
    STATE_IDLE,
    STATE_PENDING,
    STATE_READY,
    STATE_SUBMITTED,
    STATE_ABANDONED,
    Question,
    SessionState,
    ScoreResult,
    ReviewEntry,
    SubmissionResult,
    normalize_difficulty,
)

# Errors
from .errors import (
    AssessmentError,
    GenerationError,
    InvalidIndexError,
    GenerationPendingError,
    SessionStateError,
)

# Configuration & adaptation
from .difficulty_policy import (
    DifficultyMix,
    AssessmentConfig,
    default_initial_mix,
)
from .difficulty_controller import DifficultyController

# Session
from .answer_recorder import AnswerRecorder
from .sequencer import AssessmentSession

# Results
from .scorer import score, grade, grade_for, percentage
from .review import build_review


__all__ = [
    # Schema
    "EASY",
    "MEDIUM",
    "HARD",
    "DIFFICULTY_LEVELS",
    "OPTION_COUNT",
    "STATE_IDLE",
    "STATE_PENDING",
    "STATE_READY",
    "STATE_SUBMITTED",
    "STATE_ABANDONED",
    "Question",
    "SessionState",
    "ScoreResult",
    "ReviewEntry",
    "SubmissionResult",
    "normalize_difficulty",

    # Errors
    "AssessmentError",
    "GenerationError",
    "InvalidIndexError",
    "GenerationPendingError",
    "SessionStateError",

    # Adaptation
    "DifficultyMix",
    "AssessmentConfig",
    "default_initial_mix",
    "DifficultyController",

    # Session
    "AnswerRecorder",
    "AssessmentSession",

    # Results
    "score",
    "grade",
    "grade_for",
    "percentage",
    "build_review",
]

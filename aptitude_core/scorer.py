# aptitude_core/scorer.py

from typing import Dict, List, Sequence, Tuple

from .schema import Question, ScoreResult, SessionState


# ============================
# Grade bands (inclusive lower bounds)
# ============================

GRADE_BANDS: List[Tuple[int, str]] = [
    (90, "Excellent"),
    (75, "Great"),
    (60, "Good"),
    (40, "Fair"),
]
LOWEST_GRADE = "Needs Improvement"


def percentage(correct: int, total: int) -> int:
    """round(100 * correct / total), half-up, 0 for an empty session."""
    if total <= 0:
        return 0
    # Integer arithmetic keeps .5 boundaries exact before rounding
    return (200 * correct + total) // (2 * total)


def count_correct(questions: Sequence[Question], answers: Dict[int, int]) -> int:
    """Unanswered questions are simply not correct."""
    return sum(
        1 for i, q in enumerate(questions)
        if answers.get(i) == q.correct_option_index
    )


def score(session: SessionState) -> ScoreResult:
    """
    Score every generated question, not max_length, so an early submission
    with fewer questions is still graded out of what was actually asked.
    Pure function of the session state, calling it twice gives the same result.
    """
    questions = session.questions
    answers = session.answers

    correct = count_correct(questions, answers)
    total = len(questions)
    answered = sum(1 for i in answers if 0 <= i < total)

    return ScoreResult(
        correct_count=correct,
        total_answered=answered,
        total_questions=total,
        percentage=percentage(correct, total),
    )


def grade_for(percent: int) -> str:
    for lower_bound, label in GRADE_BANDS:
        if percent >= lower_bound:
            return label
    return LOWEST_GRADE


def grade(result: ScoreResult) -> str:
    return grade_for(result.percentage)

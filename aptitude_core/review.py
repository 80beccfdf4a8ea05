# aptitude_core/review.py

from typing import List

from .schema import ReviewEntry, SessionState


def build_review(session: SessionState) -> List[ReviewEntry]:
    """One entry per question, in generation order, using only the final stored answer."""
    entries: List[ReviewEntry] = []
    for i, q in enumerate(session.questions):
        chosen = session.answers.get(i)
        entries.append(
            ReviewEntry(
                index=i,
                question=q,
                chosen_option_index=chosen,
                is_correct=chosen == q.correct_option_index,
                correct_option_index=q.correct_option_index,
            )
        )
    return entries

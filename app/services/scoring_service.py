"""
Attempt scoring: percentage score, correct count and time totals
"""
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class ScoreSummary:
    score: int  # 0-100
    correct_count: int
    total_count: int
    time_spent_seconds: int


def percentage(correct: int, total: int) -> int:
    """
    round(correct / total * 100), halves rounded up

    Integer arithmetic keeps 50% remainders stable; an empty total scores 0.
    """
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def score_answers(answers: Iterable, total_count: Optional[int] = None) -> ScoreSummary:
    """
    Aggregate answer rows for one attempt

    Args:
        answers: Objects or dicts with ``correct`` and ``time_spent``
        total_count: Denominator for the score; defaults to the number of
            answers. Pass the attempt's total_questions so unanswered
            questions count as wrong.

    Returns:
        ScoreSummary. Pure: the same input always gives the same result.
    """
    correct = 0
    answered = 0
    time_spent = 0

    for answer in answers:
        answered += 1
        if _field(answer, "correct"):
            correct += 1
        seconds = _field(answer, "time_spent")
        if seconds and seconds > 0:
            time_spent += int(seconds)

    total = answered if total_count is None else total_count

    return ScoreSummary(
        score=percentage(correct, total),
        correct_count=correct,
        total_count=total,
        time_spent_seconds=time_spent,
    )


def _field(answer, name: str):
    if isinstance(answer, dict):
        return answer.get(name)
    return getattr(answer, name, None)

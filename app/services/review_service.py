"""
Spaced-repetition scheduling

A fixed interval ladder (simplified SM-2): each consecutive correct answer
pushes the next review further out, a wrong answer brings it back to
tomorrow.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from app.models import ReviewSchedule
from app.storage import Storage
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

# consecutive correct answers -> days until next review
REVIEW_INTERVALS = {0: 1, 1: 3, 2: 7, 3: 14, 4: 30}
MAX_INTERVAL_DAYS = 60
RETRY_INTERVAL_DAYS = 1

DEFAULT_EASE_FACTOR = 250
MIN_EASE_FACTOR = 130


def interval_days(is_correct: bool, consecutive_correct: int) -> int:
    if not is_correct:
        return RETRY_INTERVAL_DAYS
    # A negative streak is treated as no streak
    return REVIEW_INTERVALS.get(max(consecutive_correct, 0), MAX_INTERVAL_DAYS)


def next_review_date(
    is_correct: bool,
    consecutive_correct: int,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Date of the next review for an answer

    Args:
        is_correct: Whether the answer was graded correct
        consecutive_correct: Correct answers in a row before this one
        now: Anchor time, defaults to the current UTC time

    Returns:
        Anchor advanced by whole days; time of day is kept. The streak is
        not touched here.
    """
    anchor = now if now is not None else utcnow()
    return anchor + timedelta(days=interval_days(is_correct, consecutive_correct))


def adjust_ease_factor(ease_factor: int, is_correct: bool) -> int:
    """
    SM-2 ease update in hundredths (quality 5 for correct, 1 for wrong)

    Stored for reporting only; the ladder above does not read it.
    """
    quality = 5 if is_correct else 1
    delta = 10 - (5 - quality) * (8 + (5 - quality) * 2)
    return max(MIN_EASE_FACTOR, ease_factor + delta)


class ReviewService:
    """Keeps per (user, question) review schedules up to date"""

    def record_result(
        self,
        storage: Storage,
        user_id: int,
        question_id: int,
        is_correct: bool,
        now: Optional[datetime] = None,
    ) -> ReviewSchedule:
        """
        Upsert the schedule after a graded answer

        The interval is chosen from the streak held before this answer; the
        streak then grows by one or resets to zero.
        """
        now = now or utcnow()
        current = storage.get_review(user_id, question_id)

        streak = (current.consecutive or 0) if current else 0
        ease = (current.ease_factor or DEFAULT_EASE_FACTOR) if current else DEFAULT_EASE_FACTOR

        review = storage.save_review(
            user_id,
            question_id,
            next_review=next_review_date(is_correct, streak, now),
            interval=interval_days(is_correct, streak),
            ease_factor=adjust_ease_factor(ease, is_correct),
            consecutive=streak + 1 if is_correct else 0,
        )

        logger.info(
            f"Review scheduled: user {user_id}, question {question_id}, "
            f"in {review.interval}d (streak {review.consecutive})"
        )
        return review

    def get_due(self, storage: Storage, user_id: int, now: Optional[datetime] = None):
        """Schedules whose next review is at or before now"""
        now = now or utcnow()
        return [
            review for review in storage.list_reviews(user_id)
            if review.next_review is not None and review.next_review <= now
        ]


# Global instance
review_service = ReviewService()

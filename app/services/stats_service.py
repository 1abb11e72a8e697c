"""
Statistics service for per-category performance and attempt results
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Any, Optional

from app.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from app.models import Question, UserStats
from app.services.review_service import review_service
from app.services.scoring_service import percentage, score_answers
from app.storage import Storage
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

UNCATEGORIZED = {"name": "Uncategorized", "color": "#9ca3af"}


class StatsService:
    """Service for user statistics and attempt breakdowns"""

    def record_answer(
        self,
        storage: Storage,
        user_id: int,
        question: Question,
        correct: bool,
        time_spent: int,
        now: Optional[datetime] = None,
    ) -> Optional[UserStats]:
        """
        Fold one graded answer into the (user, category) counters

        Questions without a category are not tracked.
        """
        if question.category is None:
            return None

        current = storage.get_user_stats(user_id, question.category)
        total = (current.total_attempts or 0) if current else 0
        correct_count = (current.correct_answers or 0) if current else 0
        avg_time = (current.avg_time_per_question or 0) if current else 0
        streak = (current.streak or 0) if current else 0

        new_total = total + 1
        return storage.save_user_stats(
            user_id,
            question.category,
            total_attempts=new_total,
            correct_answers=correct_count + (1 if correct else 0),
            avg_time_per_question=round((avg_time * total + time_spent) / new_total),
            last_attempt=now or utcnow(),
            streak=streak + 1 if correct else 0,
        )

    def get_user_stats(self, storage: Storage, user_id: int) -> List[Dict[str, Any]]:
        """Stats rows with embedded category info"""
        entries = []
        for stats in storage.list_user_stats(user_id):
            category = storage.get_category(stats.category_id)
            total = stats.total_attempts or 0
            correct = stats.correct_answers or 0

            entries.append({
                "category_id": stats.category_id,
                "total_attempts": total,
                "correct_answers": correct,
                "accuracy": round(correct / total * 100, 2) if total else 0.0,
                "avg_time_per_question": stats.avg_time_per_question,
                "last_attempt": stats.last_attempt,
                "streak": stats.streak or 0,
                "category": self._category_info(category),
            })
        return entries

    def get_attempt_result(
        self,
        storage: Storage,
        attempt_id: int,
        caller_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Score breakdown for a finished attempt

        Returns:
            Dictionary with totals, average time per question and
            per-category performance
        """
        attempt = storage.get_attempt(attempt_id)
        if not attempt:
            raise NotFoundError("Quiz attempt not found")
        if not attempt.is_visible_to(caller_id):
            raise ForbiddenError("Quiz attempt belongs to another user")
        if not attempt.is_finished:
            raise InvalidInputError(f"Attempt {attempt_id} is not finished yet")

        answers = storage.list_answers(attempt_id)
        summary = score_answers(answers, total_count=attempt.total_questions)
        answered = {a.question_id: a for a in answers}

        # category_id -> [correct, total]
        per_category = defaultdict(lambda: [0, 0])
        for question in storage.get_questions(attempt.question_ids or []):
            bucket = per_category[question.category]
            bucket[1] += 1
            answer = answered.get(question.id)
            if answer is not None and answer.correct:
                bucket[0] += 1

        category_performance = []
        for category_id, (correct, total) in per_category.items():
            category = storage.get_category(category_id) if category_id is not None else None
            info = self._category_info(category) or UNCATEGORIZED
            category_performance.append({
                "category_id": category_id,
                "name": info["name"],
                "color": info["color"],
                "score": percentage(correct, total),
                "correct": correct,
                "questions_count": total,
            })
        category_performance.sort(key=lambda c: c["score"], reverse=True)

        total_questions = attempt.total_questions or 0
        time_spent = attempt.time_spent if attempt.time_spent is not None else summary.time_spent_seconds

        return {
            "attempt_id": attempt.id,
            "score": attempt.score if attempt.score is not None else summary.score,
            "total_questions": total_questions,
            "correct_answers": summary.correct_count,
            "time_spent": time_spent,
            "average_time_per_question": round(time_spent / total_questions, 2) if total_questions else 0.0,
            "category_performance": category_performance,
        }

    def get_due_reviews(
        self,
        storage: Storage,
        user_id: int,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Reviews due at or before now, with their question and category"""
        details = []
        for review in review_service.get_due(storage, user_id, now):
            question = storage.get_question(review.question_id)
            if not question:
                continue
            category = storage.get_category(question.category) if question.category else None

            details.append({
                "id": review.id,
                "question_id": question.id,
                "question": question.question,
                "difficulty": question.difficulty,
                "category": self._category_info(category),
                "due_date": review.next_review,
                "interval": review.interval or 1,
                "consecutive": review.consecutive or 0,
                "ease_factor": review.ease_factor or 250,
            })
        return details

    @staticmethod
    def _category_info(category) -> Optional[Dict[str, Any]]:
        if category is None:
            return None
        return {"id": category.id, "name": category.name, "color": category.color}


# Global instance
stats_service = StatsService()

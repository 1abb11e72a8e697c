"""
In-memory storage for demos and tests

Holds transient model instances in per-table dicts. Nothing survives a
restart.
"""
import itertools
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from app.models import (
    User, Category, Subject, Question, Attempt, Answer, UserStats, ReviewSchedule
)
from app.storage.base import Storage
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """Dict-backed storage with auto-incrementing ids"""

    def __init__(self):
        self._tables: Dict[str, Dict[int, object]] = defaultdict(dict)
        self._sequences = defaultdict(lambda: itertools.count(1))

    def _insert(self, table: str, instance):
        instance.id = next(self._sequences[table])
        self._tables[table][instance.id] = instance
        return instance

    def _rows(self, table: str) -> List:
        return sorted(self._tables[table].values(), key=lambda row: row.id)

    def _get(self, table: str, row_id: int):
        return self._tables[table].get(row_id)

    @staticmethod
    def _apply(instance, fields: dict):
        for key, value in fields.items():
            setattr(instance, key, value)
        return instance

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get("users", user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next(
            (u for u in self._rows("users") if u.username == username), None
        )

    def create_user(self, username, password_hash, email=None, display_name=None) -> User:
        user = User(
            username=username,
            password=password_hash,
            email=email,
            display_name=display_name,
            created_at=utcnow(),
        )
        return self._insert("users", user)

    # Categories

    def list_categories(self) -> List[Category]:
        return self._rows("categories")

    def get_category(self, category_id: int) -> Optional[Category]:
        return self._get("categories", category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        return next(
            (c for c in self._rows("categories") if c.name == name), None
        )

    def create_category(self, name: str, color: str) -> Category:
        return self._insert("categories", Category(name=name, color=color))

    def update_category(self, category_id: int, **fields) -> Optional[Category]:
        category = self.get_category(category_id)
        if not category:
            return None
        return self._apply(category, fields)

    def delete_category(self, category_id: int) -> bool:
        if self._tables["categories"].pop(category_id, None) is None:
            return False

        for question in self._rows("questions"):
            if question.category == category_id:
                question.category = None
        stats = self._tables["user_stats"]
        for stats_id in [s.id for s in stats.values() if s.category_id == category_id]:
            del stats[stats_id]
        return True

    # Subjects

    def list_subjects(self) -> List[Subject]:
        return self._rows("subjects")

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        return self._get("subjects", subject_id)

    def create_subject(self, name: str, description: Optional[str] = None) -> Subject:
        now = utcnow()
        subject = Subject(
            name=name, description=description, created_at=now, updated_at=now
        )
        return self._insert("subjects", subject)

    def update_subject(self, subject_id: int, **fields) -> Optional[Subject]:
        subject = self.get_subject(subject_id)
        if not subject:
            return None
        fields.setdefault("updated_at", utcnow())
        return self._apply(subject, fields)

    def delete_subject(self, subject_id: int) -> bool:
        if self._tables["subjects"].pop(subject_id, None) is None:
            return False

        for question in self._rows("questions"):
            if question.subject == subject_id:
                question.subject = None
        return True

    # Questions

    def list_questions(self, category=None, subject=None, difficulty=None) -> List[Question]:
        questions = self._rows("questions")

        if category is not None:
            questions = [q for q in questions if q.category == category]
        if subject is not None:
            questions = [q for q in questions if q.subject == subject]
        if difficulty:
            questions = [q for q in questions if q.difficulty == difficulty]

        return questions

    def get_question(self, question_id: int) -> Optional[Question]:
        return self._get("questions", question_id)

    def create_question(self, **fields) -> Question:
        fields.setdefault("created_at", utcnow())
        fields.setdefault("difficulty", "medium")
        return self._insert("questions", Question(**fields))

    def update_question(self, question_id: int, **fields) -> Optional[Question]:
        question = self.get_question(question_id)
        if not question:
            return None
        return self._apply(question, fields)

    def delete_question(self, question_id: int) -> bool:
        if self._tables["questions"].pop(question_id, None) is None:
            return False

        reviews = self._tables["review_schedule"]
        for review_id in [r.id for r in reviews.values() if r.question_id == question_id]:
            del reviews[review_id]
        return True

    def question_has_answers(self, question_id: int) -> bool:
        return any(a.question_id == question_id for a in self._rows("answers"))

    # Attempts

    def create_attempt(self, user_id: Optional[int], question_ids: List[int]) -> Attempt:
        attempt = Attempt(
            user_id=user_id,
            question_ids=list(question_ids),
            total_questions=len(question_ids),
            started_at=utcnow(),
        )
        return self._insert("attempts", attempt)

    def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        return self._get("attempts", attempt_id)

    def list_user_attempts(self, user_id: int) -> List[Attempt]:
        attempts = [a for a in self._rows("attempts") if a.user_id == user_id]
        return sorted(attempts, key=lambda a: (a.started_at, a.id), reverse=True)

    def finish_attempt(self, attempt_id, score, time_spent, finished_at: datetime) -> Optional[Attempt]:
        attempt = self.get_attempt(attempt_id)
        if not attempt:
            return None
        return self._apply(
            attempt,
            {"finished_at": finished_at, "score": score, "time_spent": time_spent},
        )

    # Answers

    def save_answer(self, attempt_id, question_id, chosen_answer, correct, time_spent, answered_at) -> Answer:
        answer = next(
            (
                a for a in self._rows("answers")
                if a.attempt_id == attempt_id and a.question_id == question_id
            ),
            None,
        )
        if answer is None:
            answer = self._insert(
                "answers", Answer(attempt_id=attempt_id, question_id=question_id)
            )

        return self._apply(
            answer,
            {
                "chosen_answer": chosen_answer,
                "correct": correct,
                "time_spent": time_spent,
                "answered_at": answered_at,
            },
        )

    def list_answers(self, attempt_id: int) -> List[Answer]:
        return [a for a in self._rows("answers") if a.attempt_id == attempt_id]

    # User stats

    def list_user_stats(self, user_id: int) -> List[UserStats]:
        stats = [s for s in self._rows("user_stats") if s.user_id == user_id]
        return sorted(stats, key=lambda s: s.category_id)

    def get_user_stats(self, user_id: int, category_id: int) -> Optional[UserStats]:
        return next(
            (
                s for s in self._rows("user_stats")
                if s.user_id == user_id and s.category_id == category_id
            ),
            None,
        )

    def save_user_stats(self, user_id: int, category_id: int, **fields) -> UserStats:
        stats = self.get_user_stats(user_id, category_id)
        if stats is None:
            stats = self._insert(
                "user_stats", UserStats(user_id=user_id, category_id=category_id)
            )
        return self._apply(stats, fields)

    # Spaced repetition

    def list_reviews(self, user_id: int) -> List[ReviewSchedule]:
        reviews = [r for r in self._rows("review_schedule") if r.user_id == user_id]
        return sorted(reviews, key=lambda r: (r.next_review is None, r.next_review or datetime.min))

    def get_review(self, user_id: int, question_id: int) -> Optional[ReviewSchedule]:
        return next(
            (
                r for r in self._rows("review_schedule")
                if r.user_id == user_id and r.question_id == question_id
            ),
            None,
        )

    def save_review(self, user_id: int, question_id: int, **fields) -> ReviewSchedule:
        review = self.get_review(user_id, question_id)
        if review is None:
            review = self._insert(
                "review_schedule", ReviewSchedule(user_id=user_id, question_id=question_id)
            )
        return self._apply(review, fields)

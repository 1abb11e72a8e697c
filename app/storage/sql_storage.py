"""
SQLAlchemy-backed storage (SQLite, PostgreSQL, MySQL - any DATABASE_URL)
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models import (
    User, Category, Subject, Question, Attempt, Answer, UserStats, ReviewSchedule
)
from app.storage.base import Storage

logger = logging.getLogger(__name__)


class DatabaseStorage(Storage):
    """Storage over one request-scoped SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def rollback(self) -> None:
        self.db.rollback()

    def _save(self, instance):
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def _update(self, instance, fields: dict):
        for key, value in fields.items():
            setattr(instance, key, value)
        return self._save(instance)

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, username, password_hash, email=None, display_name=None) -> User:
        user = User(
            username=username,
            password=password_hash,
            email=email,
            display_name=display_name,
        )
        return self._save(user)

    # Categories

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.id).all()

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_category_by_name(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()

    def create_category(self, name: str, color: str) -> Category:
        return self._save(Category(name=name, color=color))

    def update_category(self, category_id: int, **fields) -> Optional[Category]:
        category = self.get_category(category_id)
        if not category:
            return None
        return self._update(category, fields)

    def delete_category(self, category_id: int) -> bool:
        category = self.get_category(category_id)
        if not category:
            return False

        self.db.query(Question).filter(Question.category == category_id).update(
            {Question.category: None}, synchronize_session=False
        )
        self.db.query(UserStats).filter(UserStats.category_id == category_id).delete(
            synchronize_session=False
        )
        self.db.delete(category)
        self.db.commit()
        return True

    # Subjects

    def list_subjects(self) -> List[Subject]:
        return self.db.query(Subject).order_by(Subject.id).all()

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        return self.db.query(Subject).filter(Subject.id == subject_id).first()

    def create_subject(self, name: str, description: Optional[str] = None) -> Subject:
        return self._save(Subject(name=name, description=description))

    def update_subject(self, subject_id: int, **fields) -> Optional[Subject]:
        subject = self.get_subject(subject_id)
        if not subject:
            return None
        return self._update(subject, fields)

    def delete_subject(self, subject_id: int) -> bool:
        subject = self.get_subject(subject_id)
        if not subject:
            return False

        self.db.query(Question).filter(Question.subject == subject_id).update(
            {Question.subject: None}, synchronize_session=False
        )
        self.db.delete(subject)
        self.db.commit()
        return True

    # Questions

    def list_questions(self, category=None, subject=None, difficulty=None) -> List[Question]:
        query = self.db.query(Question)

        if category is not None:
            query = query.filter(Question.category == category)
        if subject is not None:
            query = query.filter(Question.subject == subject)
        if difficulty:
            query = query.filter(Question.difficulty == difficulty)

        return query.order_by(Question.id).all()

    def get_question(self, question_id: int) -> Optional[Question]:
        return self.db.query(Question).filter(Question.id == question_id).first()

    def create_question(self, **fields) -> Question:
        return self._save(Question(**fields))

    def update_question(self, question_id: int, **fields) -> Optional[Question]:
        question = self.get_question(question_id)
        if not question:
            return None
        return self._update(question, fields)

    def delete_question(self, question_id: int) -> bool:
        question = self.get_question(question_id)
        if not question:
            return False

        self.db.query(ReviewSchedule).filter(
            ReviewSchedule.question_id == question_id
        ).delete(synchronize_session=False)
        self.db.delete(question)
        self.db.commit()
        return True

    def question_has_answers(self, question_id: int) -> bool:
        return (
            self.db.query(Answer.id).filter(Answer.question_id == question_id).first()
            is not None
        )

    # Attempts

    def create_attempt(self, user_id: Optional[int], question_ids: List[int]) -> Attempt:
        attempt = Attempt(
            user_id=user_id,
            question_ids=list(question_ids),
            total_questions=len(question_ids),
        )
        return self._save(attempt)

    def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        return self.db.query(Attempt).filter(Attempt.id == attempt_id).first()

    def list_user_attempts(self, user_id: int) -> List[Attempt]:
        return (
            self.db.query(Attempt)
            .filter(Attempt.user_id == user_id)
            .order_by(Attempt.started_at.desc(), Attempt.id.desc())
            .all()
        )

    def finish_attempt(self, attempt_id, score, time_spent, finished_at: datetime) -> Optional[Attempt]:
        attempt = self.get_attempt(attempt_id)
        if not attempt:
            return None
        return self._update(
            attempt,
            {"finished_at": finished_at, "score": score, "time_spent": time_spent},
        )

    # Answers

    def save_answer(self, attempt_id, question_id, chosen_answer, correct, time_spent, answered_at) -> Answer:
        answer = (
            self.db.query(Answer)
            .filter(Answer.attempt_id == attempt_id, Answer.question_id == question_id)
            .first()
        )
        if answer is None:
            answer = Answer(attempt_id=attempt_id, question_id=question_id)

        answer.chosen_answer = chosen_answer
        answer.correct = correct
        answer.time_spent = time_spent
        answer.answered_at = answered_at
        return self._save(answer)

    def list_answers(self, attempt_id: int) -> List[Answer]:
        return (
            self.db.query(Answer)
            .filter(Answer.attempt_id == attempt_id)
            .order_by(Answer.id)
            .all()
        )

    # User stats

    def list_user_stats(self, user_id: int) -> List[UserStats]:
        return (
            self.db.query(UserStats)
            .filter(UserStats.user_id == user_id)
            .order_by(UserStats.category_id)
            .all()
        )

    def get_user_stats(self, user_id: int, category_id: int) -> Optional[UserStats]:
        return (
            self.db.query(UserStats)
            .filter(UserStats.user_id == user_id, UserStats.category_id == category_id)
            .first()
        )

    def save_user_stats(self, user_id: int, category_id: int, **fields) -> UserStats:
        stats = self.get_user_stats(user_id, category_id)
        if stats is None:
            stats = UserStats(user_id=user_id, category_id=category_id)
        return self._update(stats, fields)

    # Spaced repetition

    def list_reviews(self, user_id: int) -> List[ReviewSchedule]:
        return (
            self.db.query(ReviewSchedule)
            .filter(ReviewSchedule.user_id == user_id)
            .order_by(ReviewSchedule.next_review)
            .all()
        )

    def get_review(self, user_id: int, question_id: int) -> Optional[ReviewSchedule]:
        return (
            self.db.query(ReviewSchedule)
            .filter(
                ReviewSchedule.user_id == user_id,
                ReviewSchedule.question_id == question_id,
            )
            .first()
        )

    def save_review(self, user_id: int, question_id: int, **fields) -> ReviewSchedule:
        review = self.get_review(user_id, question_id)
        if review is None:
            review = ReviewSchedule(user_id=user_id, question_id=question_id)
        return self._update(review, fields)

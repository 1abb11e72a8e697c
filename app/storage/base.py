"""
Storage interface shared by every persistence backend

Backends return ORM model instances (attached to a session for the
database backend, plain transient objects for the in-memory one) so
services and schemas work the same against either.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from app.models import (
    User, Category, Subject, Question, Attempt, Answer, UserStats, ReviewSchedule
)


class Storage(ABC):
    """Persistence operations used by the services"""

    def rollback(self) -> None:
        """Discard uncommitted work after a failure"""

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(
        self,
        username: str,
        password_hash: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> User:
        ...

    # Categories

    @abstractmethod
    def list_categories(self) -> List[Category]:
        ...

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        ...

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        ...

    @abstractmethod
    def create_category(self, name: str, color: str) -> Category:
        ...

    @abstractmethod
    def update_category(self, category_id: int, **fields) -> Optional[Category]:
        ...

    @abstractmethod
    def delete_category(self, category_id: int) -> bool:
        """Delete a category, detaching its questions and dropping its stats"""

    # Subjects

    @abstractmethod
    def list_subjects(self) -> List[Subject]:
        ...

    @abstractmethod
    def get_subject(self, subject_id: int) -> Optional[Subject]:
        ...

    @abstractmethod
    def create_subject(self, name: str, description: Optional[str] = None) -> Subject:
        ...

    @abstractmethod
    def update_subject(self, subject_id: int, **fields) -> Optional[Subject]:
        ...

    @abstractmethod
    def delete_subject(self, subject_id: int) -> bool:
        """Delete a subject, detaching its questions"""

    # Questions

    @abstractmethod
    def list_questions(
        self,
        category: Optional[int] = None,
        subject: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> List[Question]:
        ...

    @abstractmethod
    def get_question(self, question_id: int) -> Optional[Question]:
        ...

    @abstractmethod
    def create_question(self, **fields) -> Question:
        ...

    @abstractmethod
    def update_question(self, question_id: int, **fields) -> Optional[Question]:
        ...

    @abstractmethod
    def delete_question(self, question_id: int) -> bool:
        ...

    @abstractmethod
    def question_has_answers(self, question_id: int) -> bool:
        """True once any attempt has graded an answer for the question"""

    def get_questions(self, question_ids: List[int]) -> List[Question]:
        """Questions in the given order; unknown ids are skipped"""
        found = []
        for question_id in question_ids:
            question = self.get_question(question_id)
            if question is not None:
                found.append(question)
        return found

    # Attempts

    @abstractmethod
    def create_attempt(self, user_id: Optional[int], question_ids: List[int]) -> Attempt:
        ...

    @abstractmethod
    def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        ...

    @abstractmethod
    def list_user_attempts(self, user_id: int) -> List[Attempt]:
        """Attempts for a user, newest first"""

    @abstractmethod
    def finish_attempt(
        self,
        attempt_id: int,
        score: int,
        time_spent: int,
        finished_at: datetime,
    ) -> Optional[Attempt]:
        """Write score, time_spent and finished_at in one update"""

    # Answers

    @abstractmethod
    def save_answer(
        self,
        attempt_id: int,
        question_id: int,
        chosen_answer: int,
        correct: bool,
        time_spent: int,
        answered_at: datetime,
    ) -> Answer:
        """Insert or overwrite the answer row for (attempt, question)"""

    @abstractmethod
    def list_answers(self, attempt_id: int) -> List[Answer]:
        ...

    # User stats

    @abstractmethod
    def list_user_stats(self, user_id: int) -> List[UserStats]:
        ...

    @abstractmethod
    def get_user_stats(self, user_id: int, category_id: int) -> Optional[UserStats]:
        ...

    @abstractmethod
    def save_user_stats(self, user_id: int, category_id: int, **fields) -> UserStats:
        """Upsert the (user, category) stats row"""

    # Spaced repetition

    @abstractmethod
    def list_reviews(self, user_id: int) -> List[ReviewSchedule]:
        ...

    @abstractmethod
    def get_review(self, user_id: int, question_id: int) -> Optional[ReviewSchedule]:
        ...

    @abstractmethod
    def save_review(self, user_id: int, question_id: int, **fields) -> ReviewSchedule:
        """Upsert the (user, question) schedule row"""

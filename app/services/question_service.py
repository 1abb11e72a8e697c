"""
Question bank service: validation, immutability and cached listings
"""
import logging
from typing import Dict, Any, List, Optional, Tuple

from app.exceptions import InvalidInputError, NotFoundError
from app.models import Question
from app.storage import Storage
from app.utils.cache import cache_service

logger = logging.getLogger(__name__)

DIFFICULTIES = ("easy", "medium", "hard")
QUESTION_FIELDS = ("question", "options", "answer", "explanation", "category", "subject", "difficulty")


def public_payload(question: Question) -> Dict[str, Any]:
    """Question fields safe to show before grading"""
    return {
        "id": question.id,
        "question": question.question,
        "options": list(question.options or []),
        "category": question.category,
        "subject": question.subject,
        "difficulty": question.difficulty,
    }


class QuestionService:
    """Service for managing the question bank"""

    def list_questions(
        self,
        storage: Storage,
        category: Optional[int] = None,
        subject: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Public question payloads matching the filters (cached)"""
        if difficulty and difficulty not in DIFFICULTIES:
            raise InvalidInputError(f"Difficulty must be one of {', '.join(DIFFICULTIES)}")

        cache_key = cache_service.generate_cache_key(category, subject, difficulty)
        cached = cache_service.get(cache_key)
        if cached is not None:
            return cached

        questions = [
            public_payload(q)
            for q in storage.list_questions(category=category, subject=subject, difficulty=difficulty)
        ]
        cache_service.set(cache_key, questions)
        return questions

    def get_question(self, storage: Storage, question_id: int) -> Question:
        question = storage.get_question(question_id)
        if not question:
            raise NotFoundError("Question not found")
        return question

    def create_question(self, storage: Storage, data: Dict[str, Any]) -> Question:
        fields = self._validate(storage, data)
        question = storage.create_question(**fields)
        cache_service.clear_question_cache()
        logger.info(f"Question created: {question.id}")
        return question

    def update_question(self, storage: Storage, question_id: int, changes: Dict[str, Any]) -> Question:
        """
        Apply a partial update

        Questions already graded in an attempt are frozen.
        """
        question = self.get_question(storage, question_id)
        if storage.question_has_answers(question_id):
            raise InvalidInputError("Question has graded answers and can no longer be changed")

        merged = {field: getattr(question, field) for field in QUESTION_FIELDS}
        merged.update(changes)
        fields = self._validate(storage, merged)

        updated = storage.update_question(
            question_id, **{k: v for k, v in fields.items() if k in changes}
        )
        cache_service.clear_question_cache()
        logger.info(f"Question updated: {question_id}")
        return updated

    def delete_question(self, storage: Storage, question_id: int) -> None:
        self.get_question(storage, question_id)
        if storage.question_has_answers(question_id):
            raise InvalidInputError("Question has graded answers and can no longer be deleted")

        storage.delete_question(question_id)
        cache_service.clear_question_cache()
        logger.info(f"Question deleted: {question_id}")

    def import_questions(
        self,
        storage: Storage,
        items: List[Dict[str, Any]],
        subject_id: Optional[int] = None,
    ) -> Tuple[List[Question], int]:
        """
        Bulk import questions, skipping malformed entries

        Returns:
            Tuple of (imported questions, skipped count)
        """
        if not items:
            raise InvalidInputError("No questions provided")
        if subject_id is not None and not storage.get_subject(subject_id):
            raise NotFoundError("Subject not found")

        imported = []
        skipped = 0
        for item in items:
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object question entry: {item!r}")
                skipped += 1
                continue

            data = dict(item)
            data.setdefault("difficulty", "medium")
            if subject_id is not None:
                data["subject"] = subject_id

            try:
                fields = self._validate(storage, data)
            except (InvalidInputError, NotFoundError) as e:
                logger.warning(f"Skipping invalid question: {e.message}")
                skipped += 1
                continue

            imported.append(storage.create_question(**fields))

        if imported:
            cache_service.clear_question_cache()
        logger.info(f"Imported {len(imported)} questions, skipped {skipped}")
        return imported, skipped

    def _validate(self, storage: Storage, data: Dict[str, Any]) -> Dict[str, Any]:
        """Check a full question record; returns the normalized fields"""
        text = data.get("question")
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Question text is required")

        options = data.get("options")
        if not isinstance(options, list) or len(options) == 0:
            raise InvalidInputError("At least one option is required")
        if not all(isinstance(o, str) for o in options):
            raise InvalidInputError("Options must be strings")

        answer = data.get("answer")
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise InvalidInputError("Answer must be an option index")
        if not 0 <= answer < len(options):
            raise InvalidInputError(f"Answer index {answer} is out of range for {len(options)} options")

        difficulty = data.get("difficulty") or "medium"
        if difficulty not in DIFFICULTIES:
            raise InvalidInputError(f"Difficulty must be one of {', '.join(DIFFICULTIES)}")

        category = data.get("category")
        if category is not None and not storage.get_category(category):
            raise NotFoundError(f"Category {category} not found")

        subject = data.get("subject")
        if subject is not None and not storage.get_subject(subject):
            raise NotFoundError(f"Subject {subject} not found")

        return {
            "question": text.strip(),
            "options": list(options),
            "answer": answer,
            "explanation": data.get("explanation") or None,
            "category": category,
            "subject": subject,
            "difficulty": difficulty,
        }


# Global instance
question_service = QuestionService()

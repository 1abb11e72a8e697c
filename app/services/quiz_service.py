"""
Quiz attempt lifecycle: start -> answer -> finish

Grading is exact equality on the option index. Scoring and review
scheduling are delegated to scoring_service and review_service.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from app.config import settings
from app.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from app.models import Attempt, Question
from app.services.review_service import review_service
from app.services.scoring_service import ScoreSummary, score_answers
from app.services.stats_service import stats_service
from app.storage import Storage
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerFeedback:
    correct: bool
    correct_answer: int
    explanation: Optional[str]


class QuizService:
    """Orchestrates attempts over an injected Storage"""

    def start(
        self,
        storage: Storage,
        user_id: Optional[int],
        question_ids: List[int],
    ) -> Tuple[Attempt, List[Question]]:
        """
        Open a new attempt over the given questions

        Returns:
            (attempt, questions in request order). Callers must render the
            questions through a public schema so answers never leak.
        """
        if not question_ids:
            raise InvalidInputError("Question IDs are required")
        if len(set(question_ids)) != len(question_ids):
            raise InvalidInputError("Question IDs must be unique")
        if len(question_ids) > settings.MAX_QUIZ_QUESTIONS:
            raise InvalidInputError(
                f"A quiz may contain at most {settings.MAX_QUIZ_QUESTIONS} questions"
            )

        questions = storage.get_questions(question_ids)
        if len(questions) != len(question_ids):
            found = {q.id for q in questions}
            missing = [qid for qid in question_ids if qid not in found]
            raise NotFoundError(f"Questions not found: {missing}")

        attempt = storage.create_attempt(user_id, question_ids)
        logger.info(
            f"Attempt {attempt.id} started for user {user_id} "
            f"with {attempt.total_questions} questions"
        )
        return attempt, questions

    def submit_answer(
        self,
        storage: Storage,
        attempt_id: int,
        question_id: int,
        chosen_index: int,
        time_spent: int = 0,
        is_last: bool = False,
        caller_id: Optional[int] = None,
    ) -> AnswerFeedback:
        """
        Grade and record one answer

        Resubmitting a question overwrites its earlier answer. When is_last
        is set the attempt is scored and finished. caller_id is the token
        holder, None for guests.
        """
        attempt = self._get_attempt(storage, attempt_id, caller_id)
        if attempt.is_finished:
            raise InvalidInputError(f"Attempt {attempt_id} is already finished")
        if question_id not in (attempt.question_ids or []):
            raise InvalidInputError(
                f"Question {question_id} is not part of attempt {attempt_id}"
            )

        question = storage.get_question(question_id)
        if not question:
            raise NotFoundError("Question not found")

        correct = question.answer == chosen_index
        seconds = max(int(time_spent or 0), 0)
        now = utcnow()

        storage.save_answer(
            attempt_id=attempt_id,
            question_id=question_id,
            chosen_answer=chosen_index,
            correct=correct,
            time_spent=seconds,
            answered_at=now,
        )

        if attempt.user_id is not None:
            stats_service.record_answer(storage, attempt.user_id, question, correct, seconds, now)
            review_service.record_result(storage, attempt.user_id, question.id, correct, now)

        feedback = AnswerFeedback(
            correct=correct,
            correct_answer=question.answer,
            explanation=question.explanation,
        )

        if is_last:
            self.complete(storage, attempt_id, caller_id)

        return feedback

    def finish(
        self,
        storage: Storage,
        attempt_id: int,
        score: int,
        time_spent: int,
    ) -> Attempt:
        """Stamp finished_at with score and time in a single write"""
        attempt = storage.finish_attempt(attempt_id, score, time_spent, utcnow())
        if not attempt:
            raise NotFoundError("Quiz attempt not found")

        logger.info(f"Attempt {attempt_id} finished: score {score}, {time_spent}s")
        return attempt

    def complete(self, storage: Storage, attempt_id: int, caller_id: Optional[int] = None) -> Attempt:
        """Score the attempt from its recorded answers and finish it"""
        attempt = self._get_attempt(storage, attempt_id, caller_id)
        summary = self.summarize(storage, attempt)
        return self.finish(storage, attempt_id, summary.score, summary.time_spent_seconds)

    def summarize(self, storage: Storage, attempt: Attempt) -> ScoreSummary:
        return score_answers(
            storage.list_answers(attempt.id), total_count=attempt.total_questions
        )

    def get_attempt(self, storage: Storage, attempt_id: int, caller_id: Optional[int] = None) -> Attempt:
        return self._get_attempt(storage, attempt_id, caller_id)

    def get_attempt_review(
        self,
        storage: Storage,
        attempt_id: int,
        caller_id: Optional[int] = None,
    ) -> Tuple[Attempt, List[dict]]:
        """
        Attempt plus one entry per question with the recorded response

        The answer key is included for answered questions, and for every
        question once the attempt is finished.
        """
        attempt = self._get_attempt(storage, attempt_id, caller_id)
        answers = {a.question_id: a for a in storage.list_answers(attempt_id)}

        entries = []
        for question in storage.get_questions(attempt.question_ids or []):
            answer = answers.get(question.id)
            revealed = attempt.is_finished or answer is not None
            entries.append({
                "id": question.id,
                "question": question.question,
                "options": question.options,
                "category": question.category,
                "subject": question.subject,
                "difficulty": question.difficulty,
                "chosen": answer.chosen_answer if answer else None,
                "correct": answer.correct if answer else None,
                "time_spent": answer.time_spent if answer else None,
                "answer": question.answer if revealed else None,
                "explanation": question.explanation if revealed else None,
            })

        return attempt, entries

    def list_attempts(self, storage: Storage, user_id: int) -> List[Attempt]:
        return storage.list_user_attempts(user_id)

    def _get_attempt(self, storage: Storage, attempt_id: int, caller_id: Optional[int]) -> Attempt:
        attempt = storage.get_attempt(attempt_id)
        if not attempt:
            raise NotFoundError("Quiz attempt not found")
        if not attempt.is_visible_to(caller_id):
            logger.warning(f"User {caller_id} denied access to attempt {attempt_id}")
            raise ForbiddenError("Quiz attempt belongs to another user")
        return attempt


# Global instance
quiz_service = QuizService()

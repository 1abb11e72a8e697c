"""
Quiz attempt API endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from app.api.dependencies import get_current_user_id, get_optional_user_id
from app.exceptions import InternalError
from app.schemas.analytics import QuizResult
from app.schemas.question import QuestionPublic
from app.schemas.quiz import (
    QuizStartRequest,
    QuizStartResponse,
    AnswerSubmission,
    AnswerFeedback,
    AttemptResponse,
    AttemptListResponse,
    AttemptReviewResponse,
)
from app.services.quiz_service import quiz_service
from app.services.stats_service import stats_service
from app.storage import Storage, get_storage


router = APIRouter(prefix="/api", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.post("/quiz/start", response_model=QuizStartResponse, status_code=201)
async def start_quiz(
    request: QuizStartRequest,
    user_id: Optional[int] = Depends(get_optional_user_id),
    storage: Storage = Depends(get_storage),
):
    """
    Start a quiz attempt over the given questions

    - Guests may take quizzes; history and reviews need a token
    - Questions are returned without answers or explanations
    """
    try:
        attempt, questions = quiz_service.start(storage, user_id, request.question_ids)
    except SQLAlchemyError as e:
        logger.error(f"Failed to start quiz: {str(e)}")
        storage.rollback()
        raise InternalError("Error starting quiz")

    return QuizStartResponse(
        attempt_id=attempt.id,
        total_questions=attempt.total_questions,
        questions=[QuestionPublic.model_validate(q) for q in questions],
    )


@router.post("/quiz/{attempt_id}/answer", response_model=AnswerFeedback)
async def submit_answer(
    attempt_id: int,
    submission: AnswerSubmission,
    user_id: Optional[int] = Depends(get_optional_user_id),
    storage: Storage = Depends(get_storage),
):
    """
    Grade one answer

    Grading is exact match on the option index. With is_last the attempt
    is scored and finished in the same call. Attempts started with a
    token only accept answers from that token's user.
    """
    try:
        feedback = quiz_service.submit_answer(
            storage,
            attempt_id=attempt_id,
            question_id=submission.question_id,
            chosen_index=submission.chosen_answer,
            time_spent=submission.time_spent,
            is_last=submission.is_last,
            caller_id=user_id,
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to submit answer: {str(e)}")
        storage.rollback()
        raise InternalError("Error submitting answer")

    return AnswerFeedback(
        correct=feedback.correct,
        correct_answer=feedback.correct_answer,
        explanation=feedback.explanation,
    )


@router.post("/quiz/{attempt_id}/finish", response_model=AttemptResponse)
async def finish_quiz(
    attempt_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    storage: Storage = Depends(get_storage),
):
    """Finish an attempt early; unanswered questions count as wrong"""
    try:
        return quiz_service.complete(storage, attempt_id, caller_id=user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to finish quiz: {str(e)}")
        storage.rollback()
        raise InternalError("Error finishing quiz")


@router.get("/quiz/{attempt_id}", response_model=AttemptReviewResponse)
async def get_quiz(
    attempt_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    storage: Storage = Depends(get_storage),
):
    """Attempt with every question and the recorded responses"""
    attempt, questions = quiz_service.get_attempt_review(storage, attempt_id, caller_id=user_id)
    return {"attempt": attempt, "questions": questions}


@router.get("/quiz/{attempt_id}/result", response_model=QuizResult)
async def get_quiz_result(
    attempt_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    storage: Storage = Depends(get_storage),
):
    """Score, timing and per-category breakdown of a finished attempt"""
    return stats_service.get_attempt_result(storage, attempt_id, caller_id=user_id)


@router.get("/attempts", response_model=AttemptListResponse)
async def list_attempts(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """The caller's attempts, newest first"""
    return {"attempts": quiz_service.list_attempts(storage, user_id)}

"""
Pydantic schemas for quiz attempts
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.schemas.question import QuestionPublic


class QuizStartRequest(BaseModel):
    """Questions to include, in presentation order"""
    question_ids: List[int]


class QuizStartResponse(BaseModel):
    attempt_id: int
    total_questions: int
    questions: List[QuestionPublic]


class AnswerSubmission(BaseModel):
    """One answer within an attempt"""
    question_id: int
    chosen_answer: int
    time_spent: int = Field(0, description="Seconds spent on the question")
    is_last: bool = False


class AnswerFeedback(BaseModel):
    """Grading result - the only place the correct answer is revealed"""
    correct: bool
    correct_answer: int
    explanation: Optional[str] = None


class AttemptResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    score: Optional[int] = None
    total_questions: int
    time_spent: Optional[int] = None

    class Config:
        from_attributes = True


class AttemptListResponse(BaseModel):
    attempts: List[AttemptResponse]


class AttemptQuestionReview(QuestionPublic):
    """Question with the taker's response; answer key only once revealed"""
    chosen: Optional[int] = None
    correct: Optional[bool] = None
    time_spent: Optional[int] = None
    answer: Optional[int] = None
    explanation: Optional[str] = None


class AttemptReviewResponse(BaseModel):
    attempt: AttemptResponse
    questions: List[AttemptQuestionReview]

"""
Pydantic schemas for statistics, results and reviews
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class CategoryInfo(BaseModel):
    id: int
    name: str
    color: str


class UserStatsEntry(BaseModel):
    """Performance counters for one category"""
    category_id: int
    total_attempts: int
    correct_answers: int
    accuracy: float  # 0-100
    avg_time_per_question: Optional[int] = None
    last_attempt: Optional[datetime] = None
    streak: int
    category: Optional[CategoryInfo] = None


class UserStatsResponse(BaseModel):
    stats: List[UserStatsEntry]


class CategoryPerformance(BaseModel):
    category_id: Optional[int] = None
    name: str
    color: str
    score: int
    correct: int
    questions_count: int


class QuizResult(BaseModel):
    """Score breakdown for a finished attempt"""
    attempt_id: int
    score: int
    total_questions: int
    correct_answers: int
    time_spent: int
    average_time_per_question: float
    category_performance: List[CategoryPerformance]


class DueReview(BaseModel):
    id: int
    question_id: int
    question: str
    difficulty: str
    category: Optional[CategoryInfo] = None
    due_date: datetime
    interval: int
    consecutive: int
    ease_factor: int


class DueReviewsResponse(BaseModel):
    reviews: List[DueReview]

"""
Database models package
"""
from app.models.user import User
from app.models.category import Category
from app.models.subject import Subject
from app.models.question import Question
from app.models.quiz_attempt import Attempt
from app.models.answer import Answer
from app.models.user_stats import UserStats
from app.models.review_schedule import ReviewSchedule

__all__ = [
    "User",
    "Category",
    "Subject",
    "Question",
    "Attempt",
    "Answer",
    "UserStats",
    "ReviewSchedule",
]

"""
Question model - multiple-choice questions
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from app.database import Base
from app.utils.clock import utcnow


class Question(Base):
    """
    Questions table - prompt, ordered options and the correct option index

    Rows referenced by a graded answer must not change.
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # ["opt a", "opt b", ...]
    answer = Column(Integer, nullable=False)  # Index into options
    explanation = Column(Text)
    category = Column(Integer, ForeignKey("categories.id"), index=True)
    subject = Column(Integer, ForeignKey("subjects.id"), index=True)
    difficulty = Column(String(10), nullable=False, default="medium")
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<Question(id={self.id}, difficulty={self.difficulty})>"

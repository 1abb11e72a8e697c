"""
Attempt model - one quiz-taking session
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON
from app.database import Base
from app.utils.clock import utcnow


class Attempt(Base):
    """
    Attempts table - created at quiz start, stamped when finished

    score, time_spent and finished_at are written together.
    """
    __tablename__ = "attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)  # None for guests
    question_ids = Column(JSON, nullable=False)  # Ordered ids covered by the attempt
    started_at = Column(DateTime, default=utcnow)
    finished_at = Column(DateTime)
    score = Column(Integer)  # 0-100
    total_questions = Column(Integer, nullable=False)
    time_spent = Column(Integer)  # seconds

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    def is_visible_to(self, user_id) -> bool:
        """Guest attempts are open to anyone; user attempts only to their owner"""
        return self.user_id is None or self.user_id == user_id

    def __repr__(self):
        return f"<Attempt(id={self.id}, user_id={self.user_id}, score={self.score})>"

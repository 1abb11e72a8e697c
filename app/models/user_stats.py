"""
UserStats model - per-category performance counters
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from app.database import Base


class UserStats(Base):
    __tablename__ = "user_stats"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", name="uq_user_stats_user_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    total_attempts = Column(Integer, default=0)  # Answers given in this category
    correct_answers = Column(Integer, default=0)
    avg_time_per_question = Column(Integer)  # seconds
    last_attempt = Column(DateTime)
    streak = Column(Integer, default=0)

    def __repr__(self):
        return f"<UserStats(user_id={self.user_id}, category_id={self.category_id})>"

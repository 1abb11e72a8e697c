"""
ReviewSchedule model - spaced-repetition state per (user, question)
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from app.database import Base


class ReviewSchedule(Base):
    __tablename__ = "review_schedule"
    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_review_user_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    next_review = Column(DateTime, index=True)
    interval = Column(Integer, default=1)  # days until next review
    ease_factor = Column(Integer, default=250)  # SM-2 ease in hundredths
    consecutive = Column(Integer, default=0)  # consecutive correct answers

    def __repr__(self):
        return f"<ReviewSchedule(user_id={self.user_id}, question_id={self.question_id}, next={self.next_review})>"

"""
Subject model - groups imported question sets
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from app.database import Base
from app.utils.clock import utcnow


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Subject(id={self.id}, name={self.name})>"

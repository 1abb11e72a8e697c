"""
Category model - topical tags for questions
"""
from sqlalchemy import Column, Integer, String
from app.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    color = Column(String(20), nullable=False)  # "#61dafb"

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"

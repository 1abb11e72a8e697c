"""
User model - quiz takers with bcrypt-hashed passwords
"""
from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base
from app.utils.clock import utcnow


class User(Base):
    """
    Users table - login identity and display info
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    email = Column(String(255))
    display_name = Column(String(255))
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"

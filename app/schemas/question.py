"""
Pydantic schemas for the question bank
"""
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional
from datetime import datetime

DIFFICULTY_PATTERN = "^(easy|medium|hard)$"


class QuestionCreate(BaseModel):
    """Schema for adding a question"""
    question: str = Field(..., min_length=1, description="Question prompt")
    options: List[str] = Field(..., min_length=1, description="Ordered answer options")
    answer: int = Field(..., ge=0, description="Index of the correct option")
    explanation: Optional[str] = None
    category: Optional[int] = None
    subject: Optional[int] = None
    difficulty: str = Field("medium", pattern=DIFFICULTY_PATTERN)


class QuestionUpdate(BaseModel):
    """Partial update; only provided fields change"""
    question: Optional[str] = Field(None, min_length=1)
    options: Optional[List[str]] = Field(None, min_length=1)
    answer: Optional[int] = Field(None, ge=0)
    explanation: Optional[str] = None
    category: Optional[int] = None
    subject: Optional[int] = None
    difficulty: Optional[str] = Field(None, pattern=DIFFICULTY_PATTERN)


class QuestionPublic(BaseModel):
    """Question as shown to quiz takers - never carries the answer"""
    id: int
    question: str
    options: List[str]
    category: Optional[int] = None
    subject: Optional[int] = None
    difficulty: str

    class Config:
        from_attributes = True


class QuestionDetail(QuestionPublic):
    """Question bank view including the answer key"""
    answer: int
    explanation: Optional[str] = None
    created_at: Optional[datetime] = None


class QuestionListResponse(BaseModel):
    questions: List[QuestionPublic]


class QuestionImportRequest(BaseModel):
    """Bulk import; malformed entries are skipped"""
    questions: List[Dict[str, Any]] = Field(..., min_length=1)
    subject_id: Optional[int] = None


class QuestionImportResponse(BaseModel):
    imported: int
    skipped: int
    questions: List[QuestionDetail]

"""
Question bank API endpoints
"""
from fastapi import APIRouter, Depends, Query, Response
from typing import Optional
import logging

from app.schemas.question import (
    QuestionCreate,
    QuestionUpdate,
    QuestionPublic,
    QuestionDetail,
    QuestionListResponse,
    QuestionImportRequest,
    QuestionImportResponse,
)
from app.services.question_service import question_service
from app.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["questions"])
logger = logging.getLogger(__name__)


@router.get("/questions", response_model=QuestionListResponse)
async def list_questions(
    category: Optional[int] = Query(None),
    subject: Optional[int] = Query(None),
    difficulty: Optional[str] = Query(None),
    storage: Storage = Depends(get_storage)
):
    """
    List questions, optionally filtered

    Answers and explanations are never included.
    """
    questions = question_service.list_questions(
        storage, category=category, subject=subject, difficulty=difficulty
    )
    return {"questions": questions}


@router.get("/questions/{question_id}", response_model=QuestionPublic)
async def get_question(question_id: int, storage: Storage = Depends(get_storage)):
    return question_service.get_question(storage, question_id)


@router.post("/questions", response_model=QuestionDetail, status_code=201)
async def create_question(request: QuestionCreate, storage: Storage = Depends(get_storage)):
    return question_service.create_question(storage, request.model_dump())


@router.put("/questions/{question_id}", response_model=QuestionDetail)
async def update_question(
    question_id: int,
    request: QuestionUpdate,
    storage: Storage = Depends(get_storage)
):
    """Change a question that has not been graded yet"""
    changes = request.model_dump(exclude_unset=True)
    return question_service.update_question(storage, question_id, changes)


@router.delete("/questions/{question_id}", status_code=204)
async def delete_question(question_id: int, storage: Storage = Depends(get_storage)):
    question_service.delete_question(storage, question_id)
    return Response(status_code=204)


@router.post("/import/questions", response_model=QuestionImportResponse, status_code=201)
async def import_questions(request: QuestionImportRequest, storage: Storage = Depends(get_storage)):
    """
    Bulk import questions into an optional subject

    - Malformed entries are skipped and counted
    - Difficulty defaults to "medium"
    """
    imported, skipped = question_service.import_questions(
        storage, request.questions, subject_id=request.subject_id
    )
    return QuestionImportResponse(
        imported=len(imported),
        skipped=skipped,
        questions=[QuestionDetail.model_validate(q) for q in imported],
    )

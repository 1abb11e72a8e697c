"""
Category and subject management API endpoints
"""
from fastapi import APIRouter, Depends, Response
import logging

from app.exceptions import ConflictError, NotFoundError
from app.schemas.catalog import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryListResponse,
    SubjectCreate, SubjectUpdate, SubjectResponse, SubjectListResponse,
)
from app.storage import Storage, get_storage
from app.utils.cache import cache_service

router = APIRouter(prefix="/api", tags=["catalog"])
logger = logging.getLogger(__name__)


# Categories

@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(storage: Storage = Depends(get_storage)):
    return {"categories": storage.list_categories()}


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, storage: Storage = Depends(get_storage)):
    category = storage.get_category(category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


@router.post("/categories", response_model=CategoryResponse, status_code=201)
async def create_category(request: CategoryCreate, storage: Storage = Depends(get_storage)):
    """Create a category; names are unique"""
    if storage.get_category_by_name(request.name):
        raise ConflictError("Category already exists")

    category = storage.create_category(name=request.name, color=request.color)
    logger.info(f"Category created: {category.id} ({category.name})")
    return category


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    request: CategoryUpdate,
    storage: Storage = Depends(get_storage)
):
    changes = request.model_dump(exclude_unset=True, exclude_none=True)

    if "name" in changes:
        existing = storage.get_category_by_name(changes["name"])
        if existing and existing.id != category_id:
            raise ConflictError("Category already exists")

    category = storage.update_category(category_id, **changes)
    if not category:
        raise NotFoundError("Category not found")
    return category


@router.delete("/categories/{category_id}", status_code=204)
async def delete_category(category_id: int, storage: Storage = Depends(get_storage)):
    """Delete a category; its questions become uncategorized"""
    if not storage.delete_category(category_id):
        raise NotFoundError("Category not found")
    cache_service.clear_question_cache()
    logger.info(f"Category deleted: {category_id}")
    return Response(status_code=204)


# Subjects

@router.get("/subjects", response_model=SubjectListResponse)
async def list_subjects(storage: Storage = Depends(get_storage)):
    return {"subjects": storage.list_subjects()}


@router.get("/subjects/{subject_id}", response_model=SubjectResponse)
async def get_subject(subject_id: int, storage: Storage = Depends(get_storage)):
    subject = storage.get_subject(subject_id)
    if not subject:
        raise NotFoundError("Subject not found")
    return subject


@router.post("/subjects", response_model=SubjectResponse, status_code=201)
async def create_subject(request: SubjectCreate, storage: Storage = Depends(get_storage)):
    subject = storage.create_subject(name=request.name, description=request.description)
    logger.info(f"Subject created: {subject.id} ({subject.name})")
    return subject


@router.put("/subjects/{subject_id}", response_model=SubjectResponse)
async def update_subject(
    subject_id: int,
    request: SubjectUpdate,
    storage: Storage = Depends(get_storage)
):
    changes = request.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)

    subject = storage.update_subject(subject_id, **changes)
    if not subject:
        raise NotFoundError("Subject not found")
    return subject


@router.delete("/subjects/{subject_id}", status_code=204)
async def delete_subject(subject_id: int, storage: Storage = Depends(get_storage)):
    """Delete a subject; its questions are kept"""
    if not storage.delete_subject(subject_id):
        raise NotFoundError("Subject not found")
    cache_service.clear_question_cache()
    logger.info(f"Subject deleted: {subject_id}")
    return Response(status_code=204)

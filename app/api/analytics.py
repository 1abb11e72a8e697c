"""
Statistics and spaced-repetition review API endpoints
"""
from fastapi import APIRouter, Depends
import logging

from app.api.dependencies import get_current_user_id
from app.schemas.analytics import UserStatsResponse, DueReviewsResponse
from app.services.stats_service import stats_service
from app.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("/user/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage)
):
    """
    Per-category performance for the caller

    Returns:
    - Answers given and answered correctly per category
    - Accuracy, average time per question and current streak
    """
    logger.info(f"Fetching stats for user {user_id}")
    return {"stats": stats_service.get_user_stats(storage, user_id)}


@router.get("/reviews", response_model=DueReviewsResponse)
async def get_due_reviews(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage)
):
    """Questions whose spaced-repetition review is due now"""
    return {"reviews": stats_service.get_due_reviews(storage, user_id)}

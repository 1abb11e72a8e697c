"""
Authentication API endpoints
"""
from fastapi import APIRouter, Depends
import logging

from app.api.dependencies import get_current_user_id
from app.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from app.services.auth_service import auth_service
from app.storage import Storage, get_storage

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest, storage: Storage = Depends(get_storage)):
    """Create an account and return a bearer token"""
    user, token = auth_service.register(
        storage,
        username=request.username,
        password=request.password,
        email=request.email,
        display_name=request.display_name,
    )
    return TokenResponse(
        message="User registered successfully",
        access_token=token,
        user=UserResponse(**auth_service.user_payload(user)),
    )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, storage: Storage = Depends(get_storage)):
    """Exchange username and password for a bearer token"""
    user, token = auth_service.login(storage, request.username, request.password)
    return TokenResponse(
        message="Login successful",
        access_token=token,
        user=UserResponse(**auth_service.user_payload(user)),
    )


@router.get("/user", response_model=UserResponse)
async def current_user(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """Profile of the token holder"""
    user = auth_service.get_user(storage, user_id)
    return UserResponse(**auth_service.user_payload(user))

"""
Shared request dependencies: bearer-token identity
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.exceptions import UnauthorizedError
from app.services.auth_service import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[int]:
    """User id from the bearer token, or None for guests"""
    if credentials is None:
        return None
    return auth_service.decode_token(credentials.credentials)["user_id"]


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """User id from the bearer token; 401 without one, 403 if invalid"""
    if credentials is None:
        raise UnauthorizedError("Unauthorized")
    return auth_service.decode_token(credentials.credentials)["user_id"]

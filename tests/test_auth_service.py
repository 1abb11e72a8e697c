"""
Tests for password hashing and bearer tokens
"""
from datetime import timedelta

import jwt
import pytest

from app.config import settings
from app.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from app.services.auth_service import auth_service, hash_password, verify_password
from app.utils.clock import utcnow


def test_password_hashing():
    hashed = hash_password("hunter2")

    assert hashed != "hunter2"
    assert verify_password("hunter2", hashed) is True
    assert verify_password("hunter3", hashed) is False
    assert verify_password("hunter2", "not-a-hash") is False


def test_register_and_login(storage):
    user, token = auth_service.register(storage, "alice", "s3cret")

    assert auth_service.decode_token(token)["user_id"] == user.id
    assert storage.get_user(user.id).password != "s3cret"

    _, login_token = auth_service.login(storage, "alice", "s3cret")
    assert auth_service.decode_token(login_token)["user_id"] == user.id


def test_duplicate_username(storage):
    auth_service.register(storage, "alice", "s3cret")

    with pytest.raises(ConflictError):
        auth_service.register(storage, "alice", "other")


def test_bad_credentials(storage):
    auth_service.register(storage, "alice", "s3cret")

    with pytest.raises(UnauthorizedError):
        auth_service.login(storage, "alice", "wrong")
    with pytest.raises(UnauthorizedError):
        auth_service.login(storage, "bob", "s3cret")


def test_expired_token_is_forbidden():
    token = jwt.encode(
        {"sub": "1", "exp": utcnow() - timedelta(minutes=1)},
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )

    with pytest.raises(ForbiddenError):
        auth_service.decode_token(token)


def test_foreign_signature_is_forbidden():
    token = jwt.encode({"sub": "1"}, "another-key", algorithm="HS256")

    with pytest.raises(ForbiddenError):
        auth_service.decode_token(token)

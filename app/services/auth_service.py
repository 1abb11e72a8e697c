"""
Username/password authentication issuing bearer tokens
"""
import logging
from datetime import timedelta
from typing import Dict, Any, Tuple

import bcrypt
import jwt

from app.config import settings
from app.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError, UnauthorizedError
from app.models import User
from app.storage import Storage
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


class AuthService:
    """Registration, login and token verification"""

    def register(
        self,
        storage: Storage,
        username: str,
        password: str,
        email: str = None,
        display_name: str = None,
    ) -> Tuple[User, str]:
        if not username or not password:
            raise InvalidInputError("Username and password are required")
        if storage.get_user_by_username(username):
            raise ConflictError("Username already exists")

        user = storage.create_user(
            username=username,
            password_hash=hash_password(password),
            email=email,
            display_name=display_name,
        )
        logger.info(f"User registered: {user.id} ({user.username})")
        return user, self.create_token(user)

    def login(self, storage: Storage, username: str, password: str) -> Tuple[User, str]:
        if not username or not password:
            raise InvalidInputError("Username and password are required")

        user = storage.get_user_by_username(username)
        if not user or not verify_password(password, user.password):
            logger.warning(f"Failed login for {username}")
            raise UnauthorizedError("Invalid credentials")

        return user, self.create_token(user)

    def create_token(self, user: User) -> str:
        expires = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        payload = {"sub": str(user.id), "username": user.username, "exp": expires}
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a bearer token

        Raises:
            ForbiddenError: signature, expiry or payload invalid
        """
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
            payload["user_id"] = int(payload["sub"])
        except (jwt.PyJWTError, KeyError, ValueError) as e:
            raise ForbiddenError("Invalid token") from e
        return payload

    def get_user(self, storage: Storage, user_id: int) -> User:
        user = storage.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def user_payload(user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "username": user.username,
            "display_name": user.display_name or user.username,
            "email": user.email,
        }


# Global instance
auth_service = AuthService()

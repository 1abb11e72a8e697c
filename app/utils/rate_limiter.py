"""
Rate limiting for API endpoints
"""
import time
from collections import defaultdict, deque
from fastapi import Request
from typing import Deque, Dict, Optional
import logging

from app.config import settings
from app.exceptions import QuizAppError

logger = logging.getLogger(__name__)

MINUTE = 60
HOUR = 3600


class RateLimitExceeded(QuizAppError):
    status_code = 429
    error = "rate_limit_exceeded"

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["retry_after"] = self.retry_after
        return body


class RateLimiter:
    """
    In-memory sliding-window rate limiter

    Clients are identified by bearer token user id when one decodes,
    otherwise by IP address. Counters live in this process only.
    """

    def __init__(self, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour

        # {client_id: deque of request timestamps}
        self.minute_tracker: Dict[str, Deque[float]] = defaultdict(deque)
        self.hour_tracker: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_cleanup: Optional[float] = None

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        user_id = self._token_user_id(request)
        if user_id is not None:
            return f"user:{user_id}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"

    @staticmethod
    def _token_user_id(request: Request) -> Optional[int]:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None

        from app.services.auth_service import auth_service

        try:
            return auth_service.decode_token(token)["user_id"]
        except QuizAppError:
            return None

    @staticmethod
    def _expire(window: Deque[float], cutoff: float) -> None:
        while window and window[0] <= cutoff:
            window.popleft()

    def _cleanup_old_entries(self, now: float) -> None:
        """Drop expired timestamps and forget idle clients, at most once a minute"""
        if self._last_cleanup is not None and now - self._last_cleanup < MINUTE:
            return
        self._last_cleanup = now

        for tracker, window_seconds in ((self.minute_tracker, MINUTE), (self.hour_tracker, HOUR)):
            for client_id in list(tracker.keys()):
                self._expire(tracker[client_id], now - window_seconds)
                # Remove empty entries
                if not tracker[client_id]:
                    del tracker[client_id]

    def check(self, client_id: str, now: Optional[float] = None) -> None:
        """
        Record one request for client_id

        Raises:
            RateLimitExceeded: when either window is full
        """
        now = time.time() if now is None else now
        self._cleanup_old_entries(now)

        minute = self.minute_tracker[client_id]
        hour = self.hour_tracker[client_id]
        self._expire(minute, now - MINUTE)
        self._expire(hour, now - HOUR)

        if len(minute) >= self.requests_per_minute:
            logger.warning(f"Rate limit exceeded (minute): {client_id}")
            raise RateLimitExceeded(
                f"Too many requests. Limit: {self.requests_per_minute} requests per minute",
                retry_after=MINUTE,
            )

        if len(hour) >= self.requests_per_hour:
            logger.warning(f"Rate limit exceeded (hour): {client_id}")
            raise RateLimitExceeded(
                f"Too many requests. Limit: {self.requests_per_hour} requests per hour",
                retry_after=HOUR,
            )

        minute.append(now)
        hour.append(now)

        logger.debug(f"Rate limit check passed: {client_id} (minute: {len(minute)}, hour: {len(hour)})")

    async def check_rate_limit(self, request: Request) -> None:
        self.check(self._get_client_id(request))

    def reset(self) -> None:
        self.minute_tracker.clear()
        self.hour_tracker.clear()
        self._last_cleanup = None


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)

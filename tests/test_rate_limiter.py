"""
Tests for the sliding-window rate limiter
"""
import pytest

from app.utils.rate_limiter import RateLimiter, RateLimitExceeded


class TestRateLimiter:

    def test_minute_window(self):
        limiter = RateLimiter(requests_per_minute=3, requests_per_hour=100)

        for second in range(3):
            limiter.check("ip:1", now=1000.0 + second)

        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.check("ip:1", now=1010.0)

        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 60
        assert exc_info.value.to_dict()["error"] == "rate_limit_exceeded"

    def test_window_expires(self):
        limiter = RateLimiter(requests_per_minute=2, requests_per_hour=100)
        limiter.check("ip:1", now=1000.0)
        limiter.check("ip:1", now=1001.0)

        limiter.check("ip:1", now=1061.0)

    def test_hour_window(self):
        limiter = RateLimiter(requests_per_minute=100, requests_per_hour=2)
        limiter.check("user:7", now=0.0)
        limiter.check("user:7", now=120.0)

        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.check("user:7", now=240.0)

        assert exc_info.value.retry_after == 3600

    def test_clients_are_independent(self):
        limiter = RateLimiter(requests_per_minute=1, requests_per_hour=100)

        limiter.check("ip:1", now=0.0)
        limiter.check("ip:2", now=0.0)

    def test_rejected_requests_are_not_counted(self):
        limiter = RateLimiter(requests_per_minute=1, requests_per_hour=100)
        limiter.check("ip:1", now=0.0)

        with pytest.raises(RateLimitExceeded):
            limiter.check("ip:1", now=30.0)

        limiter.check("ip:1", now=61.0)

    def test_reset(self):
        limiter = RateLimiter(requests_per_minute=1, requests_per_hour=100)
        limiter.check("ip:1", now=0.0)

        limiter.reset()

        limiter.check("ip:1", now=1.0)

    def test_idle_clients_are_forgotten(self):
        limiter = RateLimiter(requests_per_minute=10, requests_per_hour=100)
        for n in range(1000):
            limiter.check(f"ip:{n}", now=0.0)

        limiter.check("ip:late", now=10000.0)

        assert list(limiter.minute_tracker) == ["ip:late"]
        assert list(limiter.hour_tracker) == ["ip:late"]

    def test_cleanup_keeps_clients_inside_the_hour(self):
        limiter = RateLimiter(requests_per_minute=10, requests_per_hour=100)
        limiter.check("ip:1", now=0.0)

        limiter.check("ip:2", now=120.0)

        assert "ip:1" not in limiter.minute_tracker
        assert list(limiter.hour_tracker["ip:1"]) == [0.0]

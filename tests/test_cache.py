"""
Tests for the question listing cache
"""
from app.utils.cache import CacheService


class TestCacheKeys:

    def test_unset_filters(self):
        cache = CacheService(enabled=False)

        assert cache.generate_cache_key(None, None, None) == "questions:*all:*all:*all"

    def test_filters_are_positional(self):
        cache = CacheService(enabled=False)

        assert cache.generate_cache_key(3, None, "hard") == "questions:3:*all:hard"
        assert cache.generate_cache_key(None, 3, "hard") == "questions:*all:3:hard"


class TestDisabledCache:

    def test_reads_miss_and_writes_are_skipped(self):
        cache = CacheService(enabled=False)

        assert cache.redis_client is None
        assert cache.set("questions:x", [1, 2]) is False
        assert cache.get("questions:x") is None
        assert cache.clear_question_cache() is False

    def test_unreachable_redis_disables_cache(self):
        cache = CacheService(url="redis://127.0.0.1:1/0", enabled=True)

        assert cache.redis_client is None
        assert cache.get("questions:x") is None

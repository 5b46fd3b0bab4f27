"""Unit tests for build_cache."""

from unittest.mock import patch

import pytest

from infrastructure.cache import InMemoryCache, build_cache
from infrastructure.configuration.infrastructure.cache import CacheSettings


@pytest.mark.unit
class TestBuildCache:
    def test_none_disables_cache(self):
        assert build_cache(CacheSettings(CACHE_BACKEND="none")) is None

    def test_memory_backend(self):
        assert isinstance(build_cache(CacheSettings(CACHE_BACKEND="memory")), InMemoryCache)

    def test_backend_name_is_case_insensitive(self):
        assert isinstance(build_cache(CacheSettings(CACHE_BACKEND="Memory")), InMemoryCache)

    @patch("infrastructure.cache.factory.RedisCache.from_settings")
    def test_redis_backend(self, mock_from_settings):
        settings = CacheSettings(
            CACHE_BACKEND="redis", REDIS_HOST="redis.internal", REDIS_PORT=6380
        )

        cache = build_cache(settings)

        assert cache is mock_from_settings.return_value
        mock_from_settings.assert_called_once_with(
            host="redis.internal",
            port=6380,
            db=0,
            password=None,
            socket_timeout=2,
        )

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown cache backend: memcached"):
            build_cache(CacheSettings(CACHE_BACKEND="memcached"))

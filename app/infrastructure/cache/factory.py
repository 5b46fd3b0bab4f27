"""Cache factory."""

from typing import TYPE_CHECKING, Optional

import structlog

from infrastructure.cache.base import Cache
from infrastructure.cache.memory import InMemoryCache
from infrastructure.cache.redis_cache import RedisCache

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure.cache import CacheSettings

logger = structlog.get_logger()


def build_cache(settings: "CacheSettings") -> Optional[Cache]:
    """Build the configured preference cache.

    Returns:
        A cache instance, or None when caching is disabled (`none`).

    Raises:
        ValueError: For an unknown backend name.
    """
    backend = settings.backend.lower()

    if backend == "none":
        logger.info("initialized_cache", backend="none")
        return None

    if backend == "memory":
        logger.info("initialized_cache", backend="memory")
        return InMemoryCache()

    if backend == "redis":
        cache = RedisCache.from_settings(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        )
        logger.info("initialized_cache", backend="redis", host=settings.REDIS_HOST)
        return cache

    raise ValueError(f"Unknown cache backend: {settings.backend}")

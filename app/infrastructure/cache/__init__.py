"""Preference cache backends.

Usage:
    from infrastructure.cache import build_cache

    cache = build_cache(settings.cache)
    if cache is not None:
        cache.set("user:42:preferences", {...}, ttl_seconds=1800)
"""

from infrastructure.cache.base import Cache
from infrastructure.cache.factory import build_cache
from infrastructure.cache.memory import InMemoryCache
from infrastructure.cache.redis_cache import RedisCache

__all__ = [
    "Cache",
    "InMemoryCache",
    "RedisCache",
    "build_cache",
]

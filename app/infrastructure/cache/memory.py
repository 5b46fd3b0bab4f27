"""In-process TTL cache."""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from infrastructure.cache.base import Cache

logger = structlog.get_logger()


class InMemoryCache(Cache):
    """Thread-safe per-process cache with lazy expiry.

    Args:
        monotonic: Time source in seconds, injectable for tests.
    """

    def __init__(self, monotonic: Callable[[], float] = time.monotonic):
        self._monotonic = monotonic
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            expires_at, value = entry
            if expires_at <= self._monotonic():
                del self._entries[key]
                self._misses += 1
                return None
            self._hits += 1
            return dict(value)

    def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (self._monotonic() + ttl_seconds, dict(value))

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.debug("memory_cache_cleared")

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }

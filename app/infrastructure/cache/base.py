"""Key/value cache abstract base class."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Cache(ABC):
    """Abstract base class for cache implementations.

    Values are JSON-compatible dicts. Implementations must never raise on
    backend trouble: a failing backend behaves like an empty cache so callers
    fall through to the authoritative store.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a cached value.

        Args:
            key: Cache key.

        Returns:
            Cached dict, or None if missing, expired or unavailable.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        """Store a value for `ttl_seconds`."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Evict a key. Missing keys are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all cached entries (for testing)."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Implementation-specific statistics."""
        pass

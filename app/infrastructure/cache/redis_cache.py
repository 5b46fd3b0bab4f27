"""Redis-backed cache.

Connects to Redis as a plain key/value client. Every backend failure is
logged and reported to the caller as a miss (or a no-op for writes) so the
preference gate keeps working straight from its store while Redis is down.
"""

import json
from typing import Any, Dict, Optional

import structlog
from redis import ConnectionPool, Redis, RedisError  # type: ignore
from redis.exceptions import ConnectionError, TimeoutError  # type: ignore

from infrastructure.cache.base import Cache

logger = structlog.get_logger()


class RedisCache(Cache):
    """Cache stored in Redis with server-side TTLs.

    Args:
        client: Ready Redis client. Build one from settings with `from_settings`.
        key_prefix: Optional namespace prepended to every key.
    """

    def __init__(self, client: Redis, key_prefix: str = ""):
        self._client = client
        self._key_prefix = key_prefix
        self._errors = 0

    @classmethod
    def from_settings(
        cls,
        host: str,
        port: int,
        db: int = 0,
        password: Optional[str] = None,
        socket_timeout: int = 2,
        key_prefix: str = "",
    ) -> "RedisCache":
        """Create a cache with its own connection pool.

        The connection is lazy: nothing is contacted until the first command.
        """
        pool = ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            decode_responses=True,
            max_connections=10,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        logger.info("redis_cache_connection_pool_created", host=host, port=port, db=db)
        return cls(Redis(connection_pool=pool), key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            raw = self._client.get(self._key(key))
        except (ConnectionError, TimeoutError, RedisError) as e:
            self._errors += 1
            logger.warning("redis_cache_get_failed", key=key, error=str(e))
            return None

        if raw is None:
            return None

        try:
            value = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            logger.warning("redis_cache_value_not_json", key=key)
            return None
        return value if isinstance(value, dict) else None

    def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        try:
            self._client.setex(self._key(key), ttl_seconds, json.dumps(value, default=str))
        except (ConnectionError, TimeoutError, RedisError) as e:
            self._errors += 1
            logger.warning("redis_cache_set_failed", key=key, error=str(e))

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except (ConnectionError, TimeoutError, RedisError) as e:
            self._errors += 1
            logger.warning("redis_cache_delete_failed", key=key, error=str(e))

    def clear(self) -> None:
        try:
            for key in self._client.scan_iter(match=f"{self._key_prefix}*"):
                self._client.delete(key)
        except (ConnectionError, TimeoutError, RedisError) as e:
            self._errors += 1
            logger.warning("redis_cache_clear_failed", error=str(e))

    def ping(self) -> bool:
        """True when the server answers PING."""
        try:
            return bool(self._client.ping())
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.warning("redis_cache_ping_failed", error=str(e))
            return False

    def get_stats(self) -> Dict[str, Any]:
        return {"backend": "redis", "errors": self._errors}

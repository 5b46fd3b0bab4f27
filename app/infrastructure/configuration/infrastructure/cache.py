"""Preference cache infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class CacheSettings(InfrastructureSettings):
    """Cache backend configuration.

    The cache is optional. With the `memory` backend a per-process TTL cache
    is used; with `redis` the engine talks to a Redis server and degrades to
    direct store reads whenever the server is unreachable.

    Environment Variables:
        CACHE_BACKEND: 'memory', 'redis' or 'none' (default: memory)
        REDIS_HOST: Redis host (default: localhost)
        REDIS_PORT: Redis port (default: 6379)
        REDIS_DB: Redis database index (default: 0)
        REDIS_PASSWORD: Redis password (optional)
        REDIS_SOCKET_TIMEOUT_SECONDS: Socket timeout (default: 2)
    """

    backend: str = Field(
        default="memory",
        alias="CACHE_BACKEND",
        description="Cache backend: 'memory', 'redis' or 'none'",
    )
    REDIS_HOST: str = Field(default="localhost", alias="REDIS_HOST")
    REDIS_PORT: int = Field(default=6379, alias="REDIS_PORT")
    REDIS_DB: int = Field(default=0, alias="REDIS_DB")
    REDIS_PASSWORD: str | None = Field(default=None, alias="REDIS_PASSWORD")
    REDIS_SOCKET_TIMEOUT_SECONDS: int = Field(
        default=2, alias="REDIS_SOCKET_TIMEOUT_SECONDS"
    )

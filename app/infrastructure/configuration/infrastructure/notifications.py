"""Notification dispatch infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class NotificationSettings(InfrastructureSettings):
    """Dispatch, bulk batching and preference cache configuration.

    Environment Variables:
        NOTIFICATIONS_INLINE_MAX_ATTEMPTS: Inline send attempts per channel (default: 3)
        NOTIFICATIONS_INLINE_BASE_DELAY_SECONDS: First inline backoff delay (default: 1.0)
        NOTIFICATIONS_DEFERRED_RETRY_ENABLED: Queue exhausted sends for later (default: True)
        NOTIFICATIONS_DISPATCH_WORKERS: Thread pool size for channel fan-out (default: 16)
        NOTIFICATIONS_BULK_MAX_SIZE: Hard cap on a bulk request (default: 1000)
        NOTIFICATIONS_BULK_CHUNK_SIZE: Payloads dispatched per chunk (default: 100)
        NOTIFICATIONS_BULK_CONCURRENCY: Concurrent dispatches per chunk (default: 10)
        NOTIFICATIONS_BULK_PAUSE_SECONDS: Pause between chunks (default: 1.0)
        NOTIFICATIONS_PREFERENCE_CACHE_TTL_SECONDS: Preference cache TTL (default: 1800)
        NOTIFICATIONS_LOG_RETENTION_DAYS: Delivery log retention horizon (default: 90)

    Inline Backoff:
        Delay before attempt n+1 is base_delay * 2 ^ (n - 1).

        Example with defaults (base=1s, attempts=3):
            Attempt 1: immediate
            Attempt 2: after 1s
            Attempt 3: after 2s

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        chunk_size = settings.notifications.bulk_chunk_size
        ```
    """

    inline_max_attempts: int = Field(
        default=3,
        alias="NOTIFICATIONS_INLINE_MAX_ATTEMPTS",
        description="Inline send attempts per channel before giving up",
    )
    inline_base_delay_seconds: float = Field(
        default=1.0,
        alias="NOTIFICATIONS_INLINE_BASE_DELAY_SECONDS",
        description="Delay before the second inline attempt (doubles afterwards)",
    )
    deferred_retry_enabled: bool = Field(
        default=True,
        alias="NOTIFICATIONS_DEFERRED_RETRY_ENABLED",
        description="Hand exhausted sends to the deferred retry queue",
    )
    dispatch_workers: int = Field(
        default=16,
        alias="NOTIFICATIONS_DISPATCH_WORKERS",
        description="Thread pool size used for channel fan-out",
    )
    bulk_max_size: int = Field(
        default=1000,
        alias="NOTIFICATIONS_BULK_MAX_SIZE",
        description="Maximum payloads accepted in one bulk request",
    )
    bulk_chunk_size: int = Field(
        default=100,
        alias="NOTIFICATIONS_BULK_CHUNK_SIZE",
        description="Payloads dispatched per chunk",
    )
    bulk_concurrency: int = Field(
        default=10,
        alias="NOTIFICATIONS_BULK_CONCURRENCY",
        description="Concurrent dispatches within a chunk",
    )
    bulk_pause_seconds: float = Field(
        default=1.0,
        alias="NOTIFICATIONS_BULK_PAUSE_SECONDS",
        description="Pause inserted between chunks",
    )
    preference_cache_ttl_seconds: int = Field(
        default=1800,
        alias="NOTIFICATIONS_PREFERENCE_CACHE_TTL_SECONDS",
        description="Time-to-live of cached preferences (seconds, 30 minutes)",
    )
    log_retention_days: int = Field(
        default=90,
        alias="NOTIFICATIONS_LOG_RETENTION_DAYS",
        description="Delivery log entries older than this are purged",
    )

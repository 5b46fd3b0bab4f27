"""Deferred retry queue infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Deferred retry queue configuration.

    The queue holds sends whose inline attempts were exhausted. A scheduler
    tick drains due items and resends them with exponential backoff until the
    notification type's retry budget is spent. The values below form the
    default policy; a few notification types override them (see
    `infrastructure.resilience.retry.config.TYPE_POLICY_OVERRIDES`).

    Environment Variables:
        RETRY_TICK_INTERVAL_SECONDS: Scheduler tick interval (default: 60s)
        RETRY_MAX_RETRIES: Default deferred retry budget (default: 3)
        RETRY_INITIAL_DELAY_SECONDS: Default first deferred delay (default: 1.0s)
        RETRY_MAX_DELAY_SECONDS: Default backoff cap (default: 300s = 5min)
        RETRY_BACKOFF_MULTIPLIER: Default backoff multiplier (default: 2.0)

    Exponential Backoff:
        Delay calculation: min(initial_delay * (multiplier ^ attempt), max_delay)

        Example with defaults (initial=1s, multiplier=2, max=300s):
            Attempt 1 queued after: 1s
            Attempt 2 queued after: 2s
            Attempt 3 queued after: 4s

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        interval = settings.retry.tick_interval_seconds
        ```
    """

    tick_interval_seconds: int = Field(
        default=60,
        alias="RETRY_TICK_INTERVAL_SECONDS",
        description="Interval between retry queue ticks (seconds)",
    )
    max_retries: int = Field(
        default=3,
        alias="RETRY_MAX_RETRIES",
        description="Default number of deferred retries per send",
    )
    initial_delay_seconds: float = Field(
        default=1.0,
        alias="RETRY_INITIAL_DELAY_SECONDS",
        description="Default delay before the first deferred retry (seconds)",
    )
    max_delay_seconds: float = Field(
        default=300.0,
        alias="RETRY_MAX_DELAY_SECONDS",
        description="Default maximum backoff delay (seconds, 5 minutes)",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        alias="RETRY_BACKOFF_MULTIPLIER",
        description="Default exponential backoff multiplier",
    )

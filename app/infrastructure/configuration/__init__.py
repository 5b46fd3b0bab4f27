"""Configuration module - public API.

Centralized configuration for the notification delivery engine using
Pydantic BaseSettings, organized by concern.

Exports:
    settings: Process-wide settings instance (prefer get_settings() in services)
    Settings: Main settings class (for testing/overrides)
    RetrySettings: Deferred retry settings class (for testing)
    RateLimitSettings: Admission control settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    retry_interval = settings.retry.tick_interval_seconds
    send_limit = settings.rate_limits.send
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.infrastructure.retry import RetrySettings
from infrastructure.configuration.infrastructure.rate_limits import RateLimitSettings

__all__ = ["settings", "Settings", "RetrySettings", "RateLimitSettings"]

"""Notification engine configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    FcmSettings,
    NotifySettings,
)

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    CacheSettings,
    NotificationSettings,
    RateLimitSettings,
    RetrySettings,
    ServerSettings,
)


class Settings(BaseSettings):
    """Notification engine configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: Downstream providers (FCM push, GC Notify email)
    - **Infrastructure**: Dispatch, retry queue, admission control, cache, server

    Environment Variables:
        PREFIX: Environment prefix; empty means production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking
        SCHEDULER_ENABLED: Run periodic jobs in this process (default: True)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.notifications.deferred_retry_enabled:
            interval = settings.retry.tick_interval_seconds

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"
    SCHEDULER_ENABLED: bool = True

    # Integration settings
    fcm: FcmSettings
    notify: NotifySettings

    # Infrastructure settings
    notifications: NotificationSettings
    retry: RetrySettings
    rate_limits: RateLimitSettings
    cache: CacheSettings
    server: ServerSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "fcm": FcmSettings,
            "notify": NotifySettings,
            # Infrastructure
            "notifications": NotificationSettings,
            "retry": RetrySettings,
            "rate_limits": RateLimitSettings,
            "cache": CacheSettings,
            "server": ServerSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()

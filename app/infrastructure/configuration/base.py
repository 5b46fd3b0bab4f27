"""Shared base classes for settings sections."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class IntegrationSettings(BaseSettings):
    """Base class for downstream provider settings (FCM, GC Notify, Redis).

    Every provider section loads from the same `.env` file with case
    sensitive variable names so sections can be instantiated on their own
    in tests.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class InfrastructureSettings(BaseSettings):
    """Base class for engine-level settings.

    Engine settings control dispatch behaviour: inline retry, the deferred
    retry queue, bulk batching, admission control and the preference cache.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

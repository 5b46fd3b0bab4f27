"""Infrastructure settings __init__ - exports all engine settings."""

from infrastructure.configuration.infrastructure.cache import CacheSettings
from infrastructure.configuration.infrastructure.notifications import (
    NotificationSettings,
)
from infrastructure.configuration.infrastructure.rate_limits import RateLimitSettings
from infrastructure.configuration.infrastructure.retry import RetrySettings
from infrastructure.configuration.infrastructure.server import ServerSettings

__all__ = [
    "CacheSettings",
    "NotificationSettings",
    "RateLimitSettings",
    "RetrySettings",
    "ServerSettings",
]

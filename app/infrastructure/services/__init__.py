"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    BulkDispatcherDep,
    DeliveryLogDep,
    DispatcherDep,
    InAppInboxDep,
    PreferenceGateDep,
    RateLimiterDep,
    RecipientDirectoryDep,
    RetryQueueDep,
    SettingsDep,
)
from infrastructure.services.providers import (
    get_bulk_dispatcher,
    get_cache,
    get_channels,
    get_delivery_log,
    get_dispatcher,
    get_in_app_inbox,
    get_preference_gate,
    get_rate_limiter,
    get_recipient_directory,
    get_retry_queue,
    get_retry_worker,
    get_settings,
)

__all__ = [
    "BulkDispatcherDep",
    "DeliveryLogDep",
    "DispatcherDep",
    "InAppInboxDep",
    "PreferenceGateDep",
    "RateLimiterDep",
    "RecipientDirectoryDep",
    "RetryQueueDep",
    "SettingsDep",
    "get_bulk_dispatcher",
    "get_cache",
    "get_channels",
    "get_delivery_log",
    "get_dispatcher",
    "get_in_app_inbox",
    "get_preference_gate",
    "get_rate_limiter",
    "get_recipient_directory",
    "get_retry_queue",
    "get_retry_worker",
    "get_settings",
]

"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for the notification engine services.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.configuration import Settings
from infrastructure.notifications.bulk import BulkDispatcher
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.directory import RecipientDirectory
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.in_app import InAppInbox
from infrastructure.notifications.preferences import PreferenceGate
from infrastructure.rate_limiting import FixedWindowRateLimiter
from infrastructure.resilience.retry import RetryQueue
from infrastructure.services.providers import (
    get_bulk_dispatcher,
    get_delivery_log,
    get_dispatcher,
    get_in_app_inbox,
    get_preference_gate,
    get_rate_limiter,
    get_recipient_directory,
    get_retry_queue,
    get_settings,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Notification services
DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]
BulkDispatcherDep = Annotated[BulkDispatcher, Depends(get_bulk_dispatcher)]
PreferenceGateDep = Annotated[PreferenceGate, Depends(get_preference_gate)]
DeliveryLogDep = Annotated[DeliveryLog, Depends(get_delivery_log)]
InAppInboxDep = Annotated[InAppInbox, Depends(get_in_app_inbox)]
RecipientDirectoryDep = Annotated[RecipientDirectory, Depends(get_recipient_directory)]
RetryQueueDep = Annotated[RetryQueue, Depends(get_retry_queue)]

# Admission control
RateLimiterDep = Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)]

__all__ = [
    "SettingsDep",
    "DispatcherDep",
    "BulkDispatcherDep",
    "PreferenceGateDep",
    "DeliveryLogDep",
    "InAppInboxDep",
    "RecipientDirectoryDep",
    "RetryQueueDep",
    "RateLimiterDep",
]

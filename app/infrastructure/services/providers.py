"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for the notification engine.
Every provider is `lru_cache`d, so one instance of each service exists per
process and the API, the scheduler jobs and the event sink share them.
Tests build their own instances or use `app.dependency_overrides`.
"""

from functools import lru_cache
from typing import Dict, Optional

from infrastructure.cache import Cache, build_cache
from infrastructure.configuration import Settings
from infrastructure.notifications.bulk import BulkDispatcher
from infrastructure.notifications.channels import (
    ChannelSender,
    EmailSender,
    InAppSender,
    PushSender,
)
from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.directory import RecipientDirectory
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.in_app import InAppInbox
from infrastructure.notifications.models import NotificationChannel
from infrastructure.notifications.preferences import PreferenceGate
from infrastructure.notifications.retry_processor import NotificationRetryProcessor
from infrastructure.persistence import (
    InMemoryDeliveryLogStore,
    InMemoryInAppStore,
    InMemoryPreferenceStore,
)
from infrastructure.rate_limiting import FixedWindowRateLimiter
from infrastructure.resilience.retry import RetryPolicies, RetryQueue, RetryWorker


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.retry.model_dump()
    """
    return Settings()


# Storage


@lru_cache
def get_preference_store() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@lru_cache
def get_delivery_log_store() -> InMemoryDeliveryLogStore:
    return InMemoryDeliveryLogStore()


@lru_cache
def get_in_app_store() -> InMemoryInAppStore:
    return InMemoryInAppStore()


@lru_cache
def get_cache() -> Optional[Cache]:
    """Configured preference cache, or None when `CACHE_BACKEND=none`."""
    return build_cache(get_settings().cache)


@lru_cache
def get_recipient_directory() -> RecipientDirectory:
    return RecipientDirectory()


# Notification services


@lru_cache
def get_preference_gate() -> PreferenceGate:
    return PreferenceGate(
        store=get_preference_store(),
        cache=get_cache(),
        ttl_seconds=get_settings().notifications.preference_cache_ttl_seconds,
    )


@lru_cache
def get_delivery_log() -> DeliveryLog:
    return DeliveryLog(store=get_delivery_log_store())


@lru_cache
def get_in_app_inbox() -> InAppInbox:
    return InAppInbox(store=get_in_app_store())


@lru_cache
def get_channels() -> Dict[NotificationChannel, ChannelSender]:
    """Channel senders keyed by channel."""
    settings = get_settings()
    directory = get_recipient_directory()
    return {
        NotificationChannel.PUSH: PushSender(settings.fcm, directory),
        NotificationChannel.EMAIL: EmailSender(settings.notify, directory),
        NotificationChannel.IN_APP: InAppSender(get_in_app_store()),
    }


@lru_cache
def get_retry_queue() -> RetryQueue:
    return RetryQueue(policies=RetryPolicies.from_settings(get_settings().retry))


@lru_cache
def get_retry_worker() -> RetryWorker:
    processor = NotificationRetryProcessor(
        channels=get_channels(),
        preferences=get_preference_gate(),
        delivery_log=get_delivery_log(),
    )
    return RetryWorker(queue=get_retry_queue(), processor=processor)


@lru_cache
def get_dispatcher() -> NotificationDispatcher:
    """
    Get application-scoped notification dispatcher singleton.

    Usage:
        @router.post("/send")
        def send(dispatcher: DispatcherDep, payload: NotificationPayload):
            return dispatcher.send_notification(payload)
    """
    settings = get_settings().notifications
    return NotificationDispatcher(
        channels=get_channels(),
        preferences=get_preference_gate(),
        delivery_log=get_delivery_log(),
        retry_queue=get_retry_queue(),
        max_attempts=settings.inline_max_attempts,
        base_delay_seconds=settings.inline_base_delay_seconds,
        deferred_retry_enabled=settings.deferred_retry_enabled,
        max_workers=settings.dispatch_workers,
    )


@lru_cache
def get_bulk_dispatcher() -> BulkDispatcher:
    settings = get_settings().notifications
    return BulkDispatcher(
        dispatcher=get_dispatcher(),
        max_size=settings.bulk_max_size,
        chunk_size=settings.bulk_chunk_size,
        concurrency=settings.bulk_concurrency,
        pause_seconds=settings.bulk_pause_seconds,
    )


# Admission control


@lru_cache
def get_rate_limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter()

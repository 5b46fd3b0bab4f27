"""Notification delivery engine.

Preference-gated multi-channel delivery (Push, Email, In-App) with inline
retries, a deferred retry queue, bulk batching and a delivery audit log.

Only models and errors are re-exported here; import services from their
modules (`infrastructure.notifications.dispatcher`, ...) or obtain wired
instances from `infrastructure.services`.

Usage:
    from infrastructure.notifications import NotificationPayload, NotificationType
    from infrastructure.services import get_dispatcher

    result = get_dispatcher().send_notification(
        NotificationPayload(
            recipient_id="user-1",
            type=NotificationType.TICKET_CREATED,
            title="New Ticket Created",
        )
    )
"""

from infrastructure.notifications.errors import (
    AdmissionRejected,
    BulkLimitExceeded,
    ChannelSendError,
    NotificationError,
    NotificationValidationError,
    PersistentChannelFailure,
    PreferenceLookupFailure,
)
from infrastructure.notifications.models import (
    BulkDispatchResult,
    ChannelOutcome,
    DeliveryLogEntry,
    DeliveryStats,
    DeliveryStatus,
    DispatchResult,
    InAppNotification,
    NotificationChannel,
    NotificationPayload,
    NotificationPreferences,
    NotificationType,
    OutcomeStatus,
)

__all__ = [
    # Errors
    "AdmissionRejected",
    "BulkLimitExceeded",
    "ChannelSendError",
    "NotificationError",
    "NotificationValidationError",
    "PersistentChannelFailure",
    "PreferenceLookupFailure",
    # Models
    "BulkDispatchResult",
    "ChannelOutcome",
    "DeliveryLogEntry",
    "DeliveryStats",
    "DeliveryStatus",
    "DispatchResult",
    "InAppNotification",
    "NotificationChannel",
    "NotificationPayload",
    "NotificationPreferences",
    "NotificationType",
    "OutcomeStatus",
]

"""Deferred retry models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from infrastructure.notifications.models import (
    NotificationChannel,
    NotificationPayload,
    NotificationType,
)


class RetryResult(Enum):
    """Outcome of processing one retry item.

    Values:
        DELIVERED: Resend succeeded, item leaves the queue
        RETRY: Resend failed, reschedule while budget remains
        DROPPED: Item no longer applies (channel disabled, user unreachable)
    """

    DELIVERED = "delivered"
    RETRY = "retry"
    DROPPED = "dropped"


@dataclass
class RetryItem:
    """A pending deferred send on one channel.

    The payload is a copy of the original notification so the item can be
    resent without going back to the caller.

    Fields:
        delivery_id: Delivery log grouping id shared with the inline round
        attempt: 1-based number of the deferred attempt this item represents
        next_retry_at: Earliest time the item may be processed
        last_error: Error of the most recent failed attempt
    """

    delivery_id: str
    user_id: str
    notification_type: NotificationType
    channel: NotificationChannel
    attempt: int
    next_retry_at: datetime
    payload: NotificationPayload
    last_error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.attempt < 1:
            raise ValueError("attempt must be at least 1")

    @property
    def base_id(self) -> str:
        """One notification on one channel; stable across attempts."""
        return f"{self.delivery_id}:{self.channel.value}"

    @property
    def id(self) -> str:
        return f"{self.base_id}-{self.attempt}"

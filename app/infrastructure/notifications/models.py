"""Notification engine core models.

Pydantic models shared by the dispatcher, retry queue, delivery log and the
HTTP layer. Payloads travel over the wire in camelCase (`recipientId`,
`ticketId`) but snake_case field names are accepted as well.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from infrastructure.clock import utc_now


class NotificationType(str, Enum):
    """Business events that produce notifications."""

    TICKET_CREATED = "TicketCreated"
    TICKET_ASSIGNED = "TicketAssigned"
    TICKET_STATUS_CHANGED = "TicketStatusChanged"
    TICKET_COMPLETED = "TicketCompleted"
    QUOTE_CREATED = "QuoteCreated"
    QUOTE_APPROVED = "QuoteApproved"
    QUOTE_DECLINED = "QuoteDeclined"
    OTP_REQUESTED = "OTPRequested"
    MEDIA_UPLOADED = "MediaUploaded"
    MESSAGE_RECEIVED = "MessageReceived"


class NotificationChannel(str, Enum):
    """Delivery channels."""

    PUSH = "Push"
    EMAIL = "Email"
    IN_APP = "InApp"

    @property
    def preference_key(self) -> str:
        """Key used by preference updates (`push`, `email`, `inApp`)."""
        return _PREFERENCE_KEYS[self]

    @classmethod
    def from_preference_key(cls, key: str) -> "NotificationChannel":
        """Resolve a preference key or channel value to a channel.

        Raises:
            ValueError: If the key names no channel.
        """
        for channel, preference_key in _PREFERENCE_KEYS.items():
            if key in (preference_key, channel.value):
                return channel
        raise ValueError(f"Unknown notification channel: {key}")


_PREFERENCE_KEYS = {
    NotificationChannel.PUSH: "push",
    NotificationChannel.EMAIL: "email",
    NotificationChannel.IN_APP: "inApp",
}


class DeliveryStatus(str, Enum):
    """Outcome recorded in the delivery log."""

    DELIVERED = "Delivered"
    FAILED = "Failed"


class OutcomeStatus(str, Enum):
    """Per-channel outcome of one dispatch."""

    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"


class NotificationPayload(BaseModel):
    """A single notification addressed to one user.

    Attributes:
        recipient_id: User the notification is for (required, non-blank)
        type: NotificationType of the business event
        title: Short title (required, non-blank)
        message: Body text
        data: Free-form key/value pairs forwarded to channels
        ticket_id: Related ticket, when the event concerns one

    Example:
        payload = NotificationPayload(
            recipient_id="user-1",
            type=NotificationType.TICKET_ASSIGNED,
            title="Ticket Assigned",
            message="Ticket #T-100 has been assigned to you",
            ticket_id="t-100",
        )
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    recipient_id: str
    type: NotificationType
    title: str
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)
    ticket_id: Optional[str] = None

    @field_validator("recipient_id", "title")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v


class NotificationPreferences(BaseModel):
    """Per-user channel switches. Absent rows are created all-enabled."""

    user_id: str
    push_enabled: bool = True
    email_enabled: bool = True
    in_app_enabled: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def is_enabled(self, channel: NotificationChannel) -> bool:
        """Whether `channel` is switched on for this user."""
        if channel == NotificationChannel.PUSH:
            return self.push_enabled
        if channel == NotificationChannel.EMAIL:
            return self.email_enabled
        return self.in_app_enabled

    def enabled_channels(self) -> List[NotificationChannel]:
        """Enabled channels in Push, Email, InApp order."""
        return [c for c in NotificationChannel if self.is_enabled(c)]


class DeliveryLogEntry(BaseModel):
    """One send attempt outcome. Append-only.

    Attributes:
        delivery_id: Shared by every channel and attempt of one notification.
            Stats count the latest entry per (delivery_id, channel).
        attempt: 1-based deferred attempt number (0 for the inline round)
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    delivery_id: str
    user_id: str
    notification_type: NotificationType
    channel: NotificationChannel
    status: DeliveryStatus
    error_message: Optional[str] = None
    attempt: int = 0
    created_at: datetime = Field(default_factory=utc_now)


class InAppNotification(BaseModel):
    """Inbox entry stored by the in-app channel."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    type: NotificationType
    title: str
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime = Field(default_factory=utc_now)


class ChannelOutcome(BaseModel):
    """Result of one channel within a dispatch."""

    channel: NotificationChannel
    status: OutcomeStatus
    attempts: int = 0
    error: Optional[str] = None
    retry_queued: bool = False


class DispatchResult(BaseModel):
    """Aggregate result of `NotificationDispatcher.send_notification`."""

    payload: NotificationPayload
    delivery_id: str
    outcomes: List[ChannelOutcome] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        """True when no channel failed (skipped channels do not count)."""
        return not self.failed_channels

    @property
    def failed_channels(self) -> List[NotificationChannel]:
        return [o.channel for o in self.outcomes if o.status == OutcomeStatus.FAILED]


class BulkDispatchResult(BaseModel):
    """Summary of a bulk send."""

    total: int
    chunks: int
    dispatched: int
    errored: int


class DeliveryStats(BaseModel):
    """Aggregate counts over the latest entry of each delivery."""

    total: int = 0
    delivered: int = 0
    failed: int = 0
    pending: int = 0
    success_rate: float = 0.0


class ChannelStats(DeliveryStats):
    channel: NotificationChannel


class NotificationTypeStats(DeliveryStats):
    notification_type: NotificationType

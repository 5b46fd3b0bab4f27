"""Typed upstream events.

Each event knows which notifications it implies via `to_payloads()`. Event
fields carry only what the notification text and data need.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

from infrastructure.clock import utc_now
from infrastructure.notifications.models import NotificationPayload, NotificationType


@dataclass
class NotificationEvent(ABC):
    """Base class for events that produce notifications."""

    event_type: ClassVar[str] = ""
    notification_type: ClassVar[NotificationType]

    occurred_at: datetime = field(default_factory=utc_now, kw_only=True)

    @abstractmethod
    def to_payloads(self) -> List[NotificationPayload]:
        """Notifications implied by this event, one per recipient."""

    def _payload(
        self,
        recipient_id: str,
        title: str,
        message: str,
        ticket_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> NotificationPayload:
        data = dict(data or {})
        if ticket_id:
            data["ticketId"] = ticket_id
        return NotificationPayload(
            recipient_id=recipient_id,
            type=self.notification_type,
            title=title,
            message=message,
            data=data,
            ticket_id=ticket_id,
        )


@dataclass
class TicketRef:
    id: str
    title: str
    tenant_id: Optional[str] = None
    assigned_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


# Tickets


@dataclass
class TicketCreated(NotificationEvent):
    """A tenant opened a maintenance request.

    The tenant gets a confirmation; every supervisor of the property gets an
    alert.
    """

    event_type = "ticket.created"
    notification_type = NotificationType.TICKET_CREATED

    ticket: TicketRef
    property_name: str = ""
    priority: str = ""
    supervisor_ids: List[str] = field(default_factory=list)

    def to_payloads(self) -> List[NotificationPayload]:
        ticket = self.ticket.to_dict()
        payloads = []
        if self.ticket.tenant_id:
            payloads.append(
                self._payload(
                    self.ticket.tenant_id,
                    "Maintenance Request Created",
                    f'Your maintenance request "{self.ticket.title}" has been submitted.',
                    ticket_id=self.ticket.id,
                    data={"ticket": ticket},
                )
            )
        for supervisor_id in self.supervisor_ids:
            payloads.append(
                self._payload(
                    supervisor_id,
                    "New Maintenance Request",
                    f"A new maintenance request has been created for {self.property_name}.",
                    ticket_id=self.ticket.id,
                    data={"ticket": ticket, "priority": self.priority},
                )
            )
        return payloads


@dataclass
class TicketAssigned(NotificationEvent):
    event_type = "ticket.assigned"
    notification_type = NotificationType.TICKET_ASSIGNED

    ticket: TicketRef

    def to_payloads(self) -> List[NotificationPayload]:
        if not self.ticket.assigned_to:
            return []
        return [
            self._payload(
                self.ticket.assigned_to,
                "Ticket Assigned to You",
                f"You have been assigned a new maintenance ticket: {self.ticket.title}.",
                ticket_id=self.ticket.id,
                data={"ticket": self.ticket.to_dict()},
            )
        ]


@dataclass
class TicketStatusChanged(NotificationEvent):
    event_type = "ticket.status_changed"
    notification_type = NotificationType.TICKET_STATUS_CHANGED

    ticket: TicketRef
    status: str
    updated_by: Optional[str] = None

    def to_payloads(self) -> List[NotificationPayload]:
        if not self.ticket.tenant_id:
            return []
        return [
            self._payload(
                self.ticket.tenant_id,
                "Ticket Status Updated",
                f"Your maintenance ticket status has been updated to: {self.status}.",
                ticket_id=self.ticket.id,
                data={"ticket": self.ticket.to_dict(), "status": self.status},
            )
        ]


@dataclass
class TicketCompleted(NotificationEvent):
    event_type = "ticket.completed"
    notification_type = NotificationType.TICKET_COMPLETED

    ticket: TicketRef
    completed_by: Optional[str] = None

    def to_payloads(self) -> List[NotificationPayload]:
        if not self.ticket.tenant_id:
            return []
        return [
            self._payload(
                self.ticket.tenant_id,
                "Maintenance Request Completed",
                f'Your maintenance request "{self.ticket.title}" has been completed.',
                ticket_id=self.ticket.id,
                data={"ticket": self.ticket.to_dict()},
            )
        ]


# Quotes


@dataclass
class _QuoteEvent(NotificationEvent):
    quote_id: str
    amount: float
    ticket: TicketRef

    def _quote_payload(self, recipient_id: Optional[str], title: str, message: str):
        if not recipient_id:
            return []
        return [
            self._payload(
                recipient_id,
                title,
                message,
                ticket_id=self.ticket.id,
                data={
                    "quote": {"id": self.quote_id, "amount": self.amount},
                    "ticket": self.ticket.to_dict(),
                },
            )
        ]


@dataclass
class QuoteCreated(_QuoteEvent):
    event_type = "quote.created"
    notification_type = NotificationType.QUOTE_CREATED

    def to_payloads(self) -> List[NotificationPayload]:
        return self._quote_payload(
            self.ticket.tenant_id,
            "New Quote Created",
            "A new quote has been created for your maintenance request.",
        )


@dataclass
class QuoteApproved(_QuoteEvent):
    event_type = "quote.approved"
    notification_type = NotificationType.QUOTE_APPROVED

    def to_payloads(self) -> List[NotificationPayload]:
        return self._quote_payload(
            self.ticket.assigned_to,
            "Quote Approved",
            "Your quote has been approved by the client.",
        )


@dataclass
class QuoteDeclined(_QuoteEvent):
    event_type = "quote.declined"
    notification_type = NotificationType.QUOTE_DECLINED

    decline_reason: str = ""

    def to_payloads(self) -> List[NotificationPayload]:
        return self._quote_payload(
            self.ticket.assigned_to,
            "Quote Declined",
            "Your quote has been declined by the client.",
        )


# Authentication


@dataclass
class OTPRequested(NotificationEvent):
    event_type = "auth.otp_requested"
    notification_type = NotificationType.OTP_REQUESTED

    user_id: str
    code: str
    expires_in: int

    def to_payloads(self) -> List[NotificationPayload]:
        return [
            self._payload(
                self.user_id,
                "Your One-Time Password",
                f"Your OTP for facility access is: {self.code}",
                data={"otp": {"code": self.code, "expiresIn": self.expires_in}},
            )
        ]


# Media and messaging


@dataclass
class MediaUploaded(NotificationEvent):
    event_type = "media.uploaded"
    notification_type = NotificationType.MEDIA_UPLOADED

    media_id: str
    file_type: str
    uploaded_by: str
    ticket: TicketRef

    def to_payloads(self) -> List[NotificationPayload]:
        if not self.ticket.tenant_id:
            return []
        return [
            self._payload(
                self.ticket.tenant_id,
                "New Media Uploaded",
                "New media has been uploaded to your maintenance ticket.",
                ticket_id=self.ticket.id,
                data={
                    "media": {
                        "id": self.media_id,
                        "fileType": self.file_type,
                        "uploadedBy": self.uploaded_by,
                    },
                    "ticket": self.ticket.to_dict(),
                },
            )
        ]


@dataclass
class MessageReceived(NotificationEvent):
    event_type = "message.received"
    notification_type = NotificationType.MESSAGE_RECEIVED

    message_id: str
    sender_id: str
    ticket: TicketRef

    def to_payloads(self) -> List[NotificationPayload]:
        if not self.ticket.tenant_id:
            return []
        return [
            self._payload(
                self.ticket.tenant_id,
                "New Message Received",
                "You have received a new message regarding your maintenance ticket.",
                ticket_id=self.ticket.id,
                data={
                    "message": {"id": self.message_id, "from": self.sender_id},
                    "ticket": self.ticket.to_dict(),
                },
            )
        ]

"""Upstream domain events and the sink that turns them into notifications.

Ticket, quote, authentication, media and messaging code raises typed events;
`NotificationSink.notify` maps each one to the payloads it implies and hands
them to the dispatcher.
"""

from modules.notifications.events import (
    MediaUploaded,
    MessageReceived,
    NotificationEvent,
    OTPRequested,
    QuoteApproved,
    QuoteCreated,
    QuoteDeclined,
    TicketAssigned,
    TicketCompleted,
    TicketCreated,
    TicketRef,
    TicketStatusChanged,
)
from modules.notifications.sink import NotificationSink, get_notification_sink

__all__ = [
    "MediaUploaded",
    "MessageReceived",
    "NotificationEvent",
    "NotificationSink",
    "OTPRequested",
    "QuoteApproved",
    "QuoteCreated",
    "QuoteDeclined",
    "TicketAssigned",
    "TicketCompleted",
    "TicketCreated",
    "TicketRef",
    "TicketStatusChanged",
    "get_notification_sink",
]

"""Unit tests for upstream notification events."""

from dataclasses import dataclass

import pytest

from infrastructure.notifications.models import NotificationType
from modules.notifications import (
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


@pytest.fixture
def ticket():
    return TicketRef(
        id="t-100", title="Leaking tap", tenant_id="tenant-1", assigned_to="tech-1"
    )


@pytest.mark.unit
class TestTicketEvents:
    def test_created_notifies_tenant_and_supervisors(self, ticket):
        event = TicketCreated(
            ticket=ticket,
            property_name="Harbour View",
            priority="high",
            supervisor_ids=["sup-1", "sup-2"],
        )

        payloads = event.to_payloads()

        assert [p.recipient_id for p in payloads] == ["tenant-1", "sup-1", "sup-2"]
        assert payloads[0].title == "Maintenance Request Created"
        assert payloads[0].message == (
            'Your maintenance request "Leaking tap" has been submitted.'
        )
        assert payloads[1].title == "New Maintenance Request"
        assert payloads[1].message == (
            "A new maintenance request has been created for Harbour View."
        )
        assert payloads[1].data["priority"] == "high"
        assert all(p.type == NotificationType.TICKET_CREATED for p in payloads)
        assert all(p.ticket_id == "t-100" for p in payloads)

    def test_created_without_tenant_or_supervisors(self):
        event = TicketCreated(ticket=TicketRef(id="t-1", title="Leak"))

        assert event.to_payloads() == []

    def test_assigned(self, ticket):
        [payload] = TicketAssigned(ticket=ticket).to_payloads()

        assert payload.recipient_id == "tech-1"
        assert payload.title == "Ticket Assigned to You"
        assert payload.data["ticketId"] == "t-100"
        assert payload.data["ticket"]["title"] == "Leaking tap"

    def test_unassigned_ticket_has_no_recipient(self):
        event = TicketAssigned(ticket=TicketRef(id="t-1", title="Leak"))

        assert event.to_payloads() == []

    def test_status_changed(self, ticket):
        [payload] = TicketStatusChanged(
            ticket=ticket, status="in_progress", updated_by="tech-1"
        ).to_payloads()

        assert payload.recipient_id == "tenant-1"
        assert payload.title == "Ticket Status Updated"
        assert payload.message == (
            "Your maintenance ticket status has been updated to: in_progress."
        )
        assert payload.data["status"] == "in_progress"

    def test_completed(self, ticket):
        [payload] = TicketCompleted(ticket=ticket).to_payloads()

        assert payload.type == NotificationType.TICKET_COMPLETED
        assert payload.title == "Maintenance Request Completed"


@pytest.mark.unit
class TestQuoteEvents:
    def test_created_goes_to_tenant(self, ticket):
        [payload] = QuoteCreated(
            quote_id="q-1", amount=250.0, ticket=ticket
        ).to_payloads()

        assert payload.recipient_id == "tenant-1"
        assert payload.title == "New Quote Created"
        assert payload.data["quote"] == {"id": "q-1", "amount": 250.0}

    def test_approved_goes_to_contractor(self, ticket):
        [payload] = QuoteApproved(quote_id="q-1", amount=250.0, ticket=ticket).to_payloads()

        assert payload.recipient_id == "tech-1"
        assert payload.title == "Quote Approved"

    def test_declined_goes_to_contractor(self, ticket):
        [payload] = QuoteDeclined(
            quote_id="q-1", amount=250.0, ticket=ticket, decline_reason="Too high"
        ).to_payloads()

        assert payload.recipient_id == "tech-1"
        assert payload.type == NotificationType.QUOTE_DECLINED
        assert payload.title == "Quote Declined"


@pytest.mark.unit
class TestOtherEvents:
    def test_otp(self):
        [payload] = OTPRequested(user_id="user-1", code="123456", expires_in=300).to_payloads()

        assert payload.recipient_id == "user-1"
        assert payload.title == "Your One-Time Password"
        assert payload.message == "Your OTP for facility access is: 123456"
        assert payload.ticket_id is None
        assert payload.data == {"otp": {"code": "123456", "expiresIn": 300}}

    def test_media_uploaded(self, ticket):
        [payload] = MediaUploaded(
            media_id="m-1", file_type="image/png", uploaded_by="tech-1", ticket=ticket
        ).to_payloads()

        assert payload.title == "New Media Uploaded"
        assert payload.data["media"]["fileType"] == "image/png"

    def test_message_received(self, ticket):
        [payload] = MessageReceived(
            message_id="msg-1", sender_id="tech-1", ticket=ticket
        ).to_payloads()

        assert payload.recipient_id == "tenant-1"
        assert payload.title == "New Message Received"
        assert payload.data["message"] == {"id": "msg-1", "from": "tech-1"}

    def test_events_have_distinct_types(self):
        event_types = {
            cls.event_type
            for cls in (
                TicketCreated,
                TicketAssigned,
                TicketStatusChanged,
                TicketCompleted,
                QuoteCreated,
                QuoteApproved,
                QuoteDeclined,
                OTPRequested,
                MediaUploaded,
                MessageReceived,
            )
        }

        assert len(event_types) == 10


@pytest.mark.unit
def test_ticket_ref_omits_missing_fields():
    assert TicketRef(id="t-1", title="Leak").to_dict() == {"id": "t-1", "title": "Leak"}


@pytest.mark.unit
class TestEventBase:
    def test_base_event_cannot_be_created(self):
        with pytest.raises(TypeError):
            NotificationEvent()  # pylint: disable=abstract-class-instantiated

    def test_event_must_define_payloads(self):
        @dataclass
        class Incomplete(NotificationEvent):
            event_type = "incomplete"
            notification_type = NotificationType.TICKET_CREATED

        with pytest.raises(TypeError):
            Incomplete()  # pylint: disable=abstract-class-instantiated

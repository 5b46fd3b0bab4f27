"""Unit tests for the in-app channel and inbox."""

import pytest

from infrastructure.notifications.channels.in_app import InAppSender
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.in_app import InAppInbox
from infrastructure.notifications.models import NotificationType


@pytest.fixture
def sender(in_app_store, clock):
    return InAppSender(in_app_store, clock=clock)


@pytest.fixture
def inbox(in_app_store):
    return InAppInbox(in_app_store)


@pytest.mark.unit
class TestInAppSender:
    def test_every_user_has_an_inbox(self, sender):
        assert sender.resolve_recipient("user-1") == "user-1"

    def test_send_stores_notification(self, sender, inbox, payload_factory):
        sender.send("user-1", payload_factory(data={"priority": "high"}))

        [stored] = inbox.list_notifications("user-1")
        assert stored.type == NotificationType.TICKET_STATUS_CHANGED
        assert stored.title == "Ticket Status Updated"
        assert stored.data == {"priority": "high", "ticketId": "ticket-1"}
        assert stored.is_read is False

    def test_store_failure_is_channel_error(self, payload_factory):
        class BrokenStore:
            def add(self, notification):
                raise ConnectionError("database unavailable")

        sender = InAppSender(BrokenStore())

        with pytest.raises(ChannelSendError) as exc_info:
            sender.send("user-1", payload_factory())

        assert exc_info.value.channel == "InApp"


@pytest.mark.unit
class TestInAppInbox:
    def test_newest_first_with_unread_count(self, sender, inbox, payload_factory, clock):
        sender.send("user-1", payload_factory(title="First"))
        clock.advance(1)
        sender.send("user-1", payload_factory(title="Second"))

        page = inbox.get_inbox("user-1")

        assert [n.title for n in page["notifications"]] == ["Second", "First"]
        assert page["unread_count"] == 2

    def test_pagination(self, sender, inbox, payload_factory, clock):
        for i in range(5):
            sender.send("user-1", payload_factory(title=f"n-{i}"))
            clock.advance(1)

        page = inbox.list_notifications("user-1", limit=2, offset=1)

        assert [n.title for n in page] == ["n-3", "n-2"]

    def test_mark_as_read(self, sender, inbox, payload_factory):
        sender.send("user-1", payload_factory())
        [notification] = inbox.list_notifications("user-1")

        assert inbox.mark_as_read("user-1", notification.id) is True
        assert inbox.get_inbox("user-1")["unread_count"] == 0
        assert inbox.list_notifications("user-1", unread_only=True) == []

    def test_cannot_mark_another_users_notification(self, sender, inbox, payload_factory):
        sender.send("user-1", payload_factory())
        [notification] = inbox.list_notifications("user-1")

        assert inbox.mark_as_read("user-2", notification.id) is False
        assert inbox.get_inbox("user-1")["unread_count"] == 1

    def test_mark_all_as_read(self, sender, inbox, payload_factory):
        for _ in range(3):
            sender.send("user-1", payload_factory())
        sender.send("user-2", payload_factory())

        assert inbox.mark_all_as_read("user-1") == 3
        assert inbox.mark_all_as_read("user-1") == 0
        assert inbox.get_inbox("user-2")["unread_count"] == 1

    def test_empty_inbox(self, inbox):
        assert inbox.get_inbox("nobody") == {"notifications": [], "unread_count": 0}

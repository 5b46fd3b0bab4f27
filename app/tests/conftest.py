"""Shared fixtures for notification engine tests.

Time never passes for real in unit tests: services take the `clock` and
`sleep` fixtures below, which only move when a test (or a recorded sleep)
moves them.
"""

from typing import Any, Dict, List, Optional

import pytest

from infrastructure.notifications.delivery_log import DeliveryLog
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    NotificationChannel,
    NotificationPayload,
    NotificationType,
)
from infrastructure.notifications.preferences import PreferenceGate
from infrastructure.persistence import (
    InMemoryDeliveryLogStore,
    InMemoryInAppStore,
    InMemoryPreferenceStore,
)
from infrastructure.resilience.retry import RetryPolicies, RetryQueue
from tests.fakes import FakeChannel, FakeClock, SleepRecorder


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep(clock):
    return SleepRecorder(clock)


@pytest.fixture
def payload_factory():
    """Factory for NotificationPayload instances."""

    def _factory(
        recipient_id: str = "user-1",
        type: NotificationType = NotificationType.TICKET_STATUS_CHANGED,
        title: str = "Ticket Status Updated",
        message: str = "Your maintenance ticket status has been updated to: done.",
        data: Optional[Dict[str, Any]] = None,
        ticket_id: Optional[str] = "ticket-1",
    ) -> NotificationPayload:
        return NotificationPayload(
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            data=data or {},
            ticket_id=ticket_id,
        )

    return _factory


@pytest.fixture
def preference_store():
    return InMemoryPreferenceStore()


@pytest.fixture
def preference_gate(preference_store, clock):
    return PreferenceGate(store=preference_store, cache=None, clock=clock)


@pytest.fixture
def delivery_log_store():
    return InMemoryDeliveryLogStore()


@pytest.fixture
def delivery_log(delivery_log_store, clock):
    return DeliveryLog(store=delivery_log_store, clock=clock)


@pytest.fixture
def in_app_store():
    return InMemoryInAppStore()


@pytest.fixture
def retry_queue(clock):
    return RetryQueue(policies=RetryPolicies(), clock=clock)


@pytest.fixture
def fake_channels():
    """One succeeding fake sender per channel."""
    return {channel: FakeChannel(channel) for channel in NotificationChannel}


@pytest.fixture
def make_dispatcher(preference_gate, delivery_log, retry_queue, sleep):
    """Factory for dispatchers wired to the in-memory fixtures."""
    created: List[NotificationDispatcher] = []

    def _factory(channels, **kwargs) -> NotificationDispatcher:
        options = {
            "preferences": preference_gate,
            "delivery_log": delivery_log,
            "retry_queue": retry_queue,
            "sleep": sleep,
            "max_workers": 4,
        }
        options.update(kwargs)
        dispatcher = NotificationDispatcher(channels=channels, **options)
        created.append(dispatcher)
        return dispatcher

    yield _factory

    for dispatcher in created:
        dispatcher.shutdown()

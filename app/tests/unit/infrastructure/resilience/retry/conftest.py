"""Shared fixtures for retry queue tests."""

from datetime import timedelta

import pytest

from infrastructure.notifications.models import NotificationChannel
from infrastructure.resilience.retry import RetryItem, RetryResult


@pytest.fixture
def retry_item_factory(payload_factory, clock):
    """Factory for RetryItem instances due now."""

    def _factory(
        attempt: int = 1,
        delivery_id: str = "delivery-1",
        channel: NotificationChannel = NotificationChannel.PUSH,
        due_in_seconds: float = 0,
        **payload_kwargs,
    ) -> RetryItem:
        payload = payload_factory(**payload_kwargs)
        return RetryItem(
            delivery_id=delivery_id,
            user_id=payload.recipient_id,
            notification_type=payload.type,
            channel=channel,
            attempt=attempt,
            next_retry_at=clock() + timedelta(seconds=due_in_seconds),
            payload=payload,
            last_error="provider unavailable",
        )

    return _factory


@pytest.fixture
def mock_processor():
    """Processor returning a configurable result."""

    class MockProcessor:
        def __init__(self):
            self.processed_items = []
            self.result = RetryResult.DELIVERED

        def process_item(self, item):
            self.processed_items.append(item)
            return self.result

        def set_result(self, result):
            self.result = result

    return MockProcessor()

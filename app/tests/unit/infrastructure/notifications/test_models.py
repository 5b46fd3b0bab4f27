"""Unit tests for notification models."""

import pytest
from pydantic import ValidationError

from infrastructure.notifications.models import (
    ChannelOutcome,
    DispatchResult,
    NotificationChannel,
    NotificationPayload,
    NotificationPreferences,
    NotificationType,
    OutcomeStatus,
)


@pytest.mark.unit
class TestNotificationChannel:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("push", NotificationChannel.PUSH),
            ("Push", NotificationChannel.PUSH),
            ("email", NotificationChannel.EMAIL),
            ("inApp", NotificationChannel.IN_APP),
            ("InApp", NotificationChannel.IN_APP),
        ],
    )
    def test_from_preference_key(self, key, expected):
        assert NotificationChannel.from_preference_key(key) == expected

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            NotificationChannel.from_preference_key("sms")

    def test_preference_key(self):
        assert NotificationChannel.IN_APP.preference_key == "inApp"


@pytest.mark.unit
class TestNotificationPayload:
    def test_camel_case_aliases(self):
        payload = NotificationPayload.model_validate(
            {
                "recipientId": "user-1",
                "type": "QuoteDeclined",
                "title": "Quote Declined",
                "ticketId": "t-1",
            }
        )

        assert payload.recipient_id == "user-1"
        assert payload.model_dump(by_alias=True)["ticketId"] == "t-1"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            NotificationPayload(
                recipient_id="user-1", type=NotificationType.OTP_REQUESTED, title=" "
            )

    def test_payload_is_frozen(self, payload_factory):
        payload = payload_factory()

        with pytest.raises(ValidationError):
            payload.title = "changed"


@pytest.mark.unit
class TestNotificationPreferences:
    def test_enabled_channels_keep_order(self):
        prefs = NotificationPreferences(user_id="user-1", email_enabled=False)

        assert prefs.enabled_channels() == [
            NotificationChannel.PUSH,
            NotificationChannel.IN_APP,
        ]


@pytest.mark.unit
class TestDispatchResult:
    def test_skipped_channels_do_not_fail(self, payload_factory):
        result = DispatchResult(
            payload=payload_factory(),
            delivery_id="delivery-1",
            outcomes=[
                ChannelOutcome(channel=NotificationChannel.PUSH, status=OutcomeStatus.SKIPPED),
                ChannelOutcome(
                    channel=NotificationChannel.EMAIL,
                    status=OutcomeStatus.DELIVERED,
                    attempts=1,
                ),
            ],
        )

        assert result.is_success

    def test_failed_channels(self, payload_factory):
        result = DispatchResult(
            payload=payload_factory(),
            delivery_id="delivery-1",
            outcomes=[
                ChannelOutcome(
                    channel=NotificationChannel.EMAIL,
                    status=OutcomeStatus.FAILED,
                    attempts=3,
                    error="timeout",
                    retry_queued=True,
                )
            ],
        )

        assert not result.is_success
        assert result.failed_channels == [NotificationChannel.EMAIL]

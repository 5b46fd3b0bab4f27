"""Test doubles for time and channels."""

import threading
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from infrastructure.notifications.channels.base import ChannelSender
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.models import NotificationChannel, NotificationPayload

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


class SleepRecorder:
    """Records requested sleeps and advances the clock instead of blocking."""

    def __init__(self, clock: Optional[FakeClock] = None):
        self.calls: List[float] = []
        self._clock = clock
        self._lock = threading.Lock()

    def __call__(self, seconds: float) -> None:
        with self._lock:
            self.calls.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds)


class FakeChannel(ChannelSender):
    """Scriptable channel sender.

    Args:
        channel: Channel this sender serves
        address: Address returned by resolve_recipient (None skips the channel)
        failures: Number of leading attempts that fail
        always_fail: Fail every attempt
    """

    def __init__(
        self,
        channel: NotificationChannel,
        address: Optional[str] = "address",
        failures: int = 0,
        always_fail: bool = False,
        error: str = "provider unavailable",
    ):
        self.channel = channel
        self.address = address
        self.failures = failures
        self.always_fail = always_fail
        self.error = error
        self.attempts = 0
        self.sent: List[Tuple[str, NotificationPayload]] = []
        self._lock = threading.Lock()

    def resolve_recipient(self, user_id: str) -> Optional[str]:
        return self.address

    def send(self, address: str, payload: NotificationPayload) -> None:
        with self._lock:
            self.attempts += 1
            attempt = self.attempts
        if self.always_fail or attempt <= self.failures:
            raise ChannelSendError(self.channel.value, self.error)
        with self._lock:
            self.sent.append((address, payload))

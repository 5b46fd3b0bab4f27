"""Recipient directory: where each user can be reached.

Holds one push registration per user (the latest device to register wins)
and the user's email address.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

import structlog

from infrastructure.clock import Clock, utc_now

logger = structlog.get_logger()

DEVICE_TYPES = ("ios", "android")


@dataclass(frozen=True)
class DeviceRegistration:
    user_id: str
    token: str
    device_type: str
    registered_at: datetime


class RecipientDirectory:
    """Thread-safe in-memory address book for the push and email channels."""

    def __init__(self, clock: Clock = utc_now):
        self._devices: Dict[str, DeviceRegistration] = {}
        self._emails: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def register_device(
        self, user_id: str, token: str, device_type: str
    ) -> DeviceRegistration:
        """Register (or replace) the user's push token.

        Raises:
            ValueError: If `device_type` is not ios or android, or the token is blank.
        """
        if device_type not in DEVICE_TYPES:
            raise ValueError(f"Unsupported device type: {device_type}")
        if not token or not token.strip():
            raise ValueError("Device token must not be blank")

        registration = DeviceRegistration(
            user_id=user_id,
            token=token,
            device_type=device_type,
            registered_at=self._clock(),
        )
        with self._lock:
            self._devices[user_id] = registration
        logger.info("device_registered", user_id=user_id, device_type=device_type)
        return registration

    def unregister_device(self, user_id: str) -> bool:
        """Drop the user's push token. False when none was registered."""
        with self._lock:
            removed = self._devices.pop(user_id, None)
        if removed:
            logger.info("device_unregistered", user_id=user_id)
        return removed is not None

    def remove_token(self, user_id: str, token: str) -> None:
        """Drop `token` if it is still the user's current registration."""
        with self._lock:
            current = self._devices.get(user_id)
            if current is not None and current.token == token:
                del self._devices[user_id]
                logger.info("stale_device_token_removed", user_id=user_id)

    def device_token(self, user_id: str) -> Optional[str]:
        with self._lock:
            registration = self._devices.get(user_id)
        return registration.token if registration else None

    def set_email(self, user_id: str, email: str) -> bool:
        """Store the user's email address. True when it changed."""
        with self._lock:
            changed = self._emails.get(user_id) != email
            self._emails[user_id] = email
        if changed:
            logger.info("email_address_registered", user_id=user_id)
        return changed

    def set_default_email(self, user_id: str, email: str) -> bool:
        """Store `email` only if the user has no address yet."""
        with self._lock:
            if user_id in self._emails:
                return False
            self._emails[user_id] = email
        logger.info("email_address_registered", user_id=user_id, source="token")
        return True

    def email_for(self, user_id: str) -> Optional[str]:
        with self._lock:
            return self._emails.get(user_id)

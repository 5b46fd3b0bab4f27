"""Notification engine exceptions.

Hierarchy:
    NotificationError
    ├── NotificationValidationError   (400 at the HTTP edge)
    │   └── BulkLimitExceeded
    ├── ChannelSendError              (transient, retried)
    ├── PersistentChannelFailure      (raised only by strict dispatches)
    ├── AdmissionRejected             (429 at the HTTP edge)
    └── PreferenceLookupFailure       (internal, degraded to defaults)
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from infrastructure.notifications.models import DispatchResult


class NotificationError(Exception):
    """Base class for notification engine errors."""


class NotificationValidationError(NotificationError):
    """Payload rejected before any side effect.

    Attributes:
        errors: Field-level details, when available
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class BulkLimitExceeded(NotificationValidationError):
    """Bulk request larger than the configured cap."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Bulk notification limit exceeded: {size} > {limit}")
        self.size = size
        self.limit = limit


class ChannelSendError(NotificationError):
    """A channel could not deliver. Treated as transient by the retry paths."""

    def __init__(self, channel: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{channel}: {message}")
        self.channel = channel
        self.message = message
        self.status_code = status_code


class PersistentChannelFailure(NotificationError):
    """At least one channel exhausted its inline attempts (strict dispatch)."""

    def __init__(self, result: "DispatchResult"):
        channels = ", ".join(c.value for c in result.failed_channels)
        super().__init__(f"Delivery failed on: {channels}")
        self.result = result


class AdmissionRejected(NotificationError):
    """Caller exceeded the request budget for an endpoint."""

    def __init__(self, retry_after: int, limit: int = 0, reset_at: float = 0.0):
        super().__init__(f"Too many requests, retry after {retry_after}s")
        self.retry_after = retry_after
        self.limit = limit
        self.reset_at = reset_at


class PreferenceLookupFailure(NotificationError):
    """Preference store unreachable or returned garbage."""

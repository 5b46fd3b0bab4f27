"""Per-endpoint admission policies."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure.rate_limits import (
        RateLimitSettings,
    )

SEND = "send"
SEND_BULK = "send_bulk"
READ = "read"
PREFERENCES = "preferences"
DEVICES = "devices"


@dataclass(frozen=True)
class RateLimitPolicy:
    """Fixed-window budget for one endpoint group.

    Attributes:
        endpoint: Endpoint group name, part of the counter key
        limit: Requests admitted per window
        window_seconds: Window length
        skip_successful: Refund requests that complete successfully
    """

    endpoint: str
    limit: int
    window_seconds: int
    skip_successful: bool = False

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be at least 1")
        if self.window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")


def build_policies(settings: "RateLimitSettings") -> Dict[str, RateLimitPolicy]:
    """Endpoint name to policy, from settings."""
    return {
        SEND: RateLimitPolicy(SEND, settings.send, settings.send_window_seconds),
        SEND_BULK: RateLimitPolicy(
            SEND_BULK, settings.send_bulk, settings.send_bulk_window_seconds
        ),
        READ: RateLimitPolicy(
            READ,
            settings.read,
            settings.read_window_seconds,
            skip_successful=settings.read_skip_successful,
        ),
        PREFERENCES: RateLimitPolicy(
            PREFERENCES, settings.preferences, settings.preferences_window_seconds
        ),
        DEVICES: RateLimitPolicy(DEVICES, settings.devices, settings.devices_window_seconds),
    }

"""Admission control (rate limiting) settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RateLimitSettings(InfrastructureSettings):
    """Per-endpoint fixed-window limits.

    Counters are kept per process and keyed by the caller identity (user id
    when authenticated, client IP otherwise) and endpoint group.

    Environment Variables:
        RATE_LIMIT_ENABLED: Enable admission control (default: True)
        RATE_LIMIT_SEND: Single-send requests per window (default: 10)
        RATE_LIMIT_SEND_WINDOW_SECONDS: Single-send window (default: 60)
        RATE_LIMIT_SEND_BULK: Bulk-send requests per window (default: 3)
        RATE_LIMIT_SEND_BULK_WINDOW_SECONDS: Bulk-send window (default: 300)
        RATE_LIMIT_READ: Read requests per window (default: 200)
        RATE_LIMIT_READ_WINDOW_SECONDS: Read window (default: 60)
        RATE_LIMIT_READ_SKIP_SUCCESSFUL: Do not count successful reads (default: True)
        RATE_LIMIT_PREFERENCES: Preference writes per window (default: 20)
        RATE_LIMIT_PREFERENCES_WINDOW_SECONDS: Preference window (default: 60)
        RATE_LIMIT_DEVICES: Device registrations per window (default: 5)
        RATE_LIMIT_DEVICES_WINDOW_SECONDS: Device window (default: 3600)
        RATE_LIMIT_SWEEP_INTERVAL_SECONDS: Expired record sweep interval (default: 60)
    """

    enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")

    send: int = Field(default=10, alias="RATE_LIMIT_SEND")
    send_window_seconds: int = Field(default=60, alias="RATE_LIMIT_SEND_WINDOW_SECONDS")

    send_bulk: int = Field(default=3, alias="RATE_LIMIT_SEND_BULK")
    send_bulk_window_seconds: int = Field(
        default=300, alias="RATE_LIMIT_SEND_BULK_WINDOW_SECONDS"
    )

    read: int = Field(default=200, alias="RATE_LIMIT_READ")
    read_window_seconds: int = Field(default=60, alias="RATE_LIMIT_READ_WINDOW_SECONDS")
    read_skip_successful: bool = Field(
        default=True, alias="RATE_LIMIT_READ_SKIP_SUCCESSFUL"
    )

    preferences: int = Field(default=20, alias="RATE_LIMIT_PREFERENCES")
    preferences_window_seconds: int = Field(
        default=60, alias="RATE_LIMIT_PREFERENCES_WINDOW_SECONDS"
    )

    devices: int = Field(default=5, alias="RATE_LIMIT_DEVICES")
    devices_window_seconds: int = Field(
        default=3600, alias="RATE_LIMIT_DEVICES_WINDOW_SECONDS"
    )

    sweep_interval_seconds: int = Field(
        default=60, alias="RATE_LIMIT_SWEEP_INTERVAL_SECONDS"
    )

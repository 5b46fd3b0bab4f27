"""GC Notify API client used by the email channel."""

from .client import (
    create_authorization_header,
    create_jwt_token,
    epoch_seconds,
    send_email,
)

__all__ = [
    "create_authorization_header",
    "create_jwt_token",
    "epoch_seconds",
    "send_email",
]

"""Structured logging for the engine.

Modules log through `get_module_logger()`; infrastructure code may use
`structlog.get_logger()` directly. The HTTP middleware wraps each request in
`bind_request_context` so every event carries its correlation id.
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.context import (
    CORRELATION_HEADER,
    bind_request_context,
    clear_request_context,
    get_correlation_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    redact_email_addresses,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "CORRELATION_HEADER",
    "bind_request_context",
    "clear_request_context",
    "get_correlation_id",
    "SENSITIVE_PATTERNS",
    "add_app_info",
    "mask_sensitive_data",
    "redact_email_addresses",
]

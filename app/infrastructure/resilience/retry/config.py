"""Deferred retry policies.

Each notification type gets a retry budget and a backoff curve. Types that
are not listed in `TYPE_POLICY_OVERRIDES` use the default policy built from
`RetrySettings`.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Mapping, Optional

from infrastructure.notifications.models import NotificationType

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure.retry import RetrySettings


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and backoff for one notification type.

    Attributes:
        max_retries: Deferred attempts before a send is dropped (0 disables)
        initial_delay_seconds: Delay before the first deferred attempt
        max_delay_seconds: Cap applied to every computed delay
        backoff_multiplier: Growth factor between attempts

    Example:
        policy = RetryPolicy(max_retries=5, initial_delay_seconds=0.5, max_delay_seconds=10)
        policy.delay_for(0)  # 0.5
        policy.delay_for(3)  # 4.0
    """

    max_retries: int = 3
    initial_delay_seconds: float = 1.0
    max_delay_seconds: float = 300.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_seconds < 0:
            raise ValueError("initial_delay_seconds must be >= 0")
        if self.max_delay_seconds < self.initial_delay_seconds:
            raise ValueError("max_delay_seconds must be >= initial_delay_seconds")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")

    def delay_for(self, attempt: int) -> float:
        """Backoff delay in seconds after `attempt` deferred attempts.

        Uses the formula: initial_delay * (multiplier ^ attempt), capped at
        max_delay_seconds.
        """
        delay = self.initial_delay_seconds * (self.backoff_multiplier**attempt)
        return min(delay, self.max_delay_seconds)


DEFAULT_POLICY = RetryPolicy()

TYPE_POLICY_OVERRIDES: Dict[NotificationType, RetryPolicy] = {
    # One-time codes expire quickly, so retry fast and often
    NotificationType.OTP_REQUESTED: RetryPolicy(
        max_retries=5, initial_delay_seconds=0.5, max_delay_seconds=10.0
    ),
    NotificationType.TICKET_CREATED: RetryPolicy(
        max_retries=3, initial_delay_seconds=2.0, max_delay_seconds=300.0
    ),
    NotificationType.TICKET_ASSIGNED: RetryPolicy(
        max_retries=3, initial_delay_seconds=2.0, max_delay_seconds=300.0
    ),
}


class RetryPolicies:
    """Lookup of the policy that applies to a notification type."""

    def __init__(
        self,
        default: RetryPolicy = DEFAULT_POLICY,
        overrides: Optional[Mapping[NotificationType, RetryPolicy]] = None,
    ):
        self.default = default
        self.overrides = dict(TYPE_POLICY_OVERRIDES if overrides is None else overrides)

    @classmethod
    def from_settings(cls, settings: "RetrySettings") -> "RetryPolicies":
        return cls(
            default=RetryPolicy(
                max_retries=settings.max_retries,
                initial_delay_seconds=settings.initial_delay_seconds,
                max_delay_seconds=settings.max_delay_seconds,
                backoff_multiplier=settings.backoff_multiplier,
            )
        )

    def policy_for(self, notification_type: NotificationType) -> RetryPolicy:
        return self.overrides.get(notification_type, self.default)

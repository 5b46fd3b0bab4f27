"""Entry point for upstream domains.

Upstream code never talks to channels or the dispatcher directly:

    sink = get_notification_sink()
    sink.notify(TicketAssigned(ticket=TicketRef(id="t-1", title="Leak", assigned_to="u-9")))
"""

from functools import lru_cache
from typing import List

from pydantic import ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.errors import NotificationError
from infrastructure.notifications.models import DispatchResult
from infrastructure.services import get_dispatcher
from modules.notifications.events import NotificationEvent

logger = get_module_logger()


class NotificationSink:
    """Maps typed events to payloads and dispatches them.

    A failing payload is logged and skipped; the upstream operation that
    raised the event is never interrupted by notification problems.
    """

    def __init__(self, dispatcher: NotificationDispatcher):
        self.dispatcher = dispatcher

    def notify(self, event: NotificationEvent) -> List[DispatchResult]:
        log = logger.bind(
            event_type=event.event_type,
            notification_type=event.notification_type.value,
        )
        try:
            payloads = event.to_payloads()
        except ValidationError as e:
            log.error(
                "notification_event_invalid",
                error_count=e.error_count(),
                exc_info=True,
            )
            return []
        if not payloads:
            log.info("notification_event_without_recipients")
            return []

        results = []
        for payload in payloads:
            try:
                results.append(self.dispatcher.send_notification(payload))
            except NotificationError as e:
                log.error(
                    "notification_event_dispatch_failed",
                    recipient_id=payload.recipient_id,
                    error=str(e),
                    exc_info=True,
                )
        log.info(
            "notification_event_handled",
            payload_count=len(payloads),
            dispatched=len(results),
        )
        return results


@lru_cache
def get_notification_sink() -> NotificationSink:
    return NotificationSink(get_dispatcher())

"""Delivery log: audit trail of send outcomes plus aggregate queries.

Entries are append-only. Several entries can exist for one delivery (the
inline round and each deferred retry share a `delivery_id` and channel);
every aggregate counts only the most recent entry of a delivery, so a send
that failed inline and succeeded on retry is counted once, as delivered.
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from infrastructure.clock import Clock, utc_now
from infrastructure.notifications.models import (
    ChannelStats,
    DeliveryLogEntry,
    DeliveryStats,
    DeliveryStatus,
    NotificationChannel,
    NotificationType,
    NotificationTypeStats,
)
from infrastructure.persistence.stores import DeliveryLogStore

logger = structlog.get_logger()


def _latest_per_delivery(entries: Iterable[DeliveryLogEntry]) -> List[DeliveryLogEntry]:
    latest: Dict[Tuple[str, NotificationChannel], DeliveryLogEntry] = {}
    for entry in entries:
        key = (entry.delivery_id, entry.channel)
        current = latest.get(key)
        if current is None or (entry.created_at, entry.attempt) >= (
            current.created_at,
            current.attempt,
        ):
            latest[key] = entry
    return list(latest.values())


def _aggregate(entries: List[DeliveryLogEntry]) -> DeliveryStats:
    total = len(entries)
    delivered = sum(1 for e in entries if e.status == DeliveryStatus.DELIVERED)
    failed = sum(1 for e in entries if e.status == DeliveryStatus.FAILED)
    return DeliveryStats(
        total=total,
        delivered=delivered,
        failed=failed,
        pending=total - delivered - failed,
        success_rate=round(delivered / total, 4) if total else 0.0,
    )


class DeliveryLog:
    """Records delivery outcomes and answers stats queries.

    `record` never raises: a broken store costs an audit row, not a send.
    """

    def __init__(self, store: DeliveryLogStore, clock: Clock = utc_now):
        self.store = store
        self._clock = clock

    def record(
        self,
        delivery_id: str,
        user_id: str,
        notification_type: NotificationType,
        channel: NotificationChannel,
        status: DeliveryStatus,
        error_message: Optional[str] = None,
        attempt: int = 0,
    ) -> Optional[DeliveryLogEntry]:
        """Append an entry. Returns None when the store rejected it."""
        entry = DeliveryLogEntry(
            delivery_id=delivery_id,
            user_id=user_id,
            notification_type=notification_type,
            channel=channel,
            status=status,
            error_message=error_message,
            attempt=attempt,
            created_at=self._clock(),
        )
        try:
            self.store.append(entry)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "delivery_log_write_failed",
                delivery_id=delivery_id,
                channel=channel.value,
                status=status.value,
                error=str(e),
                exc_info=True,
            )
            return None
        return entry

    def get_delivery_stats(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> DeliveryStats:
        entries = self.store.list_entries(start=start, end=end, user_id=user_id)
        return _aggregate(_latest_per_delivery(entries))

    def get_channel_stats(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> List[ChannelStats]:
        """One row per channel, including channels with no traffic."""
        latest = _latest_per_delivery(
            self.store.list_entries(start=start, end=end, user_id=user_id)
        )
        return [
            ChannelStats(
                channel=channel,
                **_aggregate([e for e in latest if e.channel == channel]).model_dump(),
            )
            for channel in NotificationChannel
        ]

    def get_notification_type_stats(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> List[NotificationTypeStats]:
        """One row per notification type, including types with no traffic."""
        latest = _latest_per_delivery(
            self.store.list_entries(start=start, end=end, user_id=user_id)
        )
        return [
            NotificationTypeStats(
                notification_type=notification_type,
                **_aggregate(
                    [e for e in latest if e.notification_type == notification_type]
                ).model_dump(),
            )
            for notification_type in NotificationType
        ]

    def get_failed_deliveries(
        self,
        limit: int = 50,
        offset: int = 0,
        notification_type: Optional[NotificationType] = None,
        channel: Optional[NotificationChannel] = None,
    ) -> List[DeliveryLogEntry]:
        """Failed entries, newest first."""
        failed = [
            e
            for e in self.store.list_entries()
            if e.status == DeliveryStatus.FAILED
            and (notification_type is None or e.notification_type == notification_type)
            and (channel is None or e.channel == channel)
        ]
        failed.sort(key=lambda e: e.created_at, reverse=True)
        return failed[offset : offset + limit]

    def purge_older_than(self, days: int = 90) -> int:
        """Delete entries older than `days`; returns how many were removed."""
        cutoff = self._clock() - timedelta(days=days)
        removed = self.store.delete_before(cutoff)
        logger.info(
            "delivery_log_purged",
            retention_days=days,
            cutoff=cutoff.isoformat(),
            removed=removed,
        )
        return removed

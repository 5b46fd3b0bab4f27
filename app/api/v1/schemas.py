"""Request and response schemas for the notifications API.

Wire format is camelCase; internal models stay snake_case.
  - Request models validate bodies before they reach services
  - Response models are serialization views of infrastructure models
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from infrastructure.notifications.models import (
    DeliveryStatus,
    NotificationChannel,
    NotificationType,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AcceptedResponse(CamelModel):
    status: str = "accepted"
    count: int = 1


class PreferencesUpdateRequest(CamelModel):
    """Partial update: omitted channels keep their current setting."""

    push: Optional[bool] = None
    email: Optional[bool] = None
    in_app: Optional[bool] = None


class PreferencesResponse(CamelModel):
    user_id: str
    push_enabled: bool
    email_enabled: bool
    in_app_enabled: bool
    created_at: datetime
    updated_at: datetime


class InAppNotificationResponse(CamelModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: Dict[str, Any]
    is_read: bool
    created_at: datetime


class InAppInboxResponse(CamelModel):
    notifications: List[InAppNotificationResponse]
    unread_count: int


class MarkAllReadResponse(CamelModel):
    updated: int


class StatsResponse(CamelModel):
    total: int
    delivered: int
    failed: int
    pending: int
    success_rate: float


class ChannelStatsResponse(StatsResponse):
    channel: NotificationChannel


class TypeStatsResponse(StatsResponse):
    notification_type: NotificationType


class DeliveryStatsResponse(CamelModel):
    overall: StatsResponse
    channels: List[ChannelStatsResponse]
    types: List[TypeStatsResponse]


class DeliveryLogEntryResponse(CamelModel):
    id: str
    delivery_id: str
    user_id: str
    notification_type: NotificationType
    channel: NotificationChannel
    status: DeliveryStatus
    error_message: Optional[str] = None
    attempt: int
    created_at: datetime


class RetryQueueResponse(CamelModel):
    queue_size: int
    next_retry_at: Optional[datetime] = None
    stats: Dict[str, int]


class RegisterDeviceRequest(CamelModel):
    user_id: Optional[str] = None
    fcm_token: str = Field(min_length=1)
    device_type: Literal["ios", "android"]


class RegisterEmailRequest(CamelModel):
    user_id: Optional[str] = None
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)

"""Notifications API.

Dispatch endpoints validate synchronously and answer 202; delivery runs as
a background task after the response. Every route is admission-controlled
and guarded by access predicates.
"""

from datetime import datetime
from typing import Any, List, Optional

import structlog
from fastapi import (
    APIRouter,
    BackgroundTasks,
    Body,
    Depends,
    HTTPException,
    Query,
    status,
)

from api.dependencies.access import (
    ADMIN,
    MANAGER,
    Principal,
    guard,
    require_authenticated,
    require_ownership,
    require_role,
    resolve_target_user,
)
from api.dependencies.rate_limits import rate_limit
from api.v1.schemas import (
    AcceptedResponse,
    DeliveryLogEntryResponse,
    DeliveryStatsResponse,
    InAppInboxResponse,
    MarkAllReadResponse,
    PreferencesResponse,
    PreferencesUpdateRequest,
    RegisterDeviceRequest,
    RegisterEmailRequest,
    RetryQueueResponse,
)
from infrastructure.notifications.dispatcher import coerce_payload
from infrastructure.notifications.models import NotificationChannel, NotificationType
from infrastructure.rate_limiting import DEVICES, PREFERENCES, READ, SEND, SEND_BULK
from infrastructure.services import (
    BulkDispatcherDep,
    DeliveryLogDep,
    DispatcherDep,
    InAppInboxDep,
    PreferenceGateDep,
    RecipientDirectoryDep,
    RetryQueueDep,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])

senders = guard(require_role(ADMIN, MANAGER))
owners = guard(require_authenticated, require_ownership())


def _parse_channel(channel: str) -> NotificationChannel:
    try:
        return NotificationChannel.from_preference_key(channel)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid channel: {channel}")


# Dispatch


@router.post(
    "/send",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=AcceptedResponse,
    dependencies=[Depends(rate_limit(SEND))],
)
def send_notification(
    dispatcher: DispatcherDep,
    background_tasks: BackgroundTasks,
    payload: Any = Body(...),
    principal: Principal = Depends(senders),
):
    notification = coerce_payload(payload)
    background_tasks.add_task(dispatcher.send_notification, notification)
    logger.info(
        "notification_accepted",
        sender_id=principal.user_id,
        recipient_id=notification.recipient_id,
        notification_type=notification.type.value,
    )
    return AcceptedResponse(count=1)


@router.post(
    "/send-bulk",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=AcceptedResponse,
    dependencies=[Depends(rate_limit(SEND_BULK))],
)
def send_bulk_notifications(
    bulk: BulkDispatcherDep,
    background_tasks: BackgroundTasks,
    payloads: List[Any] = Body(...),
    principal: Principal = Depends(senders),
):
    notifications = bulk.validate(payloads)
    background_tasks.add_task(bulk.send_bulk_notifications, notifications)
    logger.info(
        "bulk_notifications_accepted",
        sender_id=principal.user_id,
        count=len(notifications),
    )
    return AcceptedResponse(count=len(notifications))


# In-app inbox


@router.get(
    "/in-app",
    response_model=InAppInboxResponse,
    dependencies=[Depends(rate_limit(READ))],
)
def get_in_app_notifications(
    inbox: InAppInboxDep,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    principal: Principal = Depends(owners),
):
    target = resolve_target_user(principal, user_id)
    return inbox.get_inbox(target, unread_only=unread_only, limit=limit, offset=offset)


@router.put(
    "/in-app/read-all",
    response_model=MarkAllReadResponse,
    dependencies=[Depends(rate_limit(PREFERENCES))],
)
def mark_all_in_app_read(
    inbox: InAppInboxDep,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    principal: Principal = Depends(owners),
):
    target = resolve_target_user(principal, user_id)
    return MarkAllReadResponse(updated=inbox.mark_all_as_read(target))


@router.put(
    "/in-app/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(rate_limit(PREFERENCES))],
)
def mark_in_app_read(
    notification_id: str,
    inbox: InAppInboxDep,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    principal: Principal = Depends(owners),
):
    target = resolve_target_user(principal, user_id)
    if not inbox.mark_as_read(target, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")


# Preferences


@router.get(
    "/preferences/{user_id}",
    response_model=PreferencesResponse,
    dependencies=[Depends(rate_limit(READ))],
)
def get_preferences(
    user_id: str,
    gate: PreferenceGateDep,
    principal: Principal = Depends(owners),
):
    return gate.get_preferences(user_id)


@router.put(
    "/preferences/{user_id}",
    response_model=PreferencesResponse,
    dependencies=[Depends(rate_limit(PREFERENCES))],
)
def update_preferences(
    user_id: str,
    update: PreferencesUpdateRequest,
    gate: PreferenceGateDep,
    principal: Principal = Depends(owners),
):
    return gate.update_preferences(
        user_id, push=update.push, email=update.email, in_app=update.in_app
    )


@router.post(
    "/preferences/{user_id}/enable/{channel}",
    response_model=PreferencesResponse,
    dependencies=[Depends(rate_limit(PREFERENCES))],
)
def enable_channel(
    user_id: str,
    channel: str,
    gate: PreferenceGateDep,
    principal: Principal = Depends(owners),
):
    return gate.enable_channel(user_id, _parse_channel(channel))


@router.post(
    "/preferences/{user_id}/disable/{channel}",
    response_model=PreferencesResponse,
    dependencies=[Depends(rate_limit(PREFERENCES))],
)
def disable_channel(
    user_id: str,
    channel: str,
    gate: PreferenceGateDep,
    principal: Principal = Depends(owners),
):
    return gate.disable_channel(user_id, _parse_channel(channel))


# Delivery reporting


@router.get(
    "/stats",
    response_model=DeliveryStatsResponse,
    dependencies=[Depends(rate_limit(READ))],
)
def get_delivery_stats(
    delivery_log: DeliveryLogDep,
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    principal: Principal = Depends(senders),
):
    # Managers see their own traffic unless they ask for a specific user
    scope = user_id or (None if principal.is_admin else principal.user_id)
    return {
        "overall": delivery_log.get_delivery_stats(start_date, end_date, scope),
        "channels": delivery_log.get_channel_stats(start_date, end_date, scope),
        "types": delivery_log.get_notification_type_stats(start_date, end_date, scope),
    }


@router.get(
    "/failed",
    response_model=List[DeliveryLogEntryResponse],
    dependencies=[Depends(rate_limit(READ))],
)
def get_failed_deliveries(
    delivery_log: DeliveryLogDep,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    notification_type: Optional[NotificationType] = Query(default=None, alias="type"),
    channel: Optional[NotificationChannel] = Query(default=None),
    principal: Principal = Depends(senders),
):
    return delivery_log.get_failed_deliveries(
        limit=limit, offset=offset, notification_type=notification_type, channel=channel
    )


@router.get(
    "/retry-queue",
    response_model=RetryQueueResponse,
    dependencies=[Depends(rate_limit(READ))],
)
def get_retry_queue_status(
    queue: RetryQueueDep,
    principal: Principal = Depends(guard(require_role(ADMIN))),
):
    return RetryQueueResponse(**queue.get_queue_status(), stats=queue.get_stats())


# Devices


@router.post(
    "/devices",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(rate_limit(DEVICES))],
)
def register_device(
    registration: RegisterDeviceRequest,
    directory: RecipientDirectoryDep,
    principal: Principal = Depends(guard(require_authenticated)),
):
    target = resolve_target_user(principal, registration.user_id)
    directory.register_device(target, registration.fcm_token, registration.device_type)


@router.delete(
    "/devices",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(rate_limit(DEVICES))],
)
def unregister_device(
    directory: RecipientDirectoryDep,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    principal: Principal = Depends(owners),
):
    directory.unregister_device(resolve_target_user(principal, user_id))


# Email address


@router.put(
    "/email",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(rate_limit(DEVICES))],
)
def register_email(
    registration: RegisterEmailRequest,
    directory: RecipientDirectoryDep,
    principal: Principal = Depends(guard(require_authenticated)),
):
    """Set where email notifications go; wins over the token's email claim."""
    target = resolve_target_user(principal, registration.user_id)
    directory.set_email(target, registration.email)

"""FastAPI endpoints for in-app notifications."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.api.dependencies import current_user, require_admin
from medstore.api.schemas import (
    AdminNotificationResponse,
    MessageResponse,
    NotificationIdResponse,
    NotificationRequest,
    UnreadCountResponse,
    UserNotificationResponse,
)
from medstore.notification.management import CreateNotification, DeleteNotification, UpdateNotification
from medstore.notification.notification import Notification
from medstore.notification.reading import MarkNotificationRead

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


def _recipients(body: NotificationRequest) -> str | None:
    return json.dumps(body.recipients) if body.recipients is not None else None


@notification_router.get("/my", response_model=list[UserNotificationResponse])
async def my_notifications(user: User = Depends(current_user)) -> list[UserNotificationResponse]:
    notifications = current_domain.repository_for(Notification).visible_to(user.id)
    return [UserNotificationResponse.for_user(n, user.id) for n in notifications]


@notification_router.put("/read/{notification_id}", response_model=MessageResponse)
async def mark_read(notification_id: str, user: User = Depends(current_user)) -> MessageResponse:
    command = MarkNotificationRead(notification_id=notification_id, user_id=user.id)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Notification marked as read")


@notification_router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(user: User = Depends(current_user)) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=current_domain.repository_for(Notification).unread_count(user.id))


@notification_router.get("/all", response_model=list[AdminNotificationResponse])
async def all_notifications(admin: User = Depends(require_admin)) -> list[AdminNotificationResponse]:
    notifications = current_domain.repository_for(Notification).newest_first()
    return [AdminNotificationResponse.from_notification(n) for n in notifications]


@notification_router.post("", status_code=201, response_model=NotificationIdResponse)
async def create_notification(
    body: NotificationRequest, admin: User = Depends(require_admin)
) -> NotificationIdResponse:
    command = CreateNotification(
        title=body.title,
        message=body.message,
        notification_type=body.type,
        recipient_type=body.recipient_type,
        recipients=_recipients(body),
        link=body.link,
        action_url=body.action_url,
        action_text=body.action_text,
        expire_days=body.expire_days,
        created_by=admin.id,
    )
    result = current_domain.process(command, asynchronous=False)
    return NotificationIdResponse(notification_id=result)


@notification_router.put("/{notification_id}", response_model=AdminNotificationResponse)
async def update_notification(
    notification_id: str, body: NotificationRequest, admin: User = Depends(require_admin)
) -> AdminNotificationResponse:
    command = UpdateNotification(
        notification_id=notification_id,
        title=body.title,
        message=body.message,
        notification_type=body.type,
        recipient_type=body.recipient_type,
        recipients=_recipients(body),
        link=body.link,
        expire_days=body.expire_days,
    )
    current_domain.process(command, asynchronous=False)
    notification = current_domain.repository_for(Notification).fetch(notification_id)
    return AdminNotificationResponse.from_notification(notification)


@notification_router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(notification_id: str, admin: User = Depends(require_admin)) -> MessageResponse:
    current_domain.process(DeleteNotification(notification_id=notification_id), asynchronous=False)
    return MessageResponse(message="Notification deleted successfully")

"""Notification management — administrator commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.domain import medstore
from medstore.notification.notification import Notification, RecipientType
from medstore.shared.listing import fetch_all


@medstore.command(part_of="Notification")
class CreateNotification:
    title = String(max_length=200)
    message = Text()
    notification_type = String(max_length=20)
    recipient_type = String(max_length=20)
    recipients = Text()  # JSON array of user ids, used with "specific"
    link = String(max_length=500)
    action_url = String(max_length=500)
    action_text = String(max_length=100)
    expire_days = Integer(min_value=1)
    created_by = Identifier()


@medstore.command(part_of="Notification")
class UpdateNotification:
    notification_id = Identifier(required=True)
    title = String(max_length=200)
    message = Text()
    notification_type = String(max_length=20)
    recipient_type = String(max_length=20)
    recipients = Text()  # JSON array of user ids, used with "specific"
    link = String(max_length=500)
    expire_days = Integer(min_value=1)


@medstore.command(part_of="Notification")
class DeleteNotification:
    notification_id = Identifier(required=True)


def resolve_recipients(recipient_type, requested):
    """Recipient ids for a recipient type.

    ``specific`` keeps only ids of existing users; ``admin`` addresses every
    administrator; ``all`` needs no list.
    """
    if recipient_type == RecipientType.SPECIFIC.value:
        wanted = {str(r) for r in (json.loads(requested) if requested else [])}
        return [str(u.id) for u in fetch_all(User) if str(u.id) in wanted]
    if recipient_type == RecipientType.ADMIN.value:
        return [str(u.id) for u in current_domain.repository_for(User).admins()]
    if recipient_type == RecipientType.USER.value:
        return [str(r) for r in (json.loads(requested) if requested else [])]
    return []


@medstore.command_handler(part_of=Notification)
class ManageNotificationHandler:
    @handle(CreateNotification)
    def create_notification(self, command):
        if not command.title or not command.message:
            raise ValidationError({"notification": ["Title and message are required"]})

        recipient_type = command.recipient_type or RecipientType.ALL.value
        notification = Notification.publish(
            title=command.title,
            message=command.message,
            notification_type=command.notification_type,
            recipient_type=recipient_type,
            recipients=resolve_recipients(recipient_type, command.recipients),
            link=command.link,
            action_url=command.action_url,
            action_text=command.action_text,
            created_by=command.created_by,
            expire_days=command.expire_days,
        )
        current_domain.repository_for(Notification).add(notification)
        return str(notification.id)

    @handle(UpdateNotification)
    def update_notification(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.fetch(command.notification_id)

        notification.revise(
            title=command.title,
            message=command.message,
            notification_type=command.notification_type,
            link=command.link,
            expire_days=command.expire_days,
        )
        if command.recipient_type:
            notification.readdress(
                command.recipient_type,
                resolve_recipients(command.recipient_type, command.recipients),
            )
        repo.add(notification)

    @handle(DeleteNotification)
    def delete_notification(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.fetch(command.notification_id)
        repo._dao.delete(notification)

"""MarkNotificationRead — record a read receipt for the current user."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.notification.notification import Notification


@medstore.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)


@medstore.command_handler(part_of=Notification)
class MarkNotificationReadHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.fetch(command.notification_id)
        if notification.mark_read(command.user_id):
            repo.add(notification)

"""Repository for the Notification aggregate."""

from protean.exceptions import ObjectNotFoundError

from medstore.domain import medstore
from medstore.notification.notification import Notification
from medstore.shared.listing import fetch_all


@medstore.repository(part_of=Notification)
class NotificationRepository:
    def fetch(self, notification_id: str) -> Notification:
        try:
            return self.get(notification_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"notification": ["Notification not found"]}) from None

    def newest_first(self) -> list[Notification]:
        return sorted(fetch_all(Notification), key=lambda n: n.created_at, reverse=True)

    def visible_to(self, user_id: str) -> list[Notification]:
        return [n for n in self.newest_first() if n.is_visible_to(user_id)]

    def unread_count(self, user_id: str) -> int:
        return sum(1 for n in self.visible_to(user_id) if n.receipt_for(user_id) is None)

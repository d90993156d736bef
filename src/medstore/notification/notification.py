"""Notification aggregate — in-app messages shown to storefront users.

A notification addresses everyone (``all``), the administrators (``admin``),
a hand-picked list of users (``specific``) or a single customer (``user``).
Each recipient's first read is recorded as a receipt; notifications stop
being shown once they expire.
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import DateTime, HasMany, Identifier, String, Text

from medstore.domain import medstore
from medstore.notification.events import NotificationPublished, NotificationRead
from medstore.settings import NOTIFICATION_EXPIRY_DAYS
from medstore.shared.timestamps import as_utc


class NotificationType(Enum):
    ORDER = "order"
    QUERY = "query"
    SYSTEM = "system"
    WELCOME = "welcome"
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class RecipientType(Enum):
    ALL = "all"
    ADMIN = "admin"
    SPECIFIC = "specific"
    USER = "user"


def expiry_from_now(days=None):
    return datetime.now(UTC) + timedelta(days=days or NOTIFICATION_EXPIRY_DAYS)


@medstore.entity(part_of="Notification")
class ReadReceipt:
    user_id = Identifier(required=True)
    read_at = DateTime(required=True)


@medstore.aggregate
class Notification:
    title = String(required=True, max_length=200)
    message = Text(required=True)
    notification_type = String(choices=NotificationType, default=NotificationType.INFO.value)
    recipient_type = String(choices=RecipientType, default=RecipientType.ALL.value)
    recipients = Text(default="[]")  # JSON array of user ids
    read_receipts = HasMany(ReadReceipt)
    action_url = String(max_length=500, default="")
    action_text = String(max_length=100, default="")
    link = String(max_length=500, default="")
    order_id = Identifier()
    query_id = Identifier()
    created_by = Identifier()
    created_at = DateTime()
    expires_at = DateTime()

    @classmethod
    def publish(
        cls,
        title,
        message,
        notification_type=None,
        recipient_type=None,
        recipients=None,
        link=None,
        action_url=None,
        action_text=None,
        order_id=None,
        query_id=None,
        created_by=None,
        expire_days=None,
    ):
        now = datetime.now(UTC)
        notification = cls(
            title=title,
            message=message,
            notification_type=notification_type or NotificationType.INFO.value,
            recipient_type=recipient_type or RecipientType.ALL.value,
            recipients=json.dumps([str(r) for r in (recipients or [])]),
            link=link or "",
            action_url=action_url or "",
            action_text=action_text or "",
            order_id=order_id,
            query_id=query_id,
            created_by=created_by,
            created_at=now,
            expires_at=expiry_from_now(expire_days),
        )
        notification.raise_(
            NotificationPublished(
                notification_id=notification.id,
                title=notification.title,
                notification_type=notification.notification_type,
                recipient_type=notification.recipient_type,
                published_at=now,
            )
        )
        return notification

    @property
    def recipient_ids(self):
        return json.loads(self.recipients) if self.recipients else []

    def readdress(self, recipient_type, recipients):
        self.recipient_type = recipient_type
        self.recipients = json.dumps([str(r) for r in (recipients or [])])

    def revise(self, title=None, message=None, notification_type=None, link=None, expire_days=None):
        if title:
            self.title = title
        if message:
            self.message = message
        if notification_type:
            self.notification_type = notification_type
        if link is not None:
            self.link = link
        if expire_days:
            self.expires_at = expiry_from_now(expire_days)

    def is_expired(self, at=None):
        at = at or datetime.now(UTC)
        return self.expires_at is not None and as_utc(self.expires_at) <= at

    def is_visible_to(self, user_id, at=None):
        if self.is_expired(at):
            return False
        if self.recipient_type == RecipientType.ALL.value:
            return True
        return str(user_id) in self.recipient_ids

    def receipt_for(self, user_id):
        return next((r for r in self.read_receipts if str(r.user_id) == str(user_id)), None)

    def mark_read(self, user_id):
        """Record that ``user_id`` read this notification; repeated reads are ignored."""
        if self.receipt_for(user_id) is not None:
            return False

        now = datetime.now(UTC)
        self.add_read_receipts(ReadReceipt(user_id=user_id, read_at=now))
        self.raise_(NotificationRead(notification_id=self.id, user_id=user_id, read_at=now))
        return True

"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String

from medstore.domain import medstore


@medstore.event(part_of="Notification")
class NotificationPublished:
    """A notification became visible to its recipients."""

    __version__ = 1

    notification_id: Identifier(required=True)
    title: String(required=True)
    notification_type: String(required=True)
    recipient_type: String(required=True)
    published_at: DateTime(required=True)


@medstore.event(part_of="Notification")
class NotificationRead:
    """A recipient opened a notification for the first time."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)

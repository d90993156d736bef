"""Notification reactions to MedicalQuery events.

Every submitted query is announced to the administrators with a link to the
query in the admin console.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from medstore.domain import medstore
from medstore.medical_query.events import MedicalQuerySubmitted
from medstore.notification.management import resolve_recipients
from medstore.notification.notification import Notification, NotificationType, RecipientType

logger = structlog.get_logger(__name__)


@medstore.event_handler(part_of=Notification, stream_category="medstore::medical_query")
class MedicalQueryEventsHandler:
    @handle(MedicalQuerySubmitted)
    def on_query_submitted(self, event: MedicalQuerySubmitted) -> None:
        prescription = "Prescription attached." if event.has_prescription else "No prescription."
        query_url = f"/admin/queries/{event.query_id}"
        notification = Notification.publish(
            title="New Medical Query Received",
            message=f"New medical query from {event.full_name} ({event.email}). {prescription}",
            notification_type=NotificationType.QUERY.value,
            recipient_type=RecipientType.ADMIN.value,
            recipients=resolve_recipients(RecipientType.ADMIN.value, None),
            link=query_url,
            action_url=query_url,
            action_text="View Query",
            query_id=event.query_id,
        )
        current_domain.repository_for(Notification).add(notification)
        logger.info("query_notification_created", query_id=str(event.query_id))

"""Notification reactions to Order events.

A delivered order produces an "Order Delivered!" notice addressed to the
customer who placed it, inviting them to review what they bought.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from medstore.domain import medstore
from medstore.notification.notification import Notification, NotificationType, RecipientType
from medstore.order.events import OrderDelivered

logger = structlog.get_logger(__name__)


@medstore.event_handler(part_of=Notification, stream_category="medstore::order")
class OrderEventsHandler:
    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        notification = Notification.publish(
            title="Order Delivered!",
            message=(
                f"Your order #{event.order_number} has been delivered. We'd love to hear your feedback!"
            ),
            notification_type=NotificationType.ORDER.value,
            recipient_type=RecipientType.USER.value,
            recipients=[str(event.user_id)],
            action_url="/reviewable-products",
            action_text="Write a review",
            order_id=event.order_id,
        )
        current_domain.repository_for(Notification).add(notification)
        logger.info(
            "delivery_notification_created",
            order_id=str(event.order_id),
            user_id=str(event.user_id),
        )

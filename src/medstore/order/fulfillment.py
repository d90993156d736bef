"""UpdateOrder — administrator moves an order through fulfillment.

Status changes follow the order state machine. Cancelling here takes the
same path as a customer cancellation, including the return of stock.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.order.cancellation import restore_stock
from medstore.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@medstore.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    payment_status = String(max_length=20)
    courier = String(max_length=100)
    tracking_number = String(max_length=100)
    note = Text()


@medstore.command_handler(part_of=Order)
class UpdateOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        previous_status = order.status

        if command.status and command.status != order.status:
            if command.status == OrderStatus.CANCELLED.value:
                order.cancel(cancelled_by="admin")
                restore_stock(order)
            else:
                order.advance_to(command.status)

        if command.courier or command.tracking_number:
            order.update_tracking(courier=command.courier, tracking_number=command.tracking_number)

        if command.payment_status:
            order.record_payment_status(command.payment_status)

        if command.note:
            order.append_note(f"{datetime.now(UTC).isoformat()}: {command.note}")

        repo.add(order)
        logger.info(
            "order_updated",
            order_id=str(order.id),
            previous_status=previous_status,
            status=order.status,
            payment_status=order.payment_status,
        )
        return {
            "id": str(order.id),
            "order_number": order.order_number,
            "status": order.status,
            "payment_status": order.payment_status,
        }

"""CancelOrder — a customer withdraws their own pending order.

The status change and the return of every item's quantity to stock happen
in one unit of work. Products removed from the catalog since the order was
placed are skipped.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.order.order import Order
from medstore.product.product import Product, StockReason
from medstore.shared.errors import AuthorizationError

logger = structlog.get_logger(__name__)


@medstore.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


def restore_stock(order):
    """Put every item of a cancelled ``order`` back on the shelf."""
    product_repo = current_domain.repository_for(Product)
    for product_id, quantity in order.quantities_by_product().items():
        try:
            product = product_repo.get(product_id)
        except ObjectNotFoundError:
            logger.warning(
                "stock_restore_skipped_missing_product",
                order_id=str(order.id),
                product_id=product_id,
                quantity=quantity,
            )
            continue
        product.adjust_stock(quantity, reason=StockReason.CANCELLATION.value, reference=order.id)
        product_repo.add(product)


@medstore.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)

        if not order.belongs_to(command.user_id):
            raise AuthorizationError({"order": ["Not authorized to cancel this order"]})

        order.cancel(cancelled_by="user")
        restore_stock(order)
        repo.add(order)

        logger.info("order_cancelled", order_id=str(order.id), user_id=str(command.user_id))
        return {"id": str(order.id), "order_number": order.order_number, "status": order.status}

"""PlaceOrder — checkout of a list of products into a pending order.

Placement is all-or-nothing. Every requested product is loaded and its stock
checked before anything is written; only then are prices captured, stock
decremented and the order stored, all within the handler's unit of work.
Repeated product ids are checked against their combined quantity.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.order.order import Order
from medstore.product.product import Product, StockReason

logger = structlog.get_logger(__name__)

INVALID_ORDER_MESSAGE = "Invalid order data. Items and shipping address are required."


@medstore.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, quantity}]
    shipping_address = Text()  # JSON: ShippingAddress fields
    payment_method = String(max_length=20)


def _parse_request(command):
    items = json.loads(command.items) if command.items else []
    address = json.loads(command.shipping_address) if command.shipping_address else None
    if not items or not address:
        raise ValidationError({"order": [INVALID_ORDER_MESSAGE]})

    requested = []
    for item in items:
        product_id = item.get("product_id")
        quantity = item.get("quantity")
        if not product_id:
            raise ValidationError({"items": ["Each item must name a product"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": ["Quantity must be a whole number of at least 1"]})
        requested.append((str(product_id), quantity))
    return requested, address


@medstore.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested, address = _parse_request(command)
        product_repo = current_domain.repository_for(Product)

        totals = {}
        for product_id, quantity in requested:
            totals[product_id] = totals.get(product_id, 0) + quantity

        # Validate everything before touching any stock
        products = {}
        for product_id, quantity in totals.items():
            try:
                product = product_repo.get(product_id)
            except ObjectNotFoundError:
                raise ObjectNotFoundError({"product": [f"Product with ID {product_id} not found"]}) from None
            if product.stock < quantity:
                logger.info(
                    "order_rejected_insufficient_stock",
                    user_id=str(command.user_id),
                    product_id=product_id,
                    requested=quantity,
                    available=product.stock,
                )
                raise ValidationError(
                    {"stock": [f"Insufficient stock for {product.name}. Available: {product.stock}"]}
                )
            products[product_id] = product

        lines = [
            {
                "product_id": product_id,
                "product_name": products[product_id].name,
                "product_image": products[product_id].image_url or "",
                "quantity": quantity,
                "price": products[product_id].price,
            }
            for product_id, quantity in requested
        ]
        order = Order.place(
            user_id=command.user_id,
            lines=lines,
            shipping_address=address,
            payment_method=command.payment_method,
        )

        for product_id, quantity in totals.items():
            product = products[product_id]
            product.adjust_stock(-quantity, reason=StockReason.SALE.value, reference=order.id)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            total_amount=order.total_amount,
            item_count=len(order.items),
        )
        return {
            "id": str(order.id),
            "order_number": order.order_number,
            "total_amount": order.total_amount,
            "status": order.status,
            "created_at": order.created_at,
        }

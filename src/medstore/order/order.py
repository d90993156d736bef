"""Order aggregate — the core of the storefront.

An order is created at checkout with a snapshot of each product's name,
image and price. The captured prices never change, so the total always
equals the sum of quantity times captured price.

State Machine (5 states):
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING → CANCELLED
    DELIVERED and CANCELLED are terminal.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from medstore.domain import medstore
from medstore.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"
    WALLET = "wallet"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

ORDER_NUMBER_PREFIX = "RMT-ORD"


def _parse(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError({field_name: [f"Invalid {field_name.replace('_', ' ')}: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@medstore.value_object(part_of="Order")
class ShippingAddress:
    """Where and to whom the order is delivered, captured at checkout."""

    name = String(required=True, max_length=100)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100, default="India")
    phone = String(required=True, max_length=20)


@medstore.value_object(part_of="Order")
class TrackingInfo:
    courier = String(max_length=100)
    tracking_number = String(max_length=100)
    dispatch_date = DateTime()


@medstore.value_object(part_of="Order")
class PaymentDetails:
    transaction_id = String(max_length=255)
    payment_time = DateTime()
    gateway = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@medstore.entity(part_of="Order")
class OrderItem:
    """A line of the order with the product details as they were at checkout."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    product_image = String(max_length=500, default="")
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@medstore.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_address = ValueObject(ShippingAddress, required=True)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_details = ValueObject(PaymentDetails)
    tracking_info = ValueObject(TrackingInfo)
    order_notes = Text(default="")
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_matches_items(self):
        if not self.items:
            return
        expected = sum(item.line_total for item in self.items)
        if abs((self.total_amount or 0.0) - expected) > 1e-6:
            raise ValidationError({"total_amount": ["Order total must equal the sum of its items"]})

    @property
    def order_number(self):
        """Human readable id: ``RMT-ORD-<year>-<last 5 characters of the id>``."""
        year = (self.created_at or datetime.now(UTC)).year
        return f"{ORDER_NUMBER_PREFIX}-{year}-{str(self.id)[-5:]}"

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines, shipping_address, payment_method=None):
        """Create a pending order.

        Args:
            user_id: The customer placing the order.
            lines: List of dicts with product_id, product_name, product_image,
                   quantity and price (the unit price at checkout).
            shipping_address: Dict with the ShippingAddress fields.
            payment_method: One of cod, online, wallet (default cod).
        """
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)
        items = [OrderItem(**line) for line in lines]
        order = cls(
            user_id=user_id,
            items=items,
            total_amount=sum(item.line_total for item in items),
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method or PaymentMethod.COD.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                user_id=order.user_id,
                items=json.dumps(
                    [
                        {
                            "product_id": str(i.product_id),
                            "name": i.product_name,
                            "quantity": i.quantity,
                            "price": i.price,
                        }
                        for i in order.items
                    ]
                ),
                total_amount=order.total_amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"status": [f"Cannot change order status from {current.value} to {target_status.value}"]}
            )

    def append_note(self, line):
        self.order_notes = f"{self.order_notes}\n{line}" if self.order_notes else line

    def quantities_by_product(self):
        """Total quantity per product id, in order of first appearance."""
        totals = {}
        for item in self.items:
            key = str(item.product_id)
            totals[key] = totals.get(key, 0) + item.quantity
        return totals

    def belongs_to(self, user_id):
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by="user"):
        """Cancel a pending order. Returning stock is the caller's job."""
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": [f"Cannot cancel order with status: {self.status}"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.append_note(f"Cancelled by {cancelled_by} on {now.isoformat()}")
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=self.id,
                user_id=self.user_id,
                total_amount=self.total_amount,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    def advance_to(self, new_status):
        """Move to processing, shipped or delivered."""
        target = _parse(OrderStatus, new_status, "status")
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Use cancel() to cancel an order"]})
        self._assert_can_transition(target)

        now = datetime.now(UTC)
        previous = self.status
        self.status = target.value
        self.updated_at = now

        if target == OrderStatus.SHIPPED and not (self.tracking_info and self.tracking_info.dispatch_date):
            self.update_tracking(dispatch_date=now)

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

        if target == OrderStatus.DELIVERED:
            self.delivered_at = now
            self.raise_(
                OrderDelivered(
                    order_id=self.id,
                    order_number=self.order_number,
                    user_id=self.user_id,
                    item_count=len(self.items),
                    delivered_at=now,
                )
            )

    def update_tracking(self, courier=None, tracking_number=None, dispatch_date=None):
        current = self.tracking_info.to_dict() if self.tracking_info else {}
        updates = {
            "courier": courier,
            "tracking_number": tracking_number,
            "dispatch_date": dispatch_date,
        }
        merged = {**current, **{k: v for k, v in updates.items() if v is not None}}
        self.tracking_info = TrackingInfo(**merged)
        self.updated_at = datetime.now(UTC)

    def record_payment_status(self, new_status):
        target = _parse(PaymentStatus, new_status, "payment_status")
        previous = self.payment_status
        if target.value == previous:
            return

        self.payment_status = target.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
            )
        )

"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from medstore.domain import medstore


@medstore.event(part_of="Order")
class OrderPlaced:
    """A customer checked out: stock was taken and the order is awaiting processing."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    user_id: Identifier(required=True)
    items: Text(required=True)  # JSON: [{product_id, name, quantity, price}]
    total_amount: Float(required=True)
    payment_method: String(required=True)
    placed_at: DateTime(required=True)


@medstore.event(part_of="Order")
class OrderCancelled:
    """A pending order was cancelled and its stock returned."""

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    total_amount: Float(required=True)
    cancelled_by: String(required=True)
    cancelled_at: DateTime(required=True)


@medstore.event(part_of="Order")
class OrderStatusChanged:
    """An order moved forward through processing and shipping."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@medstore.event(part_of="Order")
class OrderDelivered:
    """An order reached the customer."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    user_id: Identifier(required=True)
    item_count: Integer(required=True)
    delivered_at: DateTime(required=True)


@medstore.event(part_of="Order")
class PaymentStatusChanged:
    """The recorded payment state of an order changed."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)

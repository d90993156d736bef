"""Tests for the Order aggregate state machine and captured totals."""

import re
from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError

from medstore.order.events import OrderCancelled, OrderDelivered, OrderPlaced, OrderStatusChanged
from medstore.order.order import Order, OrderStatus

ADDRESS = {
    "name": "Asha Verma",
    "street": "12 MG Road",
    "city": "Pune",
    "state": "Maharashtra",
    "postal_code": "411001",
    "phone": "9800000000",
}


def _line(product_id="prod-1", quantity=3, price=100.0, name="Paracetamol"):
    return {
        "product_id": product_id,
        "product_name": name,
        "product_image": "",
        "quantity": quantity,
        "price": price,
    }


def _order(lines=None, **overrides):
    return Order.place(
        user_id=overrides.pop("user_id", "user-1"),
        lines=lines or [_line()],
        shipping_address=ADDRESS,
        **overrides,
    )


def _advance(order, *statuses):
    for status in statuses:
        order.advance_to(status)
    return order


class TestPlacement:
    def test_total_is_sum_of_lines(self):
        order = _order([_line(quantity=3, price=100.0), _line(product_id="prod-2", quantity=2, price=12.5)])
        assert order.total_amount == 325.0

    def test_defaults(self):
        order = _order()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_method == "cod"
        assert order.payment_status == "pending"
        assert order.shipping_address.country == "India"

    def test_order_number_format(self):
        order = _order()
        year = datetime.now(UTC).year
        assert re.fullmatch(rf"RMT-ORD-{year}-.{{5}}", order.order_number)
        assert order.order_number.endswith(str(order.id)[-5:])

    def test_raises_placed_event(self):
        order = _order()
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.total_amount == 300.0
        assert event.order_number == order.order_number

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError):
            Order.place(user_id="user-1", lines=[], shipping_address=ADDRESS)

    def test_invalid_payment_method_rejected(self):
        with pytest.raises(ValidationError):
            _order(payment_method="barter")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            _order([_line(quantity=0)])

    def test_total_cannot_drift_from_items(self):
        order = _order()
        with pytest.raises(ValidationError):
            order.total_amount = 1.0

    def test_quantities_by_product_sums_repeated_lines(self):
        order = _order([_line(quantity=2), _line(quantity=3), _line(product_id="prod-2", quantity=1)])
        assert order.quantities_by_product() == {"prod-1": 5, "prod-2": 1}


class TestCancellation:
    def test_cancel_pending(self):
        order = _order()
        order.cancel(cancelled_by="user")

        assert order.status == "cancelled"
        assert order.order_notes.startswith("Cancelled by user on ")
        assert isinstance(order._events[-1], OrderCancelled)

    def test_cannot_cancel_twice(self):
        order = _order()
        order.cancel()
        with pytest.raises(ValidationError) as exc:
            order.cancel()
        assert exc.value.messages["status"] == ["Cannot cancel order with status: cancelled"]

    @pytest.mark.parametrize(
        "path",
        [["processing"], ["processing", "shipped"], ["processing", "shipped", "delivered"]],
    )
    def test_cannot_cancel_after_pending(self, path):
        order = _advance(_order(), *path)
        with pytest.raises(ValidationError):
            order.cancel()
        assert order.status == path[-1]


class TestStatusTransitions:
    def test_full_lifecycle(self):
        order = _advance(_order(), "processing", "shipped", "delivered")
        assert order.status == "delivered"
        assert order.delivered_at is not None

        delivered = [e for e in order._events if isinstance(e, OrderDelivered)]
        assert len(delivered) == 1
        assert delivered[0].user_id == "user-1"
        assert len([e for e in order._events if isinstance(e, OrderStatusChanged)]) == 3

    def test_shipping_sets_dispatch_date(self):
        order = _advance(_order(), "processing", "shipped")
        assert order.tracking_info.dispatch_date is not None

    def test_skipping_states_rejected(self):
        order = _order()
        with pytest.raises(ValidationError):
            order.advance_to("delivered")

    def test_delivered_is_terminal(self):
        order = _advance(_order(), "processing", "shipped", "delivered")
        with pytest.raises(ValidationError):
            order.advance_to("processing")

    def test_unknown_status(self):
        with pytest.raises(ValidationError) as exc:
            _order().advance_to("lost")
        assert exc.value.messages["status"] == ["Invalid status: lost"]


class TestTrackingAndPayment:
    def test_tracking_merges(self):
        order = _order()
        order.update_tracking(courier="BlueDart")
        order.update_tracking(tracking_number="BD123")
        assert order.tracking_info.courier == "BlueDart"
        assert order.tracking_info.tracking_number == "BD123"

    def test_payment_status(self):
        order = _order()
        order.record_payment_status("paid")
        assert order.payment_status == "paid"

    def test_invalid_payment_status(self):
        with pytest.raises(ValidationError):
            _order().record_payment_status("refunded")

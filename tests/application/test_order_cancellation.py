"""Application tests for order cancellation and stock restoration."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from medstore.order.cancellation import CancelOrder
from medstore.order.fulfillment import UpdateOrder
from medstore.order.order import Order
from medstore.product.product import Product
from medstore.product.removal import DeleteProduct
from medstore.projections.stock_movements import movements_for
from medstore.shared.errors import AuthorizationError


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _cancel(order_id, user_id):
    return current_domain.process(CancelOrder(order_id=order_id, user_id=user_id), asynchronous=False)


class TestCancelOrder:
    def test_cancel_restores_stock(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(price=100.0, stock=5)
        placed = place_order(user.id, [(product_id, 3)])
        assert _stock(product_id) == 2

        result = _cancel(placed["id"], user.id)

        assert result["status"] == "cancelled"
        assert result["order_number"] == placed["order_number"]
        assert _stock(product_id) == 5
        order = current_domain.repository_for(Order).get(placed["id"])
        assert "Cancelled by user on" in order.order_notes

    def test_restoration_logged(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)
        placed = place_order(user.id, [(product_id, 3)])
        _cancel(placed["id"], user.id)

        reasons = [(m.reason, m.quantity_change) for m in movements_for(product_id)]
        assert reasons == [("Sale", -3), ("Cancellation", 3)]

    def test_repeated_lines_restored_in_full(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=10)
        placed = place_order(user.id, [(product_id, 2), (product_id, 3)])
        _cancel(placed["id"], user.id)
        assert _stock(product_id) == 10

    def test_second_cancel_rejected(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)
        placed = place_order(user.id, [(product_id, 3)])
        _cancel(placed["id"], user.id)

        with pytest.raises(ValidationError) as exc:
            _cancel(placed["id"], user.id)
        assert exc.value.messages["status"] == ["Cannot cancel order with status: cancelled"]
        assert _stock(product_id) == 5

    def test_other_customer_cannot_cancel(self, make_user, make_product, place_order):
        owner = make_user()
        stranger = make_user(name="Ravi")
        product_id = make_product(stock=5)
        placed = place_order(owner.id, [(product_id, 3)])

        with pytest.raises(AuthorizationError):
            _cancel(placed["id"], stranger.id)
        assert current_domain.repository_for(Order).get(placed["id"]).status == "pending"
        assert _stock(product_id) == 2

    def test_shipped_order_cannot_be_cancelled(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)
        placed = place_order(user.id, [(product_id, 3)])
        for status in ("processing", "shipped"):
            current_domain.process(UpdateOrder(order_id=placed["id"], status=status), asynchronous=False)

        with pytest.raises(ValidationError) as exc:
            _cancel(placed["id"], user.id)
        assert exc.value.messages["status"] == ["Cannot cancel order with status: shipped"]
        assert _stock(product_id) == 2

    def test_removed_product_is_skipped(self, make_user, make_product, place_order):
        user = make_user()
        kept = make_product(name="Paracetamol", stock=5)
        removed = make_product(name="Ashwagandha", stock=5)
        placed = place_order(user.id, [(kept, 1), (removed, 1)])
        current_domain.process(DeleteProduct(product_id=removed), asynchronous=False)

        result = _cancel(placed["id"], user.id)

        assert result["status"] == "cancelled"
        assert _stock(kept) == 5

    def test_unknown_order(self, make_user):
        with pytest.raises(ObjectNotFoundError):
            _cancel("missing-order", make_user().id)

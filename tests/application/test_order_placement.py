"""Application tests for atomic order placement."""

import json

import pytest
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from medstore.order.order import Order
from medstore.order.placement import INVALID_ORDER_MESSAGE, PlaceOrder
from medstore.product.product import Product, StockReason
from medstore.projections.stock_movements import movements_for
from medstore.shared.listing import fetch_all


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


class TestPlaceOrder:
    def test_places_order_and_decrements_stock(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(price=100.0, mrp=120.0, stock=5)

        result = place_order(user.id, [(product_id, 3)])

        assert result["total_amount"] == 300.0
        assert result["status"] == "pending"
        assert result["order_number"].startswith("RMT-ORD-")
        assert _stock(product_id) == 2

        order = current_domain.repository_for(Order).get(result["id"])
        assert order.user_id == user.id
        assert len(order.items) == 1
        assert order.items[0].product_name == "Paracetamol"
        assert order.items[0].price == 100.0

    def test_captures_price_at_checkout(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(price=100.0, mrp=120.0)
        result = place_order(user.id, [(product_id, 1)])

        product = current_domain.repository_for(Product).get(product_id)
        product.update_details(price=110.0)
        current_domain.repository_for(Product).add(product)

        order = current_domain.repository_for(Order).get(result["id"])
        assert order.items[0].price == 100.0
        assert order.total_amount == 100.0

    def test_stock_movement_logged_against_order(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)
        result = place_order(user.id, [(product_id, 2)])

        movement = movements_for(product_id)[-1]
        assert movement.reason == "Sale"
        assert movement.quantity_change == -2
        assert movement.reference == result["id"]

    def test_multiple_products(self, make_user, make_product, place_order):
        user = make_user()
        first = make_product(name="Paracetamol", price=15.0, mrp=20.0, stock=10)
        second = make_product(name="Ashwagandha", price=150.0, mrp=180.0, stock=4)

        result = place_order(user.id, [(first, 2), (second, 1)])

        assert result["total_amount"] == 180.0
        assert _stock(first) == 8
        assert _stock(second) == 3

    def test_repeated_product_uses_combined_quantity(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)

        with pytest.raises(ValidationError):
            place_order(user.id, [(product_id, 3), (product_id, 3)])
        assert _stock(product_id) == 5

        result = place_order(user.id, [(product_id, 2), (product_id, 3)])
        order = current_domain.repository_for(Order).get(result["id"])
        assert len(order.items) == 2
        assert _stock(product_id) == 0


class TestPlaceOrderRejections:
    def test_insufficient_stock_rejects_everything(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=2)

        with pytest.raises(ValidationError) as exc:
            place_order(user.id, [(product_id, 5)])

        assert exc.value.messages["stock"] == ["Insufficient stock for Paracetamol. Available: 2"]
        assert _stock(product_id) == 2
        assert fetch_all(Order) == []

    def test_shortage_on_a_later_line_leaves_earlier_lines_untouched(self, make_user, make_product, place_order):
        user = make_user()
        plenty = make_product(name="Paracetamol", stock=10)
        scarce = make_product(name="Ashwagandha", stock=1)

        with pytest.raises(ValidationError):
            place_order(user.id, [(plenty, 4), (scarce, 2)])

        assert _stock(plenty) == 10
        assert _stock(scarce) == 1
        assert movements_for(plenty) == []
        assert fetch_all(Order) == []

    def test_unknown_product(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)

        with pytest.raises(ObjectNotFoundError) as exc:
            place_order(user.id, [(product_id, 1), ("missing-product", 1)])

        assert "Product with ID missing-product not found" in str(exc.value)
        assert _stock(product_id) == 5

    def test_empty_items(self, make_user):
        user = make_user()
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                PlaceOrder(user_id=user.id, items="[]", shipping_address=json.dumps({"city": "Pune"})),
                asynchronous=False,
            )
        assert exc.value.messages["order"] == [INVALID_ORDER_MESSAGE]

    def test_missing_address(self, make_user, make_product):
        user = make_user()
        product_id = make_product()
        with pytest.raises(ValidationError):
            current_domain.process(
                PlaceOrder(user_id=user.id, items=json.dumps([{"product_id": product_id, "quantity": 1}])),
                asynchronous=False,
            )

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", None])
    def test_invalid_quantity(self, make_user, make_product, place_order, quantity):
        user = make_user()
        product_id = make_product(stock=5)
        with pytest.raises(ValidationError):
            place_order(user.id, [(product_id, quantity)])
        assert _stock(product_id) == 5


class TestStaleProductWrites:
    def test_stale_copy_cannot_overwrite_a_sale(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=1)
        repo = current_domain.repository_for(Product)
        stale = repo.get(product_id)

        place_order(user.id, [(product_id, 1)])

        # Still sees the unit that was just sold
        stale.adjust_stock(-1, StockReason.SALE.value)
        with pytest.raises(ExpectedVersionError):
            repo.add(stale)
        assert _stock(product_id) == 0

"""Tests for the Product aggregate: pricing, stock and reviews."""

import pytest
from protean.exceptions import ValidationError

from medstore.product.events import ProductCreated, ReviewAdded, StockAdjusted
from medstore.product.product import Product, StockReason, average_rating, compute_discount


def _product(**overrides):
    defaults = {
        "name": "Paracetamol",
        "description": "Fever and pain relief tablet",
        "price": 15.0,
        "mrp": 20.0,
        "category_id": "cat-001",
        "stock": 10,
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestDiscountDerivation:
    @pytest.mark.parametrize(
        ("price", "mrp", "expected"),
        [
            (80.0, 100.0, 20),
            (15.0, 20.0, 25),
            (150.0, 180.0, 17),
            (120.0, 140.0, 14),
            (100.0, 100.0, 0),
            (120.0, 100.0, 0),
            (10.0, 0.0, 0),
            (0.0, 50.0, 100),
        ],
    )
    def test_compute_discount(self, price, mrp, expected):
        assert compute_discount(price, mrp) == expected

    def test_discount_set_on_create(self):
        assert _product(price=150.0, mrp=180.0).discount == 17

    def test_discount_follows_price_update(self):
        product = _product(price=80.0, mrp=100.0)
        product.update_details(price=50.0)
        assert product.discount == 50
        product.update_details(mrp=50.0)
        assert product.discount == 0

    def test_discount_cannot_drift_from_pricing(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.discount = 90


class TestRatingDerivation:
    @pytest.mark.parametrize(
        ("ratings", "expected"),
        [([], 0.0), ([5], 5.0), ([4, 5], 4.5), ([5, 4, 4], 4.3), ([4, 5, 5], 4.7), ([4, 4, 4, 5], 4.3)],
    )
    def test_average_rating(self, ratings, expected):
        assert average_rating(ratings) == expected


class TestCreation:
    def test_lists_and_defaults(self):
        product = _product(uses=["Fever", "Headache"])
        assert product.list_of("uses") == ["Fever", "Headache"]
        assert product.list_of("symptoms") == []
        assert product.storage == "Store in a cool, dry place"
        assert product.country_of_origin == "India"
        assert product.rating == 0.0

    def test_raises_created_event(self):
        product = _product()
        assert isinstance(product._events[0], ProductCreated)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _product(stock=-1)


class TestStockAdjustment:
    def test_sale_decrements(self):
        product = _product(stock=5)
        product.adjust_stock(-3, StockReason.SALE.value, reference="ord-1")
        assert product.stock == 2

        event = product._events[-1]
        assert isinstance(event, StockAdjusted)
        assert event.previous_stock == 5
        assert event.new_stock == 2
        assert event.reason == "Sale"
        assert event.reference == "ord-1"

    def test_cannot_go_below_zero(self):
        product = _product(stock=2)
        with pytest.raises(ValidationError) as exc:
            product.adjust_stock(-5, StockReason.SALE.value)
        assert exc.value.messages["stock"] == ["Insufficient stock for Paracetamol. Available: 2"]
        assert product.stock == 2

    def test_unknown_reason(self):
        product = _product()
        with pytest.raises(ValueError):
            product.adjust_stock(1, "Theft")

    def test_stock_never_negative(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.stock = -1


class TestReviews:
    def test_add_review_updates_rating(self):
        product = _product()
        product.add_review(user_id="u1", rating=4, text="Works well", user_name="Asha")
        product.add_review(user_id="u2", rating=5, text="Great", user_name="Ravi")

        assert len(product.reviews) == 2
        assert product.rating == 4.5
        event = product._events[-1]
        assert isinstance(event, ReviewAdded)
        assert event.review_count == 2

    def test_anonymous_author(self):
        product = _product()
        review = product.add_review(user_id="u1", rating=4, text="Fine", user_name="Asha", anonymous=True)
        assert review.author == "Anonymous"

    def test_verified_purchase_follows_order(self):
        product = _product()
        review = product.add_review(user_id="u1", rating=4, text="Fine", order_id="ord-1")
        assert review.verified_purchase is True

    def test_duplicate_review_rejected(self):
        product = _product()
        product.add_review(user_id="u1", rating=4, text="Fine")
        with pytest.raises(ValidationError) as exc:
            product.add_review(user_id="u1", rating=2, text="Changed my mind")
        assert exc.value.messages["review"] == ["You have already reviewed this product"]
        assert product.rating == 4.0

    @pytest.mark.parametrize("rating", [None, 0, 6])
    def test_rating_out_of_range(self, rating):
        product = _product()
        with pytest.raises(ValidationError) as exc:
            product.add_review(user_id="u1", rating=rating, text="Fine")
        assert exc.value.messages["rating"] == ["Rating must be between 1 and 5"]

    def test_text_required(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.add_review(user_id="u1", rating=3, text="   ")

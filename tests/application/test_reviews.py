"""Application tests for product reviews."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from medstore.order.fulfillment import UpdateOrder
from medstore.order.reviewable import reviewable_products
from medstore.product.product import Product
from medstore.product.reviews import AddReview


def _review(product_id, user_id, rating=4, text="Works well", anonymous=False):
    command = AddReview(product_id=product_id, user_id=user_id, rating=rating, text=text, anonymous=anonymous)
    return current_domain.process(command, asynchronous=False)


class TestAddReview:
    def test_rating_is_mean_of_reviews(self, make_user, make_product):
        product_id = make_product()
        _review(product_id, make_user().id, rating=5)
        _review(product_id, make_user().id, rating=4)
        result = _review(product_id, make_user().id, rating=4)

        assert result["rating"] == 4.3
        product = current_domain.repository_for(Product).get(product_id)
        assert product.rating == 4.3
        assert len(product.reviews) == 3

    def test_reviewer_name_captured(self, make_user, make_product):
        product_id = make_product()
        user = make_user(name="Asha Verma")
        _review(product_id, user.id)
        review = current_domain.repository_for(Product).get(product_id).reviews[0]
        assert review.user_name == "Asha Verma"
        assert review.verified_purchase is False

    def test_second_review_rejected(self, make_user, make_product):
        product_id = make_product()
        user = make_user()
        _review(product_id, user.id, rating=5)

        with pytest.raises(ValidationError) as exc:
            _review(product_id, user.id, rating=1)
        assert exc.value.messages["review"] == ["You have already reviewed this product"]
        assert current_domain.repository_for(Product).get(product_id).rating == 5.0

    def test_delivered_purchase_is_verified(self, make_user, make_product, place_order):
        user = make_user()
        product_id = make_product(stock=5)
        placed = place_order(user.id, [(product_id, 1)])
        for status in ("processing", "shipped", "delivered"):
            current_domain.process(UpdateOrder(order_id=placed["id"], status=status), asynchronous=False)

        _review(product_id, user.id)

        review = current_domain.repository_for(Product).get(product_id).reviews[0]
        assert review.verified_purchase is True
        assert review.order_id == placed["id"]
        assert reviewable_products(user.id) == []

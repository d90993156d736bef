"""AddReview — a customer rates and comments on a product.

One review per user per product. When the user has a delivered order that
contains the product, the review is linked to that order and flagged as a
verified purchase.
"""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, Text
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.domain import medstore
from medstore.order.order import Order
from medstore.product.product import Product


@medstore.command(part_of="Product")
class AddReview:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer()
    text = Text()
    anonymous = Boolean(default=False)


@medstore.command_handler(part_of=Product)
class AddReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        user = current_domain.repository_for(User).get(command.user_id)

        purchase = current_domain.repository_for(Order).delivered_purchase_of(user.id, product.id)

        review = product.add_review(
            user_id=user.id,
            user_name=user.name,
            rating=command.rating,
            text=command.text,
            anonymous=command.anonymous,
            order_id=purchase.id if purchase else None,
        )
        repo.add(product)
        return {"review_id": str(review.id), "rating": product.rating}

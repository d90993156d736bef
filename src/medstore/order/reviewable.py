"""Products a customer can still review.

A product qualifies when it arrived in one of the customer's delivered
orders, is still in the catalog, and carries no review by that customer.
"""

from protean.utils.globals import current_domain

from medstore.order.order import Order
from medstore.product.product import Product
from medstore.shared.listing import fetch_all


def reviewable_products(user_id) -> list[dict]:
    live = {str(p.id): p for p in fetch_all(Product)}

    found = {}
    for order in current_domain.repository_for(Order).delivered_to(user_id):
        for item in order.items:
            product_id = str(item.product_id)
            product = live.get(product_id)
            if product is None or product_id in found or product.has_reviewed(user_id):
                continue
            found[product_id] = {
                "product_id": product_id,
                "product_name": product.name,
                "product_image": product.image_url or item.product_image,
                "order_id": str(order.id),
                "order_date": order.created_at,
                "delivery_date": order.delivered_at,
            }
    return list(found.values())

"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from medstore.domain import medstore
from medstore.order.order import Order, OrderStatus
from medstore.shared.listing import fetch_all
from medstore.shared.timestamps import as_utc


def _newest_first(orders):
    return sorted(orders, key=lambda o: as_utc(o.created_at), reverse=True)


@medstore.repository(part_of=Order)
class OrderRepository:
    def fetch(self, order_id: str) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"order": ["Order not found"]}) from None

    def placed_by(self, user_id: str) -> list[Order]:
        return _newest_first(fetch_all(Order, user_id=str(user_id)))

    def delivered_to(self, user_id: str) -> list[Order]:
        return _newest_first(fetch_all(Order, user_id=str(user_id), status=OrderStatus.DELIVERED.value))

    def delivered_purchase_of(self, user_id: str, product_id: str) -> Order | None:
        """The most recent delivered order of ``user_id`` that contains ``product_id``."""
        for order in self.delivered_to(user_id):
            if any(str(item.product_id) == str(product_id) for item in order.items):
                return order
        return None

    def newest_first(self, status=None, created_from=None, created_to=None, user_ids=None, search=None):
        """Orders for the admin listing.

        ``user_ids`` restricts the result to those customers; ``search`` also
        matches the order id or display number, and is combined with
        ``user_ids`` as an alternative.
        """
        filters = {"status": status} if status else {}
        orders = fetch_all(Order, **filters)

        # Stored timestamps may be naive UTC
        if created_from is not None:
            start = as_utc(created_from)
            orders = [o for o in orders if as_utc(o.created_at) >= start]
        if created_to is not None:
            end = as_utc(created_to)
            orders = [o for o in orders if as_utc(o.created_at) < end]
        if search:
            needle = search.lower()
            customer_ids = {str(uid) for uid in (user_ids or [])}
            orders = [
                o
                for o in orders
                if str(o.user_id) in customer_ids
                or needle == str(o.id).lower()
                or needle in o.order_number.lower()
            ]
        return _newest_first(orders)

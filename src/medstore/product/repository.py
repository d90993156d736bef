"""Repository for the Product aggregate."""

from medstore.domain import medstore
from medstore.product.product import Product
from medstore.shared.listing import fetch_all

_SORTS = {
    "newest": (lambda p: p.created_at, True),
    "oldest": (lambda p: p.created_at, False),
    "price-asc": (lambda p: p.price, False),
    "price-desc": (lambda p: p.price, True),
    "name-asc": (lambda p: p.name.lower(), False),
    "name-desc": (lambda p: p.name.lower(), True),
    "rating": (lambda p: p.rating or 0.0, True),
}


@medstore.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str) -> Product | None:
        if not sku:
            return None
        return self._dao.query.filter(sku=sku).all().first

    def in_category(self, category_id: str) -> list[Product]:
        return fetch_all(Product, category_id=str(category_id))

    def search(
        self,
        category_id=None,
        sub_category=None,
        search=None,
        min_price=None,
        max_price=None,
        featured=None,
        requires_prescription=None,
        sort="newest",
    ) -> list[Product]:
        filters = {}
        if category_id:
            filters["category_id"] = str(category_id)
        if sub_category:
            filters["sub_category"] = sub_category
        if search:
            filters["name__icontains"] = search
        if min_price is not None:
            filters["price__gte"] = min_price
        if max_price is not None:
            filters["price__lte"] = max_price
        if featured is not None:
            filters["featured"] = featured
        if requires_prescription is not None:
            filters["requires_prescription"] = requires_prescription
        products = fetch_all(Product, **filters)

        key, reverse = _SORTS.get(sort, _SORTS["newest"])
        return sorted(products, key=key, reverse=reverse)

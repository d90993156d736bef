"""Repository for the Category aggregate."""

from protean.exceptions import ObjectNotFoundError

from medstore.category.category import Category
from medstore.domain import medstore
from medstore.shared.listing import fetch_all

_SORTS = {
    "order": (lambda c: (c.display_order or 0, c.name.lower()), False),
    "name": (lambda c: c.name.lower(), False),
    "newest": (lambda c: c.created_at, True),
    "oldest": (lambda c: c.created_at, False),
}


@medstore.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug: str) -> Category | None:
        return self._dao.query.filter(slug=slug).all().first

    def get_by_id_or_slug(self, key: str) -> Category:
        category = self.find_by_slug(key)
        if category is not None:
            return category
        try:
            return self.get(key)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"category": ["Category not found"]}) from None

    def children_of(self, category_id: str) -> list[Category]:
        return fetch_all(Category, parent_id=str(category_id))

    def listing(self, parent=None, featured=None, sort="order") -> list[Category]:
        """Categories filtered by parent and featured flag.

        ``parent`` of ``"root"`` or ``"null"`` selects top-level categories.
        """
        top_level = parent in ("root", "null", "")
        filters = {}
        if parent is not None and not top_level:
            filters["parent_id"] = str(parent)
        if featured is not None:
            filters["featured"] = featured

        categories = fetch_all(Category, **filters)
        if top_level:
            categories = [c for c in categories if not c.parent_id]

        key, reverse = _SORTS.get(sort, _SORTS["order"])
        return sorted(categories, key=key, reverse=reverse)

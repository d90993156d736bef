"""Domain events for the Category aggregate."""

from protean.fields import Identifier, String

from medstore.domain import medstore


@medstore.event(part_of="Category")
class CategoryCreated:
    """A new product category was added to the catalog tree."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()


@medstore.event(part_of="Category")
class CategoryUpdated:
    """A category's details or position in the tree changed."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()

"""Category aggregate root for grouping catalog products."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from medstore.category.events import CategoryCreated, CategoryUpdated
from medstore.domain import medstore
from medstore.shared.slug import slugify

# Sentinel for distinguishing "not provided" from an explicit clear
_UNSET = object()


@medstore.aggregate
class Category:
    """A node in the catalog tree, such as "Ayurvedic" or "Baby Care".

    The slug is always derived from the name. A category may point at a
    parent category but never at itself; deeper cycles are not checked.
    """

    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    description: Text(default="")
    image: String(max_length=500, default="")
    parent_id: Identifier()
    featured: Boolean(default=False)
    display_order: Integer(default=0)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None, image=None, parent_id=None, featured=False, display_order=0):
        now = datetime.now(UTC)
        category = cls(
            name=name,
            slug=slugify(name),
            description=description or "",
            image=image or "",
            parent_id=parent_id or None,
            featured=bool(featured),
            display_order=display_order or 0,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
                parent_id=category.parent_id,
            )
        )
        return category

    def update(
        self,
        name=None,
        description=None,
        image=None,
        parent_id=_UNSET,
        featured=None,
        display_order=None,
    ):
        """Apply a partial update. An empty ``parent_id`` moves the category to the top level."""
        if name is not None:
            self.name = name
            self.slug = slugify(name)
        if description is not None:
            self.description = description
        if image is not None:
            self.image = image
        if parent_id is not _UNSET:
            if parent_id and str(parent_id) == str(self.id):
                raise ValidationError({"parent_id": ["Category cannot be its own parent"]})
            self.parent_id = parent_id or None
        if featured is not None:
            self.featured = featured
        if display_order is not None:
            self.display_order = display_order

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CategoryUpdated(
                category_id=self.id,
                name=self.name,
                slug=self.slug,
                parent_id=self.parent_id,
            )
        )

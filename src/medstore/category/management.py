"""Category management — commands and handlers."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from medstore.category.category import Category
from medstore.domain import medstore
from medstore.product.product import Product
from medstore.shared.listing import count
from medstore.shared.slug import slugify


@medstore.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    image: String(max_length=500)
    parent_id: Identifier()
    featured: Boolean(default=False)
    display_order: Integer(default=0)


@medstore.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    image: String(max_length=500)
    parent_id: Identifier()
    clear_parent: Boolean(default=False)
    featured: Boolean()
    display_order: Integer()


@medstore.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


@medstore.command_handler(part_of=Category)
class ManageCategoryHandler:
    def _assert_name_available(self, repo, name, exclude_id=None):
        existing = repo.find_by_slug(slugify(name))
        if existing is not None and str(existing.id) != str(exclude_id):
            raise ValidationError({"name": ["Category with this name already exists"]})

    def _assert_parent_exists(self, repo, parent_id):
        try:
            repo.get(parent_id)
        except ObjectNotFoundError:
            raise ValidationError({"parent_id": ["Parent category not found"]}) from None

    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        self._assert_name_available(repo, command.name)
        if command.parent_id:
            self._assert_parent_exists(repo, command.parent_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            image=command.image,
            parent_id=command.parent_id,
            featured=command.featured,
            display_order=command.display_order,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name and command.name != category.name:
            self._assert_name_available(repo, command.name, exclude_id=category.id)

        changes = {
            "name": command.name,
            "description": command.description,
            "image": command.image,
            "featured": command.featured,
            "display_order": command.display_order,
        }
        if command.clear_parent:
            changes["parent_id"] = None
        elif command.parent_id:
            if str(command.parent_id) == str(category.id):
                raise ValidationError({"parent_id": ["Category cannot be its own parent"]})
            self._assert_parent_exists(repo, command.parent_id)
            changes["parent_id"] = command.parent_id

        category.update(**changes)
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        products_count = count(Product, category_id=str(category.id))
        if products_count:
            raise ValidationError(
                {"category": [f"Cannot delete category: {products_count} products are using this category"]}
            )

        children_count = len(repo.children_of(category.id))
        if children_count:
            raise ValidationError(
                {"category": [f"Cannot delete category: {children_count} subcategories are using this as parent"]}
            )

        repo._dao.delete(category)

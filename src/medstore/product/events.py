"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from medstore.domain import medstore


@medstore.event(part_of="Product")
class ProductCreated:
    """A new product was listed in the catalog."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category_id: Identifier(required=True)
    price: Float(required=True)
    mrp: Float(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@medstore.event(part_of="Product")
class ProductDetailsUpdated:
    """Descriptive or pricing details of a product changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    price: Float(required=True)
    mrp: Float(required=True)
    discount: Integer(required=True)
    updated_at: DateTime(required=True)


@medstore.event(part_of="Product")
class StockAdjusted:
    """The on-hand quantity of a product changed.

    ``reason`` is one of Sale, Cancellation or Correction; ``reference`` names
    the order that caused a Sale or Cancellation.
    """

    __version__ = 1

    product_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    quantity_change: Integer(required=True)
    reason: String(required=True)
    reference: String()
    adjusted_at: DateTime(required=True)


@medstore.event(part_of="Product")
class ReviewAdded:
    """A customer reviewed a product and its average rating was recomputed."""

    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    new_average_rating: Float(required=True)
    review_count: Integer(required=True)

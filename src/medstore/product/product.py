"""Product aggregate root with its customer reviews.

The product is the single owner of its stock level. Every change to
``stock`` goes through :meth:`Product.adjust_stock`, which refuses to go
below zero and records why the quantity moved.
"""

import json
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from medstore.domain import medstore
from medstore.product.events import ProductCreated, ProductDetailsUpdated, ReviewAdded, StockAdjusted

DEFAULT_STORAGE = "Store in a cool, dry place"

# Fields an update may touch directly; stock and discount are derived or guarded
_EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "mrp",
    "category_id",
    "sub_category",
    "sku",
    "image_url",
    "manufacturer",
    "requires_prescription",
    "dosage",
    "dosage_form",
    "package_size",
    "storage",
    "country_of_origin",
    "precautions",
    "featured",
)
_LIST_FIELDS = ("additional_images", "uses", "symptoms", "side_effects")


class StockReason(Enum):
    SALE = "Sale"
    CANCELLATION = "Cancellation"
    CORRECTION = "Correction"


def compute_discount(price, mrp):
    """Percentage off the list price, rounded half up, or 0 when not discounted."""
    if not mrp or mrp <= price:
        return 0
    percent = Decimal(str((mrp - price) / mrp * 100))
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def average_rating(ratings):
    """Arithmetic mean rounded half up to one decimal place, or 0 when empty."""
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _encode_list(values):
    return json.dumps(list(values or []))


@medstore.entity(part_of="Product")
class ProductReview:
    """A single customer's rating and comment on a product."""

    user_id: Identifier(required=True)
    user_name: String(max_length=100, default="")
    text: Text(required=True)
    rating: Integer(required=True, min_value=1, max_value=5)
    anonymous: Boolean(default=False)
    order_id: Identifier()
    verified_purchase: Boolean(default=False)
    created_at: DateTime()

    @property
    def author(self):
        return "Anonymous" if self.anonymous else self.user_name


@medstore.aggregate
class Product:
    name: String(required=True, max_length=200)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    mrp: Float(required=True, min_value=0.0)
    discount: Integer(default=0, min_value=0, max_value=100)
    stock: Integer(default=0)
    category_id: Identifier(required=True)
    sub_category: String(max_length=100, default="")
    sku: String(max_length=50)
    image_url: String(max_length=500, default="")
    additional_images: Text(default="[]")  # JSON array of URLs
    manufacturer: String(max_length=200, default="")
    requires_prescription: Boolean(default=False)
    dosage: String(max_length=200, default="")
    dosage_form: String(max_length=100, default="")
    package_size: String(max_length=100, default="")
    storage: String(max_length=255, default=DEFAULT_STORAGE)
    country_of_origin: String(max_length=100, default="India")
    uses: Text(default="[]")  # JSON array of strings
    symptoms: Text(default="[]")  # JSON array of strings
    side_effects: Text(default="[]")  # JSON array of strings
    precautions: Text(default="")
    featured: Boolean(default=False)
    reviews: HasMany(ProductReview)
    rating: Float(default=0.0, min_value=0.0, max_value=5.0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def discount_must_follow_pricing(self):
        if self.price is None or self.mrp is None:
            return
        if self.discount != compute_discount(self.price, self.mrp):
            raise ValidationError({"discount": ["Discount must be derived from price and MRP"]})

    @classmethod
    def create(cls, name, description, price, mrp, category_id, stock=0, **details):
        """List a new product.

        ``details`` carries the optional descriptive fields; list-valued ones
        (``uses``, ``symptoms``, ``side_effects``, ``additional_images``) are
        plain Python lists.
        """
        if stock is None or stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        now = datetime.now(UTC)
        values = {k: v for k, v in details.items() if k in _EDITABLE_FIELDS and v is not None}
        for field_name in _LIST_FIELDS:
            values[field_name] = _encode_list(details.get(field_name))

        product = cls(
            name=name,
            description=description,
            price=price,
            mrp=mrp,
            discount=compute_discount(price, mrp),
            category_id=category_id,
            stock=stock,
            created_at=now,
            updated_at=now,
            **values,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                category_id=product.category_id,
                price=product.price,
                mrp=product.mrp,
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    def list_of(self, field_name):
        """Decode one of the JSON list fields."""
        raw = getattr(self, field_name)
        return json.loads(raw) if raw else []

    def update_details(self, **changes):
        """Apply a partial update of descriptive and pricing fields.

        ``None`` values are ignored. Discount is recomputed from the resulting
        price and MRP; stock cannot be changed here.
        """
        price = changes.get("price")
        mrp = changes.get("mrp")
        if price is not None or mrp is not None:
            new_price = self.price if price is None else price
            new_mrp = self.mrp if mrp is None else mrp
            # Assign the derived discount in the same step as the prices it depends on
            self._update_pricing(new_price, new_mrp)

        for field_name in _EDITABLE_FIELDS:
            if field_name in ("price", "mrp"):
                continue
            value = changes.get(field_name)
            if value is not None:
                setattr(self, field_name, value)

        for field_name in _LIST_FIELDS:
            value = changes.get(field_name)
            if value is not None:
                setattr(self, field_name, _encode_list(value))

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                price=self.price,
                mrp=self.mrp,
                discount=self.discount,
                updated_at=now,
            )
        )

    def _update_pricing(self, price, mrp):
        with atomic_change(self):
            self.price = price
            self.mrp = mrp
            self.discount = compute_discount(price, mrp)

    def adjust_stock(self, quantity_change, reason, reference=None):
        """Move stock by ``quantity_change`` (negative to take stock out)."""
        reason = StockReason(reason)
        previous = self.stock or 0
        new_stock = previous + quantity_change
        if new_stock < 0:
            raise ValidationError({"stock": [f"Insufficient stock for {self.name}. Available: {previous}"]})

        now = datetime.now(UTC)
        self.stock = new_stock
        self.updated_at = now
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                previous_stock=previous,
                new_stock=new_stock,
                quantity_change=quantity_change,
                reason=reason.value,
                reference=str(reference) if reference else None,
                adjusted_at=now,
            )
        )

    def has_reviewed(self, user_id):
        return any(str(r.user_id) == str(user_id) for r in self.reviews)

    def add_review(self, user_id, rating, text, user_name="", anonymous=False, order_id=None):
        if rating is None or rating < 1 or rating > 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})
        if not text or not text.strip():
            raise ValidationError({"text": ["Review text is required"]})
        if self.has_reviewed(user_id):
            raise ValidationError({"review": ["You have already reviewed this product"]})

        review = ProductReview(
            user_id=user_id,
            user_name=user_name or "",
            text=text.strip(),
            rating=rating,
            anonymous=bool(anonymous),
            order_id=order_id,
            verified_purchase=order_id is not None,
            created_at=datetime.now(UTC),
        )
        self.add_reviews(review)
        self.rating = average_rating([r.rating for r in self.reviews])

        self.raise_(
            ReviewAdded(
                product_id=self.id,
                review_id=review.id,
                user_id=user_id,
                rating=rating,
                new_average_rating=self.rating,
                review_count=len(self.reviews),
            )
        )
        return review

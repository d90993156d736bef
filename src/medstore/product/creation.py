"""Product creation — command and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from medstore.category.category import Category
from medstore.domain import medstore
from medstore.product.product import Product

logger = structlog.get_logger(__name__)


@medstore.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=200)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    mrp = Float(required=True, min_value=0.0)
    stock = Integer(required=True, min_value=0)
    category_id = Identifier(required=True)
    sub_category = String(max_length=100)
    sku = String(max_length=50)
    image_url = String(max_length=500)
    additional_images = Text()  # JSON array of URLs
    manufacturer = String(max_length=200)
    requires_prescription = Boolean(default=False)
    dosage = String(max_length=200)
    dosage_form = String(max_length=100)
    package_size = String(max_length=100)
    storage = String(max_length=255)
    country_of_origin = String(max_length=100)
    uses = Text()  # JSON array of strings
    symptoms = Text()  # JSON array of strings
    side_effects = Text()  # JSON array of strings
    precautions = Text()
    featured = Boolean(default=False)


def ensure_category_exists(category_id):
    try:
        current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise ValidationError({"category_id": ["Invalid category"]}) from None


def ensure_sku_available(sku, exclude_id=None):
    existing = current_domain.repository_for(Product).find_by_sku(sku)
    if existing is not None and str(existing.id) != str(exclude_id):
        raise ValidationError({"sku": [f"SKU {sku} is already in use"]})


def decode_list(value):
    return json.loads(value) if value else None


@medstore.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        ensure_category_exists(command.category_id)
        ensure_sku_available(command.sku)

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            mrp=command.mrp,
            category_id=command.category_id,
            stock=command.stock,
            sub_category=command.sub_category,
            sku=command.sku,
            image_url=command.image_url,
            additional_images=decode_list(command.additional_images),
            manufacturer=command.manufacturer,
            requires_prescription=command.requires_prescription,
            dosage=command.dosage,
            dosage_form=command.dosage_form,
            package_size=command.package_size,
            storage=command.storage,
            country_of_origin=command.country_of_origin,
            uses=decode_list(command.uses),
            symptoms=decode_list(command.symptoms),
            side_effects=decode_list(command.side_effects),
            precautions=command.precautions,
            featured=command.featured,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), stock=product.stock)
        return str(product.id)

"""Product maintenance — partial update command and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.product.creation import decode_list, ensure_category_exists, ensure_sku_available
from medstore.product.product import Product, StockReason


@medstore.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=200)
    description = Text()
    price = Float(min_value=0.0)
    mrp = Float(min_value=0.0)
    stock = Integer(min_value=0)
    category_id = Identifier()
    sub_category = String(max_length=100)
    sku = String(max_length=50)
    image_url = String(max_length=500)
    additional_images = Text()  # JSON array of URLs
    manufacturer = String(max_length=200)
    requires_prescription = Boolean()
    dosage = String(max_length=200)
    dosage_form = String(max_length=100)
    package_size = String(max_length=100)
    storage = String(max_length=255)
    country_of_origin = String(max_length=100)
    uses = Text()  # JSON array of strings
    symptoms = Text()  # JSON array of strings
    side_effects = Text()  # JSON array of strings
    precautions = Text()
    featured = Boolean()


@medstore.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.category_id and str(command.category_id) != str(product.category_id):
            ensure_category_exists(command.category_id)
        if command.sku:
            ensure_sku_available(command.sku, exclude_id=product.id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            mrp=command.mrp,
            category_id=command.category_id,
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

        # A stock figure in an edit is a correction to the counted quantity
        if command.stock is not None and command.stock != product.stock:
            product.adjust_stock(
                command.stock - product.stock,
                reason=StockReason.CORRECTION.value,
                reference="Product update",
            )

        repo.add(product)

"""Product removal — command and handler.

Past orders keep their snapshot of the product's name, image and price, so a
product can be removed while orders still reference it.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.product.product import Product

logger = structlog.get_logger(__name__)


@medstore.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@medstore.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("product_deleted", product_id=str(command.product_id))

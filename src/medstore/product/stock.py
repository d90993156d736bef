"""Manual stock correction — command and handler.

Order placement and cancellation adjust stock from within their own
handlers; this command covers an administrator's correction.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.product.product import Product, StockReason

logger = structlog.get_logger(__name__)


@medstore.command(part_of="Product")
class AdjustStock:
    product_id = Identifier(required=True)
    quantity_change = Integer(required=True)
    note = String(max_length=255)


@medstore.command_handler(part_of=Product)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(
            command.quantity_change,
            reason=StockReason.CORRECTION.value,
            reference=command.note,
        )
        repo.add(product)
        logger.info(
            "stock_corrected",
            product_id=str(product.id),
            quantity_change=command.quantity_change,
            stock=product.stock,
        )
        return product.stock

"""Stock movement log — one row per change to a product's stock.

Lets administrators see why a product's quantity moved and which order
or correction moved it.
"""

import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.product.events import StockAdjusted
from medstore.product.product import Product
from medstore.shared.listing import fetch_all


@medstore.projection
class StockMovement:
    movement_id = Identifier(identifier=True, required=True)
    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    quantity_change = Integer(required=True)
    reason = String(required=True, max_length=20)
    reference = String(max_length=255)
    adjusted_at = DateTime(required=True)


def movements_for(product_id):
    """Movements of one product, oldest first."""
    return sorted(fetch_all(StockMovement, product_id=str(product_id)), key=lambda m: m.adjusted_at)


@medstore.projector(projector_for=StockMovement, aggregates=[Product])
class StockMovementProjector:
    @on(StockAdjusted)
    def on_stock_adjusted(self, event):
        current_domain.repository_for(StockMovement).add(
            StockMovement(
                movement_id=str(uuid.uuid4()),
                product_id=event.product_id,
                previous_stock=event.previous_stock,
                new_stock=event.new_stock,
                quantity_change=event.quantity_change,
                reason=event.reason,
                reference=event.reference,
                adjusted_at=event.adjusted_at,
            )
        )

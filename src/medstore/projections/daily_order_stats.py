"""Daily order stats projection — sales figures for the analytics dashboard.

Keyed by the calendar date (YYYY-MM-DD, UTC) on which orders were placed.
Cancellations and deliveries are counted on the day they happen.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.order.events import OrderCancelled, OrderDelivered, OrderPlaced
from medstore.order.order import Order


@medstore.projection
class DailyOrderStats:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_placed = Integer(default=0)
    orders_cancelled = Integer(default=0)
    orders_delivered = Integer(default=0)
    total_sales = Float(default=0.0)
    cancelled_amount = Float(default=0.0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailyOrderStats)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailyOrderStats(
            date=date_key,
            orders_placed=0,
            orders_cancelled=0,
            orders_delivered=0,
            total_sales=0.0,
            cancelled_amount=0.0,
        )


@medstore.projector(projector_for=DailyOrderStats, aggregates=[Order])
class DailyOrderStatsProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        record = _get_or_create(event.placed_at.date().isoformat())
        record.orders_placed = (record.orders_placed or 0) + 1
        record.total_sales = (record.total_sales or 0.0) + (event.total_amount or 0.0)
        current_domain.repository_for(DailyOrderStats).add(record)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        record = _get_or_create(event.cancelled_at.date().isoformat())
        record.orders_cancelled = (record.orders_cancelled or 0) + 1
        record.cancelled_amount = (record.cancelled_amount or 0.0) + (event.total_amount or 0.0)
        current_domain.repository_for(DailyOrderStats).add(record)

    @on(OrderDelivered)
    def on_order_delivered(self, event):
        record = _get_or_create(event.delivered_at.date().isoformat())
        record.orders_delivered = (record.orders_delivered or 0) + 1
        current_domain.repository_for(DailyOrderStats).add(record)

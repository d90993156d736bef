"""MedStore bounded context — accounts, catalog, orders and notifications.

All aggregates live in one domain so that order placement can check and
decrement product stock in the same unit of work as the order it creates.
"""

import structlog
from protean.domain import Domain

from medstore.utils.logging import configure_logging

configure_logging()

logger = structlog.get_logger(__name__)

medstore = Domain(name="medstore")

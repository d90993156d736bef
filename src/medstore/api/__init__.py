"""HTTP API for the MedStore storefront."""

from medstore.api.accounts import auth_router
from medstore.api.analytics import analytics_router
from medstore.api.catalogue import category_router, product_router
from medstore.api.errors import register_error_handlers
from medstore.api.medical_queries import medical_query_router
from medstore.api.notifications import notification_router
from medstore.api.orders import order_router

ROUTERS = (
    auth_router,
    category_router,
    product_router,
    order_router,
    notification_router,
    medical_query_router,
    analytics_router,
)

__all__ = [
    "ROUTERS",
    "analytics_router",
    "auth_router",
    "category_router",
    "medical_query_router",
    "notification_router",
    "order_router",
    "product_router",
    "register_error_handlers",
]

"""FastAPI endpoints for the administrator reports."""

from fastapi import APIRouter, Depends

from medstore.analytics import reports
from medstore.api.dependencies import require_admin
from medstore.api.orders import order_entry
from medstore.api.schemas import (
    DashboardResponse,
    ProductAnalyticsResponse,
    ProductResponse,
    SalesBucket,
    UserAnalyticsResponse,
    UserResponse,
)

analytics_router = APIRouter(prefix="/analytics", tags=["analytics"], dependencies=[Depends(require_admin)])


@analytics_router.get("/dashboard", response_model=DashboardResponse)
async def dashboard() -> DashboardResponse:
    report = reports.dashboard()
    return DashboardResponse(
        stats=report["stats"],
        recent_orders=[order_entry(o) for o in report["recent_orders"]],
        top_products=report["top_products"],
    )


@analytics_router.get("/sales/{period}", response_model=list[SalesBucket])
async def sales(period: str) -> list[SalesBucket]:
    return [SalesBucket(**bucket) for bucket in reports.sales_by_period(period)]


@analytics_router.get("/users", response_model=UserAnalyticsResponse)
async def users() -> UserAnalyticsResponse:
    report = reports.user_summary()
    return UserAnalyticsResponse(
        stats=report["stats"],
        recent_users=[UserResponse.from_user(u) for u in report["recent_users"]],
    )


@analytics_router.get("/products", response_model=ProductAnalyticsResponse)
async def products() -> ProductAnalyticsResponse:
    report = reports.product_summary()
    return ProductAnalyticsResponse(
        stats=report["stats"],
        low_stock_products=[ProductResponse.from_product(p) for p in report["low_stock_products"]],
        products_by_category=report["products_by_category"],
    )

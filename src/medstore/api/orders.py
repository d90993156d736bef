"""FastAPI endpoints for placing, viewing and managing orders."""

import json
from datetime import UTC, date, datetime, time, timedelta

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.api.dependencies import current_user, require_admin
from medstore.api.schemas import (
    CancelOrderResponse,
    CreateOrderRequest,
    CustomerBrief,
    MyOrderResponse,
    OrderDetailResponse,
    OrderLineDetail,
    OrderListEntry,
    OrderListResponse,
    OrderPlacedResponse,
    OrderUpdatedResponse,
    Pagination,
    ReviewableProduct,
    ReviewableProductsResponse,
    ShippingAddressSchema,
    TrackingInfoSchema,
    UpdateOrderRequest,
)
from medstore.order.cancellation import CancelOrder
from medstore.order.fulfillment import UpdateOrder
from medstore.order.order import Order
from medstore.order.placement import PlaceOrder
from medstore.order.reviewable import reviewable_products
from medstore.product.product import Product
from medstore.settings import DEFAULT_PAGE_SIZE
from medstore.shared.errors import AuthorizationError
from medstore.shared.listing import contains, fetch_all, paginate

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _customer(user_id) -> CustomerBrief | None:
    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        return None
    return CustomerBrief(id=str(user.id), name=user.name, email=user.email)


def _current_price(product_id) -> float | None:
    try:
        return current_domain.repository_for(Product).get(product_id).price
    except ObjectNotFoundError:
        return None


def order_detail(order) -> OrderDetailResponse:
    return OrderDetailResponse(
        id=str(order.id),
        order_number=order.order_number,
        user=_customer(order.user_id),
        items=[
            OrderLineDetail(
                product_id=str(item.product_id),
                product_name=item.product_name,
                product_image=item.product_image,
                quantity=item.quantity,
                price=item.price,
                current_price=_current_price(item.product_id),
            )
            for item in order.items
        ],
        total_amount=order.total_amount,
        status=order.status,
        shipping_address=ShippingAddressSchema(**order.shipping_address.to_dict()),
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        tracking_info=TrackingInfoSchema(**order.tracking_info.to_dict()) if order.tracking_info else None,
        order_notes=order.order_notes,
        delivered_at=order.delivered_at,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def order_entry(order) -> OrderListEntry:
    return OrderListEntry(
        id=str(order.id),
        order_number=order.order_number,
        user=_customer(order.user_id),
        total_amount=order.total_amount,
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# --- Customer endpoints ---


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
async def place_order(body: CreateOrderRequest, user: User = Depends(current_user)) -> OrderPlacedResponse:
    command = PlaceOrder(
        user_id=user.id,
        items=json.dumps([{"product_id": i.product_id, "quantity": i.quantity} for i in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        payment_method=body.payment_method,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderPlacedResponse(**result)


@order_router.get("/my-orders", response_model=list[MyOrderResponse])
async def my_orders(user: User = Depends(current_user)) -> list[MyOrderResponse]:
    orders = current_domain.repository_for(Order).placed_by(user.id)
    return [MyOrderResponse.from_order(o) for o in orders]


@order_router.get("/reviewable-products", response_model=ReviewableProductsResponse)
async def list_reviewable_products(user: User = Depends(current_user)) -> ReviewableProductsResponse:
    products = [ReviewableProduct(**entry) for entry in reviewable_products(user.id)]
    return ReviewableProductsResponse(count=len(products), products=products)


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str, user: User = Depends(current_user)) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).fetch(order_id)
    if not (order.belongs_to(user.id) or user.is_admin):
        raise AuthorizationError({"order": ["Not authorized to view this order"]})
    return order_detail(order)


@order_router.patch("/{order_id}/cancel", response_model=CancelOrderResponse)
async def cancel_order(order_id: str, user: User = Depends(current_user)) -> CancelOrderResponse:
    result = current_domain.process(CancelOrder(order_id=order_id, user_id=user.id), asynchronous=False)
    return CancelOrderResponse(**result)


# --- Admin endpoints ---


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    admin: User = Depends(require_admin),
) -> OrderListResponse:
    created_from = datetime.combine(start_date, time.min, tzinfo=UTC) if start_date else None
    # The end date is inclusive
    created_to = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC) if end_date else None

    user_ids = None
    if search:
        user_ids = [u.id for u in fetch_all(User) if contains(u.name, search) or contains(u.email, search)]

    orders = current_domain.repository_for(Order).newest_first(
        status=status,
        created_from=created_from,
        created_to=created_to,
        user_ids=user_ids,
        search=search,
    )
    result = paginate(orders, page, limit)
    return OrderListResponse(
        orders=[order_entry(o) for o in result["items"]],
        pagination=Pagination(total=result["total"], page=result["page"], pages=result["pages"]),
    )


@order_router.patch("/{order_id}", response_model=OrderUpdatedResponse)
async def update_order(
    order_id: str, body: UpdateOrderRequest, admin: User = Depends(require_admin)
) -> OrderUpdatedResponse:
    tracking = body.tracking_info
    command = UpdateOrder(
        order_id=order_id,
        status=body.status,
        payment_status=body.payment_status,
        courier=tracking.courier if tracking else None,
        tracking_number=tracking.tracking_number if tracking else None,
        note=body.note,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderUpdatedResponse(**result)

"""FastAPI endpoints for categories, products, stock and reviews."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.api.dependencies import current_user, require_admin
from medstore.api.schemas import (
    AddReviewRequest,
    CategoryIdResponse,
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    MessageResponse,
    Pagination,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    ReviewAddedResponse,
    ReviewResponse,
    StockAdjustmentRequest,
    StockLevelResponse,
    StockMovementResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from medstore.category.category import Category
from medstore.category.management import CreateCategory, DeleteCategory, UpdateCategory
from medstore.product.creation import CreateProduct
from medstore.product.details import UpdateProduct
from medstore.product.product import Product
from medstore.product.removal import DeleteProduct
from medstore.product.reviews import AddReview
from medstore.product.stock import AdjustStock
from medstore.projections.stock_movements import movements_for
from medstore.settings import DEFAULT_PAGE_SIZE
from medstore.shared.listing import paginate

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])

_LIST_FIELDS = ("additional_images", "uses", "symptoms", "side_effects")


def _product_command_fields(body) -> dict:
    fields = body.model_dump(exclude_none=True)
    for name in _LIST_FIELDS:
        if name in fields:
            fields[name] = json.dumps(fields[name])
    return fields


def _product_page(products, page, limit) -> ProductListResponse:
    result = paginate(products, page, limit)
    return ProductListResponse(
        products=[ProductResponse.from_product(p) for p in result["items"]],
        pagination=Pagination(total=result["total"], page=result["page"], pages=result["pages"]),
    )


# --- Category endpoints ---


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories(
    parent: str | None = None,
    featured: bool | None = None,
    sort: str = "order",
) -> list[CategoryResponse]:
    categories = current_domain.repository_for(Category).listing(parent=parent, featured=featured, sort=sort)
    return [CategoryResponse.from_category(c) for c in categories]


@category_router.get("/{id_or_slug}", response_model=CategoryResponse)
async def get_category(id_or_slug: str) -> CategoryResponse:
    category = current_domain.repository_for(Category).get_by_id_or_slug(id_or_slug)
    return CategoryResponse.from_category(category)


@category_router.get("/{id_or_slug}/products", response_model=ProductListResponse)
async def category_products(
    id_or_slug: str,
    sort: str = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ProductListResponse:
    category = current_domain.repository_for(Category).get_by_id_or_slug(id_or_slug)
    products = current_domain.repository_for(Product).search(category_id=category.id, sort=sort)
    return _product_page(products, page, limit)


@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest, admin: User = Depends(require_admin)) -> CategoryIdResponse:
    command = CreateCategory(
        name=body.name,
        description=body.description,
        image=body.image,
        parent_id=body.parent_id or None,
        featured=body.featured,
        display_order=body.display_order,
    )
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)


@category_router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str, body: UpdateCategoryRequest, admin: User = Depends(require_admin)
) -> CategoryResponse:
    # An explicit null or empty parent moves the category to the top level
    clear_parent = "parent_id" in body.model_fields_set and not body.parent_id
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        image=body.image,
        parent_id=None if clear_parent else body.parent_id,
        clear_parent=clear_parent,
        featured=body.featured,
        display_order=body.display_order,
    )
    current_domain.process(command, asynchronous=False)
    return CategoryResponse.from_category(current_domain.repository_for(Category).get(category_id))


@category_router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: str, admin: User = Depends(require_admin)) -> MessageResponse:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return MessageResponse(message="Category deleted successfully")


# --- Product endpoints ---


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    category: str | None = None,
    sub_category: str | None = None,
    search: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    featured: bool | None = None,
    requires_prescription: bool | None = None,
    sort: str = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ProductListResponse:
    products = current_domain.repository_for(Product).search(
        category_id=category,
        sub_category=sub_category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        requires_prescription=requires_prescription,
        sort=sort,
    )
    return _product_page(products, page, limit)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, admin: User = Depends(require_admin)) -> ProductIdResponse:
    command = CreateProduct(**_product_command_fields(body))
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, admin: User = Depends(require_admin)
) -> ProductResponse:
    command = UpdateProduct(product_id=product_id, **_product_command_fields(body))
    current_domain.process(command, asynchronous=False)
    return ProductResponse.from_product(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str, admin: User = Depends(require_admin)) -> MessageResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product deleted successfully")


@product_router.patch("/{product_id}/stock", response_model=StockLevelResponse)
async def adjust_stock(
    product_id: str, body: StockAdjustmentRequest, admin: User = Depends(require_admin)
) -> StockLevelResponse:
    command = AdjustStock(product_id=product_id, quantity_change=body.quantity_change, note=body.note)
    stock = current_domain.process(command, asynchronous=False)
    return StockLevelResponse(product_id=product_id, stock=stock)


@product_router.get("/{product_id}/stock-movements", response_model=list[StockMovementResponse])
async def stock_movements(product_id: str, admin: User = Depends(require_admin)) -> list[StockMovementResponse]:
    current_domain.repository_for(Product).get(product_id)
    return [
        StockMovementResponse(
            quantity_change=m.quantity_change,
            previous_stock=m.previous_stock,
            new_stock=m.new_stock,
            reason=m.reason,
            reference=m.reference,
            adjusted_at=m.adjusted_at,
        )
        for m in movements_for(product_id)
    ]


# --- Review endpoints ---


@product_router.get("/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(product_id: str) -> list[ReviewResponse]:
    product = current_domain.repository_for(Product).get(product_id)
    reviews = sorted(product.reviews, key=lambda r: r.created_at, reverse=True)
    return [ReviewResponse.from_review(r) for r in reviews]


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewAddedResponse)
async def add_review(
    product_id: str, body: AddReviewRequest, user: User = Depends(current_user)
) -> ReviewAddedResponse:
    command = AddReview(
        product_id=product_id,
        user_id=user.id,
        rating=body.rating,
        text=body.text or body.comment,
        anonymous=body.anonymous,
    )
    result = current_domain.process(command, asynchronous=False)
    return ReviewAddedResponse(**result)

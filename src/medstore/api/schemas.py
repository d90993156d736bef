"""Pydantic request/response schemas for the MedStore API."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

# --- Shared ---


class MessageResponse(BaseModel):
    message: str


class Pagination(BaseModel):
    total: int
    page: int
    pages: int


# --- Account Schemas ---


class AddressSchema(BaseModel):
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20, validation_alias=AliasChoices("postal_code", "postalCode"))
    country: str | None = Field(None, max_length=100)


class SignupRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Asha Verma",
                    "email": "asha@example.com",
                    "password": "s3cret-pass",
                    "phone": "+91 98765 43210",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=128)
    phone: str | None = Field(None, max_length=20)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    address: AddressSchema | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str | None = Field(
        None, max_length=128, validation_alias=AliasChoices("current_password", "currentPassword")
    )
    new_password: str | None = Field(
        None, max_length=128, validation_alias=AliasChoices("new_password", "newPassword")
    )


class CreateAdminRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=128)
    setup_key: str = Field(..., max_length=255, validation_alias=AliasChoices("setup_key", "setupKey"))


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., max_length=20)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    phone: str | None = None
    profile_image: str | None = None
    address: AddressSchema | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        address = None
        if user.address:
            address = AddressSchema(**user.address.to_dict())
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            phone=user.phone,
            profile_image=user.profile_image,
            address=address,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


# --- Category Schemas ---


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ayurvedic",
                    "description": "Traditional herbal formulations",
                    "featured": True,
                    "display_order": 2,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    image: str | None = Field(None, max_length=500)
    parent_id: str | None = None
    featured: bool = False
    display_order: int = 0


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    image: str | None = Field(None, max_length=500)
    parent_id: str | None = None
    featured: bool | None = None
    display_order: int | None = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    parent_id: str | None = None
    featured: bool = False
    display_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_category(cls, category) -> CategoryResponse:
        return cls(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            image=category.image,
            parent_id=str(category.parent_id) if category.parent_id else None,
            featured=bool(category.featured),
            display_order=category.display_order or 0,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryIdResponse(BaseModel):
    category_id: str


# --- Product Schemas ---


class ProductFields(BaseModel):
    sub_category: str | None = Field(None, max_length=100)
    sku: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=500)
    additional_images: list[str] | None = None
    manufacturer: str | None = Field(None, max_length=200)
    dosage: str | None = Field(None, max_length=200)
    dosage_form: str | None = Field(None, max_length=100)
    package_size: str | None = Field(None, max_length=100)
    storage: str | None = Field(None, max_length=255)
    country_of_origin: str | None = Field(None, max_length=100)
    uses: list[str] | None = None
    symptoms: list[str] | None = None
    side_effects: list[str] | None = None
    precautions: str | None = None


class CreateProductRequest(ProductFields):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Paracetamol 500mg",
                    "description": "Relieves mild to moderate pain and fever.",
                    "price": 25.0,
                    "mrp": 30.0,
                    "stock": 100,
                    "category_id": "3f0c1c9e-3d55-4d3a-9a43-6b1f1d1b6a10",
                    "sku": "MED-PARA-500",
                    "manufacturer": "Generic Pharma Ltd",
                    "dosage_form": "Tablet",
                    "package_size": "Strip of 10 tablets",
                    "uses": ["Fever", "Headache"],
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    mrp: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    category_id: str
    requires_prescription: bool = False
    featured: bool = False


class UpdateProductRequest(ProductFields):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    mrp: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    category_id: str | None = None
    requires_prescription: bool | None = None
    featured: bool | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    mrp: float
    discount: int
    stock: int
    category_id: str
    sub_category: str | None = None
    sku: str | None = None
    image_url: str | None = None
    additional_images: list[str] = []
    manufacturer: str | None = None
    requires_prescription: bool = False
    dosage: str | None = None
    dosage_form: str | None = None
    package_size: str | None = None
    storage: str | None = None
    country_of_origin: str | None = None
    uses: list[str] = []
    symptoms: list[str] = []
    side_effects: list[str] = []
    precautions: str | None = None
    featured: bool = False
    rating: float = 0.0
    review_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            mrp=product.mrp,
            discount=product.discount,
            stock=product.stock,
            category_id=str(product.category_id),
            sub_category=product.sub_category,
            sku=product.sku,
            image_url=product.image_url,
            additional_images=product.list_of("additional_images"),
            manufacturer=product.manufacturer,
            requires_prescription=bool(product.requires_prescription),
            dosage=product.dosage,
            dosage_form=product.dosage_form,
            package_size=product.package_size,
            storage=product.storage,
            country_of_origin=product.country_of_origin,
            uses=product.list_of("uses"),
            symptoms=product.list_of("symptoms"),
            side_effects=product.list_of("side_effects"),
            precautions=product.precautions,
            featured=bool(product.featured),
            rating=product.rating or 0.0,
            review_count=len(product.reviews),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    pagination: Pagination


class StockAdjustmentRequest(BaseModel):
    quantity_change: int
    note: str | None = Field(None, max_length=255)


class StockLevelResponse(BaseModel):
    product_id: str
    stock: int


class StockMovementResponse(BaseModel):
    quantity_change: int
    previous_stock: int
    new_stock: int
    reason: str
    reference: str | None = None
    adjusted_at: datetime


# --- Review Schemas ---


class AddReviewRequest(BaseModel):
    rating: int | None = None
    text: str | None = None
    comment: str | None = None
    anonymous: bool = False


class ReviewAddedResponse(BaseModel):
    review_id: str
    rating: float


class ReviewResponse(BaseModel):
    id: str
    author: str
    rating: int
    text: str
    anonymous: bool
    verified_purchase: bool
    created_at: datetime | None = None

    @classmethod
    def from_review(cls, review) -> ReviewResponse:
        return cls(
            id=str(review.id),
            author=review.author or "",
            rating=review.rating,
            text=review.text,
            anonymous=bool(review.anonymous),
            verified_purchase=bool(review.verified_purchase),
            created_at=review.created_at,
        )


# --- Order Schemas ---


class OrderItemRequest(BaseModel):
    product_id: str = Field(..., validation_alias=AliasChoices("product_id", "product"))
    quantity: int


class ShippingAddressSchema(BaseModel):
    name: str = Field(..., max_length=100)
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    postal_code: str = Field(..., max_length=20, validation_alias=AliasChoices("postal_code", "postalCode"))
    country: str = Field("India", max_length=100)
    phone: str = Field(..., max_length=20)


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product": "9b2d8f7e-51c4-4b7b-8c0e-2f8f6f0c1a11", "quantity": 2}],
                    "shippingAddress": {
                        "name": "Asha Verma",
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "postalCode": "560001",
                        "phone": "+91 98765 43210",
                    },
                    "paymentMethod": "cod",
                }
            ]
        },
    }

    items: list[OrderItemRequest] = []
    shipping_address: ShippingAddressSchema | None = Field(
        None, validation_alias=AliasChoices("shipping_address", "shippingAddress")
    )
    payment_method: str = Field("cod", validation_alias=AliasChoices("payment_method", "paymentMethod"))


class OrderPlacedResponse(BaseModel):
    id: str
    order_number: str
    total_amount: float
    status: str
    created_at: datetime


class CancelOrderResponse(BaseModel):
    id: str
    order_number: str
    status: str


class ProductBrief(BaseModel):
    id: str
    name: str
    image_url: str | None = None


class OrderLineBrief(BaseModel):
    quantity: int
    product: ProductBrief


class MyOrderResponse(BaseModel):
    id: str
    order_number: str
    total_amount: float
    status: str
    created_at: datetime
    items: list[OrderLineBrief]

    @classmethod
    def from_order(cls, order) -> MyOrderResponse:
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            total_amount=order.total_amount,
            status=order.status,
            created_at=order.created_at,
            items=[
                OrderLineBrief(
                    quantity=item.quantity,
                    product=ProductBrief(
                        id=str(item.product_id),
                        name=item.product_name,
                        image_url=item.product_image,
                    ),
                )
                for item in order.items
            ],
        )


class CustomerBrief(BaseModel):
    id: str
    name: str
    email: str


class OrderLineDetail(BaseModel):
    product_id: str
    product_name: str
    product_image: str | None = None
    quantity: int
    price: float
    current_price: float | None = None


class TrackingInfoSchema(BaseModel):
    courier: str | None = None
    tracking_number: str | None = Field(None, validation_alias=AliasChoices("tracking_number", "trackingNumber"))
    dispatch_date: datetime | None = None


class OrderDetailResponse(BaseModel):
    id: str
    order_number: str
    user: CustomerBrief | None = None
    items: list[OrderLineDetail]
    total_amount: float
    status: str
    shipping_address: ShippingAddressSchema
    payment_method: str
    payment_status: str
    tracking_info: TrackingInfoSchema | None = None
    order_notes: str | None = None
    delivered_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None


class OrderListEntry(BaseModel):
    id: str
    order_number: str
    user: CustomerBrief | None = None
    total_amount: float
    status: str
    created_at: datetime
    updated_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderListEntry]
    pagination: Pagination


class UpdateOrderRequest(BaseModel):
    status: str | None = None
    payment_status: str | None = Field(None, validation_alias=AliasChoices("payment_status", "paymentStatus"))
    tracking_info: TrackingInfoSchema | None = Field(
        None, validation_alias=AliasChoices("tracking_info", "trackingInfo")
    )
    note: str | None = Field(None, validation_alias=AliasChoices("note", "orderNotes"))


class OrderUpdatedResponse(BaseModel):
    id: str
    order_number: str
    status: str
    payment_status: str


class ReviewableProduct(BaseModel):
    product_id: str
    product_name: str
    product_image: str | None = None
    order_id: str
    order_date: datetime
    delivery_date: datetime | None = None


class ReviewableProductsResponse(BaseModel):
    count: int
    products: list[ReviewableProduct]


# --- Notification Schemas ---


class NotificationRequest(BaseModel):
    title: str | None = Field(None, max_length=200)
    message: str | None = None
    type: str | None = Field(None, max_length=20)
    recipient_type: str | None = Field(
        None, max_length=20, validation_alias=AliasChoices("recipient_type", "recipientType")
    )
    recipients: list[str] | None = None
    link: str | None = Field(None, max_length=500)
    action_url: str | None = Field(None, max_length=500)
    action_text: str | None = Field(None, max_length=100)
    expire_days: int | None = Field(None, ge=1, validation_alias=AliasChoices("expire_days", "expireDays"))


class NotificationIdResponse(BaseModel):
    notification_id: str


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    type: str
    recipient_type: str
    link: str | None = None
    action_url: str | None = None
    action_text: str | None = None
    order_id: str | None = None
    query_id: str | None = None
    created_at: datetime | None = None
    expires_at: datetime | None = None

    @classmethod
    def fields_of(cls, notification) -> dict:
        return {
            "id": str(notification.id),
            "title": notification.title,
            "message": notification.message,
            "type": notification.notification_type,
            "recipient_type": notification.recipient_type,
            "link": notification.link,
            "action_url": notification.action_url,
            "action_text": notification.action_text,
            "order_id": str(notification.order_id) if notification.order_id else None,
            "query_id": str(notification.query_id) if notification.query_id else None,
            "created_at": notification.created_at,
            "expires_at": notification.expires_at,
        }


class UserNotificationResponse(NotificationResponse):
    is_read: bool
    read_at: datetime | None = None

    @classmethod
    def for_user(cls, notification, user_id) -> UserNotificationResponse:
        receipt = notification.receipt_for(user_id)
        return cls(
            **cls.fields_of(notification),
            is_read=receipt is not None,
            read_at=receipt.read_at if receipt else None,
        )


class AdminNotificationResponse(NotificationResponse):
    recipients: list[str]
    read_count: int

    @classmethod
    def from_notification(cls, notification) -> AdminNotificationResponse:
        return cls(
            **cls.fields_of(notification),
            recipients=notification.recipient_ids,
            read_count=len(notification.read_receipts),
        )


class UnreadCountResponse(BaseModel):
    unread_count: int


# --- Medical Query Schemas ---


class SubmitMedicalQueryRequest(BaseModel):
    full_name: str | None = Field(None, max_length=100, validation_alias=AliasChoices("full_name", "fullName"))
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)
    subject: str | None = Field(None, max_length=200)
    message: str | None = None
    product_list: str | None = Field(None, validation_alias=AliasChoices("product_list", "productList"))
    has_prescription: bool = Field(False, validation_alias=AliasChoices("has_prescription", "hasPrescription"))
    purchase_without_prescription: bool = Field(
        False, validation_alias=AliasChoices("purchase_without_prescription", "purchaseWithoutPrescription")
    )
    symptoms: str | None = None
    current_medications: str | None = Field(
        None, validation_alias=AliasChoices("current_medications", "currentMedications")
    )
    age: int | None = Field(None, ge=0, le=150)
    gender: str | None = Field(None, max_length=10)
    priority: str | None = Field(None, max_length=10)


class MedicalQuerySubmittedResponse(BaseModel):
    message: str
    query_id: str


class MedicalQueryStatusRequest(BaseModel):
    status: str | None = Field(None, max_length=20)


class MedicalQueryAnswerRequest(BaseModel):
    response: str | None = None


class MedicalQueryResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str | None = None
    user_id: str | None = None
    subject: str | None = None
    message: str | None = None
    product_list: str | None = None
    has_prescription: bool
    purchase_without_prescription: bool
    symptoms: str | None = None
    current_medications: str | None = None
    age: int | None = None
    gender: str | None = None
    priority: str
    status: str
    response: str | None = None
    response_date: datetime | None = None
    submitted_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_query(cls, query) -> MedicalQueryResponse:
        return cls(
            id=str(query.id),
            full_name=query.full_name,
            email=query.email,
            phone=query.phone,
            user_id=str(query.user_id) if query.user_id else None,
            subject=query.subject,
            message=query.message,
            product_list=query.product_list,
            has_prescription=bool(query.has_prescription),
            purchase_without_prescription=bool(query.purchase_without_prescription),
            symptoms=query.symptoms,
            current_medications=query.current_medications,
            age=query.age,
            gender=query.gender,
            priority=query.priority,
            status=query.status,
            response=query.response,
            response_date=query.response_date,
            submitted_at=query.submitted_at,
            updated_at=query.updated_at,
        )


class MedicalQueryListResponse(BaseModel):
    queries: list[MedicalQueryResponse]
    total: int
    page: int
    pages: int


# --- Analytics Schemas ---


class TopProduct(BaseModel):
    product_id: str
    name: str
    total_sold: int
    revenue: float


class DashboardStats(BaseModel):
    total_products: int
    total_categories: int
    total_users: int
    total_orders: int
    total_revenue: float
    low_stock_products: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_orders: list[OrderListEntry]
    top_products: list[TopProduct]


class SalesBucket(BaseModel):
    period: str
    total_sales: float
    order_count: int
    average_order_value: float


class UserStats(BaseModel):
    total_users: int
    admin_users: int
    regular_users: int


class UserAnalyticsResponse(BaseModel):
    stats: UserStats
    recent_users: list[UserResponse]


class CategoryStock(BaseModel):
    category: str
    count: int
    total_stock: int


class ProductStats(BaseModel):
    total_products: int
    low_stock_count: int


class ProductAnalyticsResponse(BaseModel):
    stats: ProductStats
    low_stock_products: list[ProductResponse]
    products_by_category: list[CategoryStock]

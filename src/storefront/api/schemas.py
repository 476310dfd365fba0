"""Pydantic request/response schemas for the storefront API.

These are the external contracts. Domain objects are converted here and
never leave the API layer as-is.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, model_validator

from storefront.account.account import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH
from storefront.config import settings
from storefront.order.order import PHONE_PATTERN, ZIP_CODE_PATTERN


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ProductSchema(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    category: str
    images: list[str] = []
    image: str
    features: list[str] = []
    inventory: int
    in_stock: bool
    available: int | None = None

    @classmethod
    def from_product(cls, product, available=None):
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            images=product.image_urls,
            image=product.primary_image,
            features=product.feature_list,
            inventory=product.inventory,
            in_stock=product.in_stock,
            available=available,
        )


class ProductListResponse(BaseModel):
    success: bool = True
    count: int
    products: list[ProductSchema]


class ProductResponse(BaseModel):
    success: bool = True
    product: ProductSchema


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {"examples": [{"id": "prod-001", "quantity": 2}]},
    }

    id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1, le=settings.max_cart_quantity)


class UpdateCartRequest(BaseModel):
    quantity: int = Field(ge=0, le=settings.max_cart_quantity)


class CartItemSchema(BaseModel):
    product_id: str
    name: str
    price: float
    image: str | None = None
    quantity: int
    subtotal: float


class CartSchema(BaseModel):
    items: list[CartItemSchema]
    total_items: int
    total_price: float
    is_empty: bool
    last_updated: datetime | None = None


class CartResponse(BaseModel):
    success: bool = True
    message: str | None = None
    cart: CartSchema


class CartCountResponse(BaseModel):
    success: bool = True
    total_items: int
    total_price: float


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CustomerSchema(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(pattern=PHONE_PATTERN)


class ShippingAddressSchema(BaseModel):
    model_config = {"str_strip_whitespace": True}

    street: str = Field(min_length=5, max_length=255)
    city: str = Field(min_length=2, max_length=100)
    state: str = Field(min_length=2, max_length=100)
    zip_code: str = Field(pattern=ZIP_CODE_PATTERN)
    country: str = Field(default="United States", max_length=100)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "5551234567"},
                    "shipping_address": {
                        "street": "12 Dungeon Lane",
                        "city": "Waterdeep",
                        "state": "CA",
                        "zip_code": "90210",
                    },
                    "notes": "Leave it with the innkeeper",
                }
            ]
        },
    }

    customer: CustomerSchema
    shipping_address: ShippingAddressSchema
    notes: str | None = Field(default=None, max_length=500)


class TotalsSchema(BaseModel):
    subtotal: float
    tax: float
    shipping: float
    total: float


class CheckoutReviewResponse(BaseModel):
    success: bool = True
    cart: CartSchema
    totals: TotalsSchema


class PlaceOrderResponse(BaseModel):
    success: bool = True
    message: str
    order_id: str
    order_number: str


class CustomerDetail(BaseModel):
    name: str
    email: str
    phone: str


class AddressDetail(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    country: str | None = None


class OrderItemSchema(BaseModel):
    product_id: str
    product_name: str
    product_image: str | None = None
    price: float
    quantity: int
    subtotal: float


class OrderSchema(BaseModel):
    id: str
    order_number: str
    status: str
    payment_status: str
    customer: CustomerDetail
    shipping_address: AddressDetail
    items: list[OrderItemSchema]
    totals: TotalsSchema
    total_items: int
    notes: str | None = None
    order_date: datetime | None = None

    @classmethod
    def from_order(cls, order):
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            status=order.status,
            payment_status=order.payment_status,
            customer=CustomerDetail(
                name=order.customer.name,
                email=order.customer.email,
                phone=order.customer.phone,
            ),
            shipping_address=AddressDetail(
                street=order.shipping_address.street,
                city=order.shipping_address.city,
                state=order.shipping_address.state,
                zip_code=order.shipping_address.zip_code,
                country=order.shipping_address.country,
            ),
            items=[
                OrderItemSchema(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    product_image=item.product_image,
                    price=item.price,
                    quantity=item.quantity,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
            totals=TotalsSchema(
                subtotal=order.totals.subtotal,
                tax=order.totals.tax,
                shipping=order.totals.shipping,
                total=order.totals.total,
            ),
            total_items=order.total_items,
            notes=order.notes,
            order_date=order.order_date,
        )


class OrderResponse(BaseModel):
    success: bool = True
    order: OrderSchema


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
class SignupRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_BYTES)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)


class UpdateAccountRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=1, max_length=254)


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_BYTES)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class AccountSchema(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime | None = None
    last_login_at: datetime | None = None

    @classmethod
    def from_account(cls, account):
        return cls(
            id=str(account.id),
            name=account.name,
            email=account.email,
            created_at=account.created_at,
            last_login_at=account.last_login_at,
        )


class AccountResponse(BaseModel):
    success: bool = True
    message: str | None = None
    account: AccountSchema


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    problems: list[str] | None = None

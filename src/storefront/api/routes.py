"""FastAPI routes for the storefront: products, cart, checkout and accounts."""

import structlog
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.account import access
from storefront.account.account import CustomerAccount
from storefront.account.management import UpdateAccountDetails
from storefront.api.schemas import (
    AccountResponse,
    AccountSchema,
    AddToCartRequest,
    CartCountResponse,
    CartResponse,
    CheckoutReviewResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    OrderResponse,
    OrderSchema,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ProductListResponse,
    ProductResponse,
    ProductSchema,
    ResetPasswordRequest,
    SignupRequest,
    UpdateAccountRequest,
    UpdateCartRequest,
)
from storefront.api.session import get_session_id, get_signed_in_account
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.catalogue.product import Product, ProductCategory
from storefront.checkout.placement import PlaceOrder, place_order, review_checkout
from storefront.order.order import Order

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductListResponse)
async def list_products(category: str | None = None) -> ProductListResponse:
    repo = current_domain.repository_for(Product)
    if category:
        if category not in {c.value for c in ProductCategory}:
            raise ValidationError({"category": [f"Unknown category: {category}"]})
        products = repo.find_by_category(category)
    else:
        products = repo.list_all()

    return ProductListResponse(
        count=len(products),
        products=[ProductSchema.from_product(product) for product in products],
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, session_id: str = Depends(get_session_id)) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    cart = current_domain.repository_for(ShoppingCart).for_session(session_id)
    return ProductResponse(product=ProductSchema.from_product(product, available=cart.available_inventory(product)))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(session_id: str = Depends(get_session_id)) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).for_session(session_id)
    return CartResponse(cart=cart.summary())


@cart_router.get("/count", response_model=CartCountResponse)
async def cart_count(session_id: str = Depends(get_session_id)) -> CartCountResponse:
    cart = current_domain.repository_for(ShoppingCart).for_session(session_id)
    return CartCountResponse(total_items=cart.total_items, total_price=cart.total_price)


@cart_router.post("/add", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, session_id: str = Depends(get_session_id)) -> CartResponse:
    command = AddToCart(
        session_id=session_id,
        product_id=body.id,
        quantity=body.quantity,
    )
    summary = current_domain.process(command, asynchronous=False)
    name = next(item["name"] for item in summary["items"] if item["product_id"] == body.id)
    return CartResponse(message=f"{name} added to cart!", cart=summary)


@cart_router.post("/update/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartRequest, session_id: str = Depends(get_session_id)
) -> CartResponse:
    command = UpdateCartItem(
        session_id=session_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    summary = current_domain.process(command, asynchronous=False)
    return CartResponse(message="Cart updated", cart=summary)


@cart_router.post("/remove/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, session_id: str = Depends(get_session_id)) -> CartResponse:
    command = RemoveFromCart(session_id=session_id, product_id=product_id)
    summary = current_domain.process(command, asynchronous=False)
    return CartResponse(message="Item removed from cart", cart=summary)


@cart_router.post("/clear", response_model=CartResponse)
async def clear_cart(session_id: str = Depends(get_session_id)) -> CartResponse:
    summary = current_domain.process(ClearCart(session_id=session_id), asynchronous=False)
    return CartResponse(message="Cart cleared", cart=summary)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("", response_model=CheckoutReviewResponse, dependencies=[Depends(get_signed_in_account)])
async def review(session_id: str = Depends(get_session_id)) -> CheckoutReviewResponse:
    return CheckoutReviewResponse(**review_checkout(session_id))


@checkout_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def checkout(
    body: PlaceOrderRequest,
    session_id: str = Depends(get_session_id),
    account: CustomerAccount = Depends(get_signed_in_account),
) -> PlaceOrderResponse:
    command = PlaceOrder(
        session_id=session_id,
        account_id=account.id,
        customer_name=body.customer.name,
        customer_email=body.customer.email,
        customer_phone=body.customer.phone,
        street=body.shipping_address.street,
        city=body.shipping_address.city,
        state=body.shipping_address.state,
        zip_code=body.shipping_address.zip_code,
        country=body.shipping_address.country,
        notes=body.notes,
    )
    result = await run_in_threadpool(place_order, command)
    return PlaceOrderResponse(
        message=f"Order {result['order_number']} placed successfully!",
        order_id=result["order_id"],
        order_number=result["order_number"],
    )


@checkout_router.get("/confirmation/{order_id}", response_model=OrderResponse)
async def confirmation(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse(order=OrderSchema.from_order(order))


# ---------------------------------------------------------------------------
# Account Router
# ---------------------------------------------------------------------------
account_router = APIRouter(prefix="/auth", tags=["accounts"])

_RESET_REQUESTED = "If an account with that email exists, you will receive password reset instructions."


@account_router.post("/signup", status_code=201, response_model=AccountResponse)
async def signup(body: SignupRequest) -> AccountResponse:
    account_id = access.register_account(body.name, body.email, body.password)
    account = current_domain.repository_for(CustomerAccount).get(account_id)
    return AccountResponse(
        message="Account created successfully! Please log in.",
        account=AccountSchema.from_account(account),
    )


@account_router.post("/login", response_model=AccountResponse)
async def login(body: LoginRequest, session_id: str = Depends(get_session_id)) -> AccountResponse:
    account = access.sign_in(session_id, body.email, body.password)
    return AccountResponse(message=f"Welcome back, {account.name}!", account=AccountSchema.from_account(account))


@account_router.post("/logout", response_model=MessageResponse)
async def logout(session_id: str = Depends(get_session_id)) -> MessageResponse:
    access.sign_out(session_id)
    return MessageResponse(message="You have been logged out")


@account_router.get("/account", response_model=AccountResponse)
async def view_account(account: CustomerAccount = Depends(get_signed_in_account)) -> AccountResponse:
    return AccountResponse(account=AccountSchema.from_account(account))


@account_router.post("/account", response_model=AccountResponse)
async def update_account(
    body: UpdateAccountRequest, account: CustomerAccount = Depends(get_signed_in_account)
) -> AccountResponse:
    command = UpdateAccountDetails(account_id=account.id, name=body.name, email=body.email)
    current_domain.process(command, asynchronous=False)
    updated = current_domain.repository_for(CustomerAccount).get(account.id)
    return AccountResponse(message="Account updated successfully!", account=AccountSchema.from_account(updated))


@account_router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(body: ForgotPasswordRequest) -> MessageResponse:
    token = access.request_password_reset(body.email)
    if token is not None:
        # TODO: email the reset link once the shop has a mail sender
        logger.info("Password reset link issued", reset_path=f"/auth/reset-password/{token}")
    return MessageResponse(message=_RESET_REQUESTED)


@account_router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(token: str, body: ResetPasswordRequest) -> MessageResponse:
    access.reset_password(token, body.password)
    return MessageResponse(message="Password reset successful! Please log in with your new password.")

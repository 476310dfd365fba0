"""Storefront API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import account_router, cart_router, checkout_router, product_router

__all__ = ["account_router", "cart_router", "checkout_router", "product_router", "register_error_handlers"]

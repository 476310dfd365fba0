"""Storefront bounded context — Catalogue, Shopping Cart, Checkout and Orders.

Handles the product catalogue, session-scoped shopping carts with per-session
inventory reservations, and the checkout flow that turns a cart into an order.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)

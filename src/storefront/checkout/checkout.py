"""Checkout Orchestrator — turns a validated cart into an order.

Per-session reservations in the cart are soft: two sessions may both hold the
last unit of a product. ``begin`` is the single checkpoint that re-reads every
product and refuses the checkout when live stock no longer covers the cart.
``commit`` then applies everything (order, inventory decrements, cart clear)
in the caller's unit of work, so a failure part way leaves nothing behind.

State machine:
    IDLE → VALIDATING → CONFIRMED
    IDLE → VALIDATING → REJECTED
"""

from enum import Enum

import structlog
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart, round2
from storefront.catalogue.product import Product
from storefront.catalogue.repository import find_product
from storefront.config import settings
from storefront.exceptions import CheckoutRejected, CheckoutStateError, EmptyCart, InsufficientInventory, ProductGone
from storefront.order.numbering import allocate_order

logger = structlog.get_logger(__name__)


class CheckoutStatus(Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"


def compute_totals(subtotal: float) -> dict:
    """Shipping is free from the free-shipping threshold up. Tax is not charged."""
    subtotal = round2(subtotal)
    shipping = 0.0 if subtotal >= settings.free_shipping_threshold else settings.flat_shipping_rate
    tax = 0.0
    return {
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "total": round2(subtotal + tax + shipping),
    }


class Checkout:
    def __init__(self, cart: ShoppingCart, catalog_lookup=find_product):
        self.cart = cart
        self.catalog_lookup = catalog_lookup
        self.status = CheckoutStatus.IDLE
        self.totals = None
        self._products = {}

    def begin(self) -> dict:
        """Validate the cart against live stock and return its totals.

        Raises:
            EmptyCart: the cart has no items.
            CheckoutRejected: one or more products are gone or short on stock.
                Every problem is listed, not just the first.
        """
        if self.cart.is_empty:
            raise EmptyCart()

        self.status = CheckoutStatus.VALIDATING
        problems = []
        products = {}

        for item in self.cart.line_items():
            product = self.catalog_lookup(item.product_id)
            if product is None:
                problems.append(ProductGone(item.product_id))
                continue
            if product.inventory < item.quantity:
                problems.append(
                    InsufficientInventory(
                        product.id,
                        product_name=product.name,
                        available=product.inventory,
                        requested=item.quantity,
                    )
                )
                continue
            products[str(item.product_id)] = product

        if problems:
            self.status = CheckoutStatus.REJECTED
            logger.info(
                "Checkout rejected",
                session_id=self.cart.session_id,
                problems=[problem.message for problem in problems],
            )
            raise CheckoutRejected(problems)

        self._products = products
        self.totals = compute_totals(self.cart.total_price)
        return self.totals

    def commit(self, customer: dict, shipping_address: dict, notes=None, on_date=None, account_id=None):
        """Place the order for the validated cart and return it."""
        if self.status is not CheckoutStatus.VALIDATING:
            raise CheckoutStateError(f"Cannot commit a checkout in the {self.status.value} state")

        lines = self.cart.line_items()
        items_data = [
            {
                "product_id": str(item.product_id),
                "product_name": item.name,
                "product_image": self._products[str(item.product_id)].primary_image,
                "price": item.price,
                "quantity": item.quantity,
                "subtotal": round2(item.price * item.quantity),
            }
            for item in lines
        ]

        order = allocate_order(
            on_date=on_date,
            customer=customer,
            shipping_address=shipping_address,
            items_data=items_data,
            totals=self.totals,
            notes=notes,
            session_id=self.cart.session_id,
            account_id=account_id,
        )

        product_repo = current_domain.repository_for(Product)
        for item in lines:
            product = self._products[str(item.product_id)]
            product.decrement_inventory(item.quantity)
            product_repo.add(product)

        self.cart.clear()
        current_domain.repository_for(ShoppingCart).add(self.cart)

        self.status = CheckoutStatus.CONFIRMED
        return order

"""PlaceOrder command and its handler.

Checkout is the only writer of shared state (product inventory and the daily
order counter), so ``place_order`` runs one checkout at a time in this
process. Validation and every write happen inside the same lock and the same
unit of work.
"""

import threading

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.repository import find_product
from storefront.checkout.checkout import Checkout
from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)

_checkout_lock = threading.Lock()


@storefront.command(part_of="Order")
class PlaceOrder:
    session_id = Identifier(required=True)
    account_id = Identifier()
    customer_name = String(required=True, max_length=100)
    customer_email = String(required=True, max_length=254)
    customer_phone = String(required=True, max_length=17)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=10)
    country = String(max_length=100)
    notes = String(max_length=500)


@storefront.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = current_domain.repository_for(ShoppingCart).for_session(command.session_id)
        checkout = Checkout(cart, find_product)
        totals = checkout.begin()

        order = checkout.commit(
            customer={
                "name": command.customer_name,
                "email": command.customer_email,
                "phone": command.customer_phone,
            },
            shipping_address={
                "street": command.street,
                "city": command.city,
                "state": command.state,
                "zip_code": command.zip_code,
                "country": command.country,
            },
            notes=command.notes,
            account_id=command.account_id,
        )

        logger.info(
            "Order placed",
            session_id=command.session_id,
            order_id=str(order.id),
            order_number=order.order_number,
            total_items=order.total_items,
            total=totals["total"],
        )
        return {"order_id": str(order.id), "order_number": order.order_number}


def place_order(command: PlaceOrder) -> dict:
    """Run a checkout, one at a time. Returns the new order's id and number.

    Blocks while another checkout holds the lock, so async callers should run
    it in a worker thread.
    """
    with _checkout_lock:
        with storefront.domain_context():
            return current_domain.process(command, asynchronous=False)


def review_checkout(session_id: str) -> dict:
    """Validate the session's cart without placing an order.

    Returns the cart summary alongside the totals the order would carry.
    Raises the same failures as ``Checkout.begin``.
    """
    cart = current_domain.repository_for(ShoppingCart).for_session(session_id)
    totals = Checkout(cart, find_product).begin()
    return {"cart": cart.summary(), "totals": totals}

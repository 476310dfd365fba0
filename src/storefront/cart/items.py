"""Cart item management — commands and handler.

Each handler loads the session's cart, applies one Cart Engine operation,
saves the cart and returns its summary.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import ProductNotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItem:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    session_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    session_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        try:
            product = current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(command.product_id) from None

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_session(command.session_id)

        quantity = command.quantity or 1
        available = cart.available_inventory(product)
        if quantity > available:
            logger.info(
                "Add to cart refused, not enough stock left for session",
                session_id=command.session_id,
                product_id=str(product.id),
                available=available,
                requested=quantity,
            )
            raise ValidationError(
                {"quantity": [f"Only {available} more of {product.name} can be added to your cart"]}
            )

        cart.add_item(product, quantity)
        repo.add(cart)

        logger.info(
            "Item added to cart",
            session_id=command.session_id,
            product_id=str(product.id),
            product_name=product.name,
            quantity=quantity,
        )
        return cart.summary()

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_session(command.session_id)
        cart.update_item(command.product_id, command.quantity)
        repo.add(cart)

        logger.info(
            "Cart item updated",
            session_id=command.session_id,
            product_id=command.product_id,
            new_quantity=command.quantity,
        )
        return cart.summary()

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_session(command.session_id)
        cart.remove_item(command.product_id)
        repo.add(cart)

        logger.info("Item removed from cart", session_id=command.session_id, product_id=command.product_id)
        return cart.summary()

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_session(command.session_id)
        cart.clear()
        repo.add(cart)

        logger.info("Cart cleared", session_id=command.session_id)
        return cart.summary()

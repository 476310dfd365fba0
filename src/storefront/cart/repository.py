"""Session store for shopping carts."""

from protean.exceptions import ObjectNotFoundError

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    """Carts are keyed by session id and created lazily.

    ``for_session`` never writes: a fresh cart is only persisted once a
    mutation is saved with ``add``.
    """

    def for_session(self, session_id: str) -> ShoppingCart:
        try:
            return self.get(session_id)
        except ObjectNotFoundError:
            return ShoppingCart.create(session_id=session_id)

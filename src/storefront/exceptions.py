"""Typed failures raised by the storefront domain.

All failures build on Protean's exception hierarchy and carry a ``messages``
dict keyed by the offending attribute, the same shape Protean uses for its own
``ValidationError``. Protean only sets ``messages`` on ``ValidationError``,
so the other failures set it themselves.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class ItemNotFound(ObjectNotFoundError):
    """The cart has no line item for the given product."""

    def __init__(self, product_id):
        self.product_id = str(product_id)
        self.messages = {"product_id": [f"Item {product_id} not found in cart"]}
        super().__init__(self.messages)


class ProductNotFound(ObjectNotFoundError):
    """The catalogue has no product with the given id."""

    def __init__(self, product_id):
        self.product_id = str(product_id)
        self.messages = {"product_id": ["Product not found"]}
        super().__init__(self.messages)


class EmptyCart(ValidationError):
    """Checkout was attempted on a cart without items."""

    def __init__(self):
        super().__init__({"cart": ["Your cart is empty. Please add items before checkout."]})


class CheckoutProblem(Exception):
    """A single line-item problem discovered while validating a checkout."""

    product_id: str

    @property
    def message(self) -> str:
        return str(self)


class ProductGone(CheckoutProblem):
    def __init__(self, product_id):
        self.product_id = str(product_id)
        super().__init__(f"Product {product_id} no longer exists")


class InsufficientInventory(CheckoutProblem):
    def __init__(self, product_id, product_name, available, requested):
        self.product_id = str(product_id)
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"{product_name} only has {available} items in stock, but you have {requested} in your cart"
        )


class CheckoutRejected(InvalidOperationError):
    """Checkout validation failed for one or more line items.

    Every problem found is collected so the shopper sees all of them at once.
    """

    def __init__(self, problems):
        self.problems = list(problems)
        self.messages = {"items": [problem.message for problem in self.problems]}
        super().__init__(self.messages)


class CheckoutStateError(InvalidOperationError):
    """A checkout step was attempted out of order."""

    def __init__(self, message):
        self.messages = {"checkout": [message]}
        super().__init__(self.messages)


class InventoryConflict(InvalidOperationError):
    """A conditional inventory decrement would have taken stock below zero."""

    def __init__(self, product_id, available, requested):
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested
        self.messages = {
            "inventory": [f"Cannot take {requested} of product {product_id}: only {available} left"]
        }
        super().__init__(self.messages)


class DuplicateOrderNumber(InvalidOperationError):
    """An order with the allocated order number already exists."""

    def __init__(self, order_number):
        self.order_number = order_number
        self.messages = {"order_number": [f"Order number {order_number} is already taken"]}
        super().__init__(self.messages)


class AuthenticationRequired(InvalidOperationError):
    """The session is not signed in to a customer account."""

    def __init__(self):
        self.messages = {"session": ["You must be logged in to access this page"]}
        super().__init__(self.messages)


class InvalidCredentials(InvalidOperationError):
    """Email and password do not match an active account."""

    def __init__(self):
        self.messages = {"credentials": ["Invalid email or password"]}
        super().__init__(self.messages)


def first_message(exc) -> str:
    """Return the first human-readable message carried by a Protean exception.

    Falls back to the exception's first argument when ``messages`` is missing,
    which is the case for Protean's own ``ObjectNotFoundError``.
    """
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args:
        messages = exc.args[0]

    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list | tuple) and value:
                return str(value[0])
            if value:
                return str(value)
    if messages:
        return str(messages)
    return str(exc)

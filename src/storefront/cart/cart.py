"""Shopping Cart aggregate — one per browser session.

The cart is the session store's value: it is keyed by session id, created
lazily on first access and persisted after every mutation. All mutation goes
through the methods below, which never touch the database.

Line items keep the price they were added at. ``reserved_inventory`` mirrors
the line items (product id -> quantity) and is a per-session soft hold used to
show how much more of a product this session may add. It is not a lock:
stock is only taken out of the catalogue at checkout.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from storefront.domain import storefront
from storefront.exceptions import ItemNotFound


def round2(amount):
    return round(amount, 2)


@storefront.entity(part_of="ShoppingCart")
class CartLineItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)
    subtotal = Float(required=True, min_value=0.0)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    session_id = Identifier(identifier=True)
    items = HasMany(CartLineItem)
    total_items = Integer(default=0)
    total_price = Float(default=0.0)
    reserved_inventory = Text()  # JSON object: product id -> reserved quantity
    last_updated = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id):
        return cls(
            session_id=session_id,
            total_items=0,
            total_price=0.0,
            reserved_inventory=json.dumps({}),
            last_updated=datetime.now(UTC),
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def reservations(self):
        return json.loads(self.reserved_inventory) if self.reserved_inventory else {}

    @property
    def is_empty(self):
        return len(self.items) == 0

    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def available_inventory(self, product):
        """How many more units of ``product`` this session can still add."""
        reserved = self.reservations.get(str(product.id), 0)
        return max(0, product.inventory - reserved)

    def line_items(self):
        """Line items in the order they were first added."""
        return sorted(self.items, key=lambda i: i.added_at or self.last_updated)

    def summary(self):
        return {
            "items": [
                {
                    "product_id": str(item.product_id),
                    "name": item.name,
                    "price": item.price,
                    "image": item.image,
                    "quantity": item.quantity,
                    "subtotal": item.subtotal,
                }
                for item in self.line_items()
            ],
            "total_items": self.total_items,
            "total_price": self.total_price,
            "is_empty": self.is_empty,
            "last_updated": self.last_updated,
        }

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity=1):
        """Add ``quantity`` of ``product``, accumulating onto an existing line."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        product_id = str(product.id)
        existing = self.find_item(product_id)

        if existing:
            existing.quantity += quantity
            existing.subtotal = round2(existing.price * existing.quantity)
            new_quantity = existing.quantity
        else:
            self.add_items(
                CartLineItem(
                    product_id=product_id,
                    name=product.name,
                    price=product.price,
                    image=product.primary_image,
                    quantity=quantity,
                    subtotal=round2(product.price * quantity),
                    added_at=datetime.now(UTC),
                )
            )
            new_quantity = quantity

        self._reserve(product_id, new_quantity)
        self.recompute_totals()

        self.raise_(
            CartItemAdded(
                cart_id=self.session_id,
                product_id=product_id,
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )

    def update_item(self, product_id, new_quantity):
        """Set a line's quantity; zero or less removes the line."""
        item = self.find_item(product_id)
        if item is None:
            raise ItemNotFound(product_id)

        if new_quantity <= 0:
            self._drop(item)
            return

        previous_quantity = item.quantity
        item.quantity = new_quantity
        item.subtotal = round2(item.price * new_quantity)
        self._reserve(product_id, new_quantity)
        self.recompute_totals()

        self.raise_(
            CartItemUpdated(
                cart_id=self.session_id,
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.find_item(product_id)
        if item is None:
            raise ItemNotFound(product_id)

        self._drop(item)

    def clear(self):
        items_cleared = len(self.items)
        for item in list(self.items):
            self.remove_items(item)

        self.reserved_inventory = json.dumps({})
        self.total_items = 0
        self.total_price = 0.0
        self.last_updated = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=self.session_id, items_cleared=items_cleared))

    def recompute_totals(self):
        """Derive ``total_items`` and ``total_price`` from the line items."""
        self.total_items = sum(item.quantity for item in self.items)
        self.total_price = round2(sum(item.price * item.quantity for item in self.items))
        self.last_updated = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Reservation bookkeeping
    # -------------------------------------------------------------------
    def _reserve(self, product_id, quantity):
        reservations = self.reservations
        reservations[str(product_id)] = quantity
        self.reserved_inventory = json.dumps(reservations)

    def _release(self, product_id):
        reservations = self.reservations
        reservations.pop(str(product_id), None)
        self.reserved_inventory = json.dumps(reservations)

    def _drop(self, item):
        product_id = str(item.product_id)
        self.remove_items(item)
        self._release(product_id)
        self.recompute_totals()

        self.raise_(CartItemRemoved(cart_id=self.session_id, product_id=product_id))

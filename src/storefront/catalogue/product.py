"""Product aggregate — the catalogue's unit of sale.

Products are read by the cart and checkout and only ever mutated through
inventory changes: a conditional decrement when an order is placed, and
restocking.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.catalogue.events import InventoryDecremented, ProductAdded, ProductRestocked
from storefront.domain import storefront
from storefront.exceptions import InventoryConflict

PLACEHOLDER_IMAGE = "/images/placeholder.svg"


class ProductCategory(Enum):
    DECK_BOXES = "deck-boxes"
    TOKENS = "tokens"
    ACCESSORIES = "accessories"
    CUSTOM = "custom"


@storefront.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    category: String(required=True, choices=ProductCategory)
    images: Text()  # JSON array of image URLs, primary first
    features: Text()  # JSON array of feature bullet points
    inventory: Integer(default=0, min_value=0)
    in_stock: Boolean(default=False)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def in_stock_flag_must_follow_inventory(self):
        if self.in_stock != (self.inventory > 0):
            raise ValidationError({"in_stock": ["In-stock flag must reflect remaining inventory"]})

    @classmethod
    def create(cls, name, price, category, inventory=0, description=None, images=None, features=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            category=category,
            images=json.dumps(list(images or [])),
            features=json.dumps(list(features or [])),
            inventory=inventory,
            in_stock=inventory > 0,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                category=product.category,
                price=price,
                inventory=inventory,
                created_at=now,
            )
        )
        return product

    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    @property
    def feature_list(self):
        return json.loads(self.features) if self.features else []

    @property
    def primary_image(self):
        urls = self.image_urls
        return urls[0] if urls else PLACEHOLDER_IMAGE

    def decrement_inventory(self, quantity):
        """Take ``quantity`` units out of stock, refusing to go below zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
        if self.inventory < quantity:
            raise InventoryConflict(self.id, available=self.inventory, requested=quantity)

        with atomic_change(self):
            self.inventory = self.inventory - quantity
            self.in_stock = self.inventory > 0
        self.updated_at = datetime.now(UTC)

        self.raise_(
            InventoryDecremented(
                product_id=self.id,
                quantity=quantity,
                remaining=self.inventory,
            )
        )

    def restock(self, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        with atomic_change(self):
            self.inventory = self.inventory + quantity
            self.in_stock = True
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductRestocked(
                product_id=self.id,
                quantity=quantity,
                inventory=self.inventory,
            )
        )


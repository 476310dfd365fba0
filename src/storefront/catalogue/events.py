"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    inventory: Integer(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class InventoryDecremented:
    """Stock was taken out of a product's inventory by a placed order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@storefront.event(part_of="Product")
class ProductRestocked:
    """Stock was added back to a product's inventory."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    inventory: Integer(required=True)

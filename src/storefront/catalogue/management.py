"""Catalogue management commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(required=True, max_length=50)
    inventory = Integer(default=0, min_value=0)
    images = Text()  # JSON: list of image URLs
    features = Text()  # JSON: list of strings


@storefront.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        images = json.loads(command.images) if command.images else []
        features = json.loads(command.features) if command.features else []

        product = Product.create(
            name=command.name,
            price=command.price,
            category=command.category,
            inventory=command.inventory or 0,
            description=command.description,
            images=images,
            features=features,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)

"""Sample catalogue loaded into an empty store at startup."""

import json

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.management import AddProduct
from storefront.catalogue.product import Product

logger = structlog.get_logger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Premium Deck Box - Forest Theme",
        "description": (
            "A beautifully crafted deck box with forest-inspired artwork. "
            "Perfect for protecting your trading cards with style and durability."
        ),
        "price": 29.99,
        "category": "deck-boxes",
        "inventory": 15,
        "features": ["Holds 100+ cards", "Magnetic closure", "Premium materials", "Custom artwork"],
    },
    {
        "name": "Metal Life Counters Set",
        "description": (
            "Durable metal life counter tokens for Magic: The Gathering and other card games. "
            "Precision crafted and built to last."
        ),
        "price": 12.99,
        "category": "tokens",
        "inventory": 50,
        "features": ["Set of 10 counters", "Engraved numbers", "Anti-tarnish coating", "Multiple denominations"],
    },
    {
        "name": "Card Sleeves - Ultra Pro Premium",
        "description": "High-quality protective sleeves for your valuable cards. Crystal clear with superior durability.",
        "price": 8.99,
        "category": "accessories",
        "inventory": 0,
        "features": ["Pack of 100 sleeves", "Crystal clear finish", "Acid-free materials", "Tournament legal"],
    },
    {
        "name": "Custom Dice Tower - Dragon Theme",
        "description": (
            "Hand-crafted wooden dice tower with intricate dragon carvings. "
            "Perfect for any tabletop gaming session."
        ),
        "price": 45.99,
        "category": "accessories",
        "inventory": 8,
        "features": ["Solid wood construction", "Hand-carved details", "Felt-lined interior", "Removable dice tray"],
    },
]


def seed_catalogue(products=None) -> list[str]:
    """Add the sample products when the catalogue is empty.

    Returns the ids of the products created; an already populated catalogue
    is left alone and an empty list is returned.
    """
    if current_domain.repository_for(Product).count() > 0:
        logger.info("Catalogue already populated, skipping seed")
        return []

    product_ids = []
    for data in products if products is not None else SAMPLE_PRODUCTS:
        command = AddProduct(
            name=data["name"],
            description=data.get("description"),
            price=data["price"],
            category=data["category"],
            inventory=data.get("inventory", 0),
            images=json.dumps(data.get("images", [])),
            features=json.dumps(data.get("features", [])),
        )
        product_ids.append(current_domain.process(command, asynchronous=False))

    logger.info("Catalogue seeded", product_count=len(product_ids))
    return product_ids

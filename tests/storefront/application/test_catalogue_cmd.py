"""Application tests for catalogue commands, queries and seeding."""

import json

from protean import current_domain
from storefront.catalogue.management import AddProduct, RestockProduct
from storefront.catalogue.product import Product
from storefront.catalogue.repository import find_product
from storefront.catalogue.seed import SAMPLE_PRODUCTS, seed_catalogue


def _add_product(**overrides):
    defaults = {
        "name": "Custom Engraved Dice Box",
        "price": 49.99,
        "category": "custom",
        "inventory": 8,
    }
    defaults.update(overrides)
    return current_domain.process(AddProduct(**defaults), asynchronous=False)


class TestAddProductCommand:
    def test_add_product_persists(self):
        product_id = _add_product(
            images=json.dumps(["/images/dice-box.jpg"]),
            features=json.dumps(["Walnut", "Engraved lid"]),
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Custom Engraved Dice Box"
        assert product.inventory == 8
        assert product.in_stock is True
        assert product.primary_image == "/images/dice-box.jpg"
        assert product.feature_list == ["Walnut", "Engraved lid"]


class TestRestockProductCommand:
    def test_restock_persists(self):
        product_id = _add_product(inventory=0)

        current_domain.process(RestockProduct(product_id=product_id, quantity=6), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.inventory == 6
        assert product.in_stock is True


class TestCatalogueQueries:
    def test_find_by_category_sorted_by_name(self):
        _add_product(name="Zebra Tokens", category="tokens")
        _add_product(name="Amber Tokens", category="tokens")
        _add_product(name="Dice Tray", category="accessories")

        products = current_domain.repository_for(Product).find_by_category("tokens")

        assert [p.name for p in products] == ["Amber Tokens", "Zebra Tokens"]

    def test_list_all(self):
        _add_product(name="B")
        _add_product(name="A")
        assert [p.name for p in current_domain.repository_for(Product).list_all()] == ["A", "B"]

    def test_find_product_returns_none_for_missing(self):
        assert find_product("does-not-exist") is None

    def test_find_product_returns_latest_state(self):
        product_id = _add_product(inventory=3)
        current_domain.process(RestockProduct(product_id=product_id, quantity=2), asynchronous=False)
        assert find_product(product_id).inventory == 5


class TestSeedCatalogue:
    def test_seeds_empty_catalogue(self):
        ids = seed_catalogue()

        assert len(ids) == len(SAMPLE_PRODUCTS)
        assert current_domain.repository_for(Product).count() == len(SAMPLE_PRODUCTS)

    def test_does_nothing_when_catalogue_has_products(self):
        _add_product()
        assert seed_catalogue() == []
        assert current_domain.repository_for(Product).count() == 1

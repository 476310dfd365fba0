"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from pytest_bdd import given, parsers


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Products in play, keyed by name."""
    return {}


@pytest.fixture()
def error():
    """Container for a captured failure."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {inventory:d} in stock'))
def a_product(products, name, price, inventory):
    from storefront.catalogue.product import Product

    products[name] = Product.create(name=name, price=price, category="accessories", inventory=inventory)


@given(parsers.cfparse('the catalogue has "{name}" priced {price:f} with {inventory:d} in stock'))
def catalogue_product(products, make_product, name, price, inventory):
    products[name] = make_product(name=name, price=price, inventory=inventory, category="accessories")

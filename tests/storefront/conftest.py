import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Reset every provider and the event store after each test."""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()


@pytest.fixture()
def make_product():
    """Create and persist a product. Returns the stored aggregate."""

    def _make(name="Premium Deck Box", price=29.99, inventory=10, category="deck-boxes", **kwargs):
        from protean import current_domain
        from storefront.catalogue.product import Product

        product = Product.create(name=name, price=price, category=category, inventory=inventory, **kwargs)
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make

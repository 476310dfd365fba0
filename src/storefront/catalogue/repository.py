"""Repository for the Product aggregate and the catalogue lookup used by checkout."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    """Catalogue queries on top of the standard CRUD operations."""

    def find_by_category(self, category: str) -> list[Product]:
        return self._dao.query.filter(category=category).order_by("name").all().items

    def list_all(self) -> list[Product]:
        return self._dao.query.order_by("name").all().items

    def count(self) -> int:
        return self._dao.query.all().total


def find_product(product_id) -> Product | None:
    """Catalogue lookup: the latest committed product, or ``None`` if it is gone."""
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        return None

"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.order.order import Order


def _sequence_of(order_number: str) -> int:
    return int(order_number.rsplit("-", 1)[1])


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def highest_sequence_for(self, prefix: str) -> int:
        """Highest sequence already used by order numbers starting with ``prefix``.

        ``prefix`` is the ``WB-YYYYMMDD-`` part of the number. Returns 0 when no
        order carries it. Sequences are compared as integers since a busy day
        can run past four digits.
        """
        query = self._dao.query.filter(order_number__contains=prefix)
        total = query.all().total
        if not total:
            return 0
        orders = query.limit(total).all().items
        return max((_sequence_of(order.order_number) for order in orders), default=0)

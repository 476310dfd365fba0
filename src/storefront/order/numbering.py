"""Order allocation — date-scoped order numbers and order persistence.

Order numbers look like ``WB-20250115-0001``: the shop prefix, the placement
date and a four digit sequence that restarts at 0001 every day. The sequence
lives in a per-day ``OrderSequence`` counter that is advanced and saved in
the same unit of work as the order it numbers. A day without a counter is
seeded from the highest order number already stored for that day.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.config import settings
from storefront.domain import storefront
from storefront.exceptions import DuplicateOrderNumber
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.aggregate
class OrderSequence:
    """Last order sequence handed out for one calendar day."""

    day = Identifier(identifier=True)  # YYYYMMDD
    last_sequence = Integer(default=0, min_value=0)

    def advance(self) -> int:
        self.last_sequence = (self.last_sequence or 0) + 1
        return self.last_sequence


def _day_key(on_date=None) -> str:
    return (on_date or datetime.now(UTC)).strftime("%Y%m%d")


def format_order_number(day, sequence: int) -> str:
    """``day`` is a date, a datetime or an already formatted ``YYYYMMDD`` string."""
    if not isinstance(day, str):
        day = day.strftime("%Y%m%d")
    return f"{settings.order_number_prefix}-{day}-{sequence:04d}"


def _load_sequence(day: str) -> OrderSequence:
    try:
        return current_domain.repository_for(OrderSequence).get(day)
    except ObjectNotFoundError:
        prefix = f"{settings.order_number_prefix}-{day}-"
        highest = current_domain.repository_for(Order).highest_sequence_for(prefix)
        return OrderSequence(day=day, last_sequence=highest)


def _take_next(sequence: OrderSequence) -> str:
    number = format_order_number(sequence.day, sequence.advance())
    current_domain.repository_for(OrderSequence).add(sequence)
    return number


def generate_order_number(on_date=None) -> str:
    """Advance the counter for ``on_date`` (today by default) and return the new number."""
    return _take_next(_load_sequence(_day_key(on_date)))


def create_order(order_number: str, **order_data) -> Order:
    """Persist a new order under ``order_number``.

    Raises:
        DuplicateOrderNumber: an order with that number already exists.
    """
    repo = current_domain.repository_for(Order)
    if repo.find_by_order_number(order_number) is not None:
        raise DuplicateOrderNumber(order_number)

    order = Order.create(order_number=order_number, **order_data)
    repo.add(order)
    return order


def allocate_order(on_date=None, **order_data) -> Order:
    """Number and persist an order, retrying on order number collisions.

    Gives up after ``settings.max_allocation_attempts`` collisions and
    re-raises the last ``DuplicateOrderNumber``.
    """
    sequence = _load_sequence(_day_key(on_date))
    attempts = settings.max_allocation_attempts

    for attempt in range(1, attempts + 1):
        order_number = _take_next(sequence)
        try:
            order = create_order(order_number, **order_data)
        except DuplicateOrderNumber as exc:
            logger.warning(
                "Order number collision",
                order_number=order_number,
                attempt=attempt,
                max_attempts=attempts,
            )
            last_error = exc
            continue

        logger.info("Order number allocated", order_number=order_number, attempt=attempt)
        return order

    raise last_error

"""Per-user state tracking for Locust load test scenarios.

Each Locust user keeps its own session cookie, so carts never leak between
simulated shoppers.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one simulated shopper's browsing and checkout."""

    product_ids: list[str] = field(default_factory=list)
    signed_in: bool = False
    cart_items: int = 0
    order_id: str | None = None
    order_number: str | None = None

"""Order aggregate — the immutable record of a checkout.

Everything captured at checkout (customer, shipping address, line items and
totals) is a copy. Later price or inventory changes in the catalogue never
reach a placed order. Only ``status`` and ``payment_status`` move afterwards,
along the transition maps below.

Status machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PROCESSING)

Payment machine:
    PENDING → PAID → REFUNDED
    PENDING → FAILED → PAID
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusChanged

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"
ZIP_CODE_PATTERN = r"^\d{5}(-\d{4})?$"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Customer:
    """Contact details of the shopper, captured at checkout."""

    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=17)

    @invariant.post
    def email_must_have_a_domain(self):
        local_part, _, domain_part = (self.email or "").partition("@")
        if not local_part or "." not in domain_part or "@" in domain_part:
            raise ValidationError({"email": ["Please enter a valid email address"]})

    @invariant.post
    def phone_must_be_dialable(self):
        if not re.match(PHONE_PATTERN, self.phone or ""):
            raise ValidationError({"phone": ["Please enter a valid phone number"]})


@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to. Never changes once the order is placed."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=10)
    country = String(max_length=100, default="United States")

    @invariant.post
    def zip_code_must_be_valid(self):
        if not re.match(ZIP_CODE_PATTERN, self.zip_code or ""):
            raise ValidationError({"zip_code": ["Please enter a valid ZIP code"]})


@storefront.value_object(part_of="Order")
class OrderTotals:
    """Money summary locked at checkout."""

    subtotal = Float(required=True, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)

    @invariant.post
    def total_must_add_up(self):
        expected = round(self.subtotal + (self.tax or 0.0) + (self.shipping or 0.0), 2)
        if abs(self.total - expected) > 0.005:
            raise ValidationError({"total": [f"Total {self.total} does not match its parts ({expected})"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of a cart line at purchase time."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_image = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=32)
    session_id = Identifier()
    account_id = Identifier()
    customer = ValueObject(Customer)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderItem)
    totals = ValueObject(OrderTotals)
    status = String(choices=OrderStatus, default=OrderStatus.CONFIRMED.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    notes = String(max_length=500)
    order_date = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number,
        customer,
        shipping_address,
        items_data,
        totals,
        notes=None,
        session_id=None,
        account_id=None,
    ):
        """Create a placed order.

        Args:
            order_number: Allocated ``WB-YYYYMMDD-NNNN`` number.
            customer: Dict with name, email, phone.
            shipping_address: Dict with street, city, state, zip_code and optional country.
            items_data: List of dicts with product_id, product_name, product_image,
                        price, quantity, subtotal.
            totals: Dict with subtotal, tax, shipping, total.
            account_id: Customer account that placed the order, if any.
        """
        now = datetime.now(UTC)
        address = {key: value for key, value in shipping_address.items() if value is not None}

        order = cls(
            order_number=order_number,
            session_id=session_id,
            account_id=account_id,
            customer=Customer(**customer),
            shipping_address=ShippingAddress(**address),
            totals=OrderTotals(**totals),
            status=OrderStatus.CONFIRMED.value,
            payment_status=PaymentStatus.PENDING.value,
            notes=notes or "",
            order_date=now,
            updated_at=now,
        )
        for item in items_data:
            order.add_items(OrderItem(**item))

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order_number,
                customer_email=order.customer.email,
                item_count=order.total_items,
                total=order.totals.total,
                order_date=now,
            )
        )
        return order

    @property
    def total_items(self):
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        current = OrderStatus(self.status)
        target = OrderStatus(new_status)
        if target not in _STATUS_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        self.status = target.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=current.value,
                new_status=target.value,
            )
        )

    def change_payment_status(self, new_status):
        current = PaymentStatus(self.payment_status)
        target = PaymentStatus(new_status)
        if target not in _PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot transition from {current.value} to {target.value}"]}
            )

        self.payment_status = target.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentStatusChanged(
                order_id=self.id,
                previous_status=current.value,
                new_status=target.value,
            )
        )

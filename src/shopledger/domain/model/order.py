"""Order aggregate — the core of the ledger.

The Order is an aggregate root that owns its line items. Line items are
frozen snapshots of the catalog at checkout time and are never re-resolved
against the current catalog.

One authoritative status field drives fulfillment. The coarser shipping
status shown to customers is derived from it, never stored separately.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shopledger.domain.exceptions import InvalidStateTransition, ValidationError
from shopledger.domain.model.value_objects import Money, Quantity

GUEST = "guest"
ORDER_NUMBER_PREFIX = "ZEN"
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(value: str) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown order status '{value}'") from exc


class PaymentMethod(Enum):
    COD = "cod"
    INSTAPAY = "instapay"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


_CANCELLABLE = frozenset({
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.OUT_FOR_DELIVERY,
})

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.COMPLETED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
}

# Shipping status as shown to the customer, derived from OrderStatus.
_SHIPPING_VIEW = {
    OrderStatus.PENDING: "processing",
    OrderStatus.CONFIRMED: "processing",
    OrderStatus.PROCESSING: "processing",
    OrderStatus.SHIPPED: "shipped",
    OrderStatus.OUT_FOR_DELIVERY: "out_for_delivery",
    OrderStatus.DELIVERED: "delivered",
    OrderStatus.COMPLETED: "delivered",
}


def format_order_number(sequence: int) -> str:
    """Render a sequence number as 'ZEN' + six or more base-36 digits."""
    if sequence <= 0:
        raise ValidationError("Order sequence must be positive")
    digits = ""
    n = sequence
    while n:
        n, rem = divmod(n, 36)
        digits = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"[rem] + digits
    return f"{ORDER_NUMBER_PREFIX}{digits.rjust(6, '0')}"


def normalize_order_number(raw: str) -> str:
    """Accept 'ZEN000123', '#zen000123' or 'Order #ZEN000123'."""
    value = raw.strip()
    if value.lower().startswith("order"):
        value = value[5:].strip()
    return value.lstrip("#").strip().upper()


@dataclass(frozen=True)
class OrderLineItem:
    """Snapshot of a product at order-creation time (price lock)."""

    product_id: str
    name: str
    unit_price: Money
    quantity: Quantity
    size: str | None = None
    color: str | None = None
    image: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class ContactInfo:
    email: str
    name: str = ""
    phone: str = ""

    def __post_init__(self) -> None:
        if not self.email or not _EMAIL.match(self.email.strip()):
            raise ValidationError("A valid contact email is required")

    def matches_email(self, email: str) -> bool:
        return self.email.strip().lower() == email.strip().lower()


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str | None
    user_id: str
    contact: ContactInfo
    items: list[OrderLineItem]
    subtotal: Money
    shipping: Money
    discount: Money
    total: Money
    payment_method: PaymentMethod = PaymentMethod.COD
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: OrderStatus = OrderStatus.PENDING
    coupon_code: str | None = None
    payment_screenshot: str | None = None
    shipping_address: dict = field(default_factory=dict)
    tracking_number: str | None = None
    notes: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        contact: ContactInfo,
        items: list[OrderLineItem],
        shipping: Money,
        discount: Money | None = None,
        user_id: str | None = None,
        payment_method: PaymentMethod = PaymentMethod.COD,
        coupon_code: str | None = None,
        payment_screenshot: str | None = None,
        shipping_address: dict | None = None,
        notes: str = "",
        expected_subtotal: Money | None = None,
        expected_total: Money | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants.

        ``expected_subtotal`` and ``expected_total`` are what the client
        computed; when given they must agree with the ledger's own figures.
        """
        if not items:
            raise ValidationError("Order must contain at least one item")
        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        subtotal = Money.zero()
        for item in items:
            subtotal = subtotal + item.line_total
        if expected_subtotal is not None and expected_subtotal != subtotal:
            raise ValidationError(
                f"Subtotal {expected_subtotal} does not match line items ({subtotal})"
            )

        discount = discount or Money.zero()
        if discount > subtotal:
            raise ValidationError("Discount cannot exceed the subtotal")
        total = subtotal + shipping - discount
        if expected_total is not None and expected_total != total:
            raise ValidationError(
                f"Total {expected_total} does not equal subtotal + shipping - discount ({total})"
            )

        return Order(
            id=None,
            order_number=None,
            user_id=(user_id or "").strip() or GUEST,
            contact=contact,
            items=list(items),
            subtotal=subtotal,
            shipping=shipping,
            discount=discount,
            total=total,
            payment_method=payment_method,
            coupon_code=coupon_code,
            payment_screenshot=payment_screenshot,
            shipping_address=dict(shipping_address or {}),
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        if new_status == OrderStatus.CANCELLED:
            return self.status in _CANCELLABLE
        return new_status in TRANSITIONS[self.status]

    def advance_to(self, new_status: OrderStatus, tracking_number: str | None = None) -> None:
        """Move along the fulfillment sequence, or cancel a pre-delivery order."""
        if not self.can_transition_to(new_status):
            raise InvalidStateTransition(
                f"Cannot move order {self.order_number or self.id} "
                f"from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
        if tracking_number:
            self.tracking_number = tracking_number.strip()
        self.touch()

    def cancel(self) -> None:
        self.advance_to(OrderStatus.CANCELLED)

    def update_payment_status(self, new_status: PaymentStatus) -> None:
        if new_status not in PAYMENT_TRANSITIONS[self.payment_status]:
            raise InvalidStateTransition(
                f"Cannot move payment of order {self.order_number or self.id} "
                f"from {self.payment_status.value} to {new_status.value}"
            )
        self.payment_status = new_status
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    # --- Computed properties --------------------------------------------------

    @property
    def is_guest(self) -> bool:
        return self.user_id == GUEST

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self.status] and self.status not in _CANCELLABLE

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def shipping_status(self) -> str | None:
        return _SHIPPING_VIEW.get(self.status)

    @property
    def stock_quantities(self) -> dict[str, int]:
        """Units per product id across all line items."""
        result: dict[str, int] = {}
        for item in self.items:
            result[item.product_id] = result.get(item.product_id, 0) + item.quantity.value
        return result

"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI/HTTP adapters and the application layer
without exposing domain internals to the outside world. Monetary amounts
travel as fixed two-decimal strings ("170.00").
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shopledger.domain.model.coupon import Coupon
from shopledger.domain.model.inventory_alert import InventoryAlert, LowStockEntry
from shopledger.domain.model.order import Order
from shopledger.domain.model.review import Review
from shopledger.domain.model.value_objects import Money
from shopledger.domain.model.wishlist import Wishlist


def amount(money: Money | None) -> str | None:
    return None if money is None else f"{money.amount:.2f}"


def timestamp(value) -> str | None:
    return None if value is None else value.isoformat()


# --- Orders -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one cart line (product id + quantity + chosen variant)."""

    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None


@dataclass(frozen=True)
class OrderInput:
    """Input: everything the checkout form submits."""

    email: str
    items: list[OrderItemSpec]
    name: str = ""
    phone: str = ""
    user_id: str | None = None
    shipping: str = "0"
    subtotal: str | None = None
    discount: str | None = None
    total: str | None = None
    coupon_code: str | None = None
    payment_method: str = "cod"
    payment_screenshot: str | None = None
    shipping_address: dict = field(default_factory=dict)
    notes: str = ""


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    name: str
    quantity: int
    unit_price: str
    line_total: str
    size: str | None
    color: str | None
    image: str | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order."""

    id: int
    order_number: str
    user_id: str
    email: str
    name: str
    phone: str
    status: str
    shipping_status: str | None
    payment_method: str
    payment_status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    shipping: str
    discount: str
    total: str
    coupon_code: str | None
    tracking_number: str | None
    shipping_address: dict
    notes: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class OrderPlacementDTO:
    """Output of checkout. ``warnings`` lists notifications that failed."""

    id: int
    order_number: str
    total: str
    warnings: list[str]


@dataclass(frozen=True)
class StatusUpdateDTO:
    order_id: int
    order_number: str
    status: str
    email: str
    notification_sent: bool
    warning: str | None = None


@dataclass(frozen=True)
class TimelineStepDTO:
    key: str
    label: str
    description: str
    completed: bool
    current: bool
    timestamp: str | None


@dataclass(frozen=True)
class OrderTrackingDTO:
    order_number: str
    status: str
    status_label: str
    is_cancelled: bool
    timeline: list[TimelineStepDTO]
    tracking_number: str | None
    items: list[OrderLineItemDTO]
    shipping_address: dict
    subtotal: str
    shipping: str
    discount: str
    total: str
    payment_method: str
    payment_status: str
    order_date: str


def to_line_item_dtos(order: Order) -> list[OrderLineItemDTO]:
    return [
        OrderLineItemDTO(
            product_id=item.product_id,
            name=item.name,
            quantity=item.quantity.value,
            unit_price=amount(item.unit_price),
            line_total=amount(item.line_total),
            size=item.size,
            color=item.color,
            image=item.image,
        )
        for item in order.items
    ]


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,  # type: ignore[arg-type]
        user_id=order.user_id,
        email=order.contact.email,
        name=order.contact.name,
        phone=order.contact.phone,
        status=order.status.value,
        shipping_status=order.shipping_status,
        payment_method=order.payment_method.value,
        payment_status=order.payment_status.value,
        items=to_line_item_dtos(order),
        subtotal=amount(order.subtotal),
        shipping=amount(order.shipping),
        discount=amount(order.discount),
        total=amount(order.total),
        coupon_code=order.coupon_code,
        tracking_number=order.tracking_number,
        shipping_address=dict(order.shipping_address),
        notes=order.notes,
        created_at=timestamp(order.created_at),
        updated_at=timestamp(order.updated_at),
    )


# --- Coupons ------------------------------------------------------------------


@dataclass(frozen=True)
class CouponDTO:
    id: str
    code: str
    type: str
    value: str
    min_order_amount: str
    max_uses: int
    used_count: int
    expires_at: str | None
    is_active: bool
    created_at: str


@dataclass(frozen=True)
class CouponValidationDTO:
    valid: bool
    code: str | None = None
    type: str | None = None
    value: str | None = None
    discount: str | None = None
    error: str | None = None


def to_coupon_dto(coupon: Coupon) -> CouponDTO:
    return CouponDTO(
        id=coupon.id,  # type: ignore[arg-type]
        code=coupon.code,
        type=coupon.type.value,
        value=str(coupon.value),
        min_order_amount=amount(coupon.min_order_amount),
        max_uses=coupon.max_uses,
        used_count=coupon.used_count,
        expires_at=timestamp(coupon.expires_at),
        is_active=coupon.is_active,
        created_at=timestamp(coupon.created_at),
    )


# --- Reviews ------------------------------------------------------------------


@dataclass(frozen=True)
class ReviewDTO:
    id: str
    product_id: str
    user_id: str
    user_name: str
    rating: int
    title: str
    comment: str
    status: str
    helpful: int
    created_at: str


@dataclass(frozen=True)
class ReviewListDTO:
    reviews: list[ReviewDTO]
    average_rating: str
    total_reviews: int


def to_review_dto(review: Review) -> ReviewDTO:
    return ReviewDTO(
        id=review.id,  # type: ignore[arg-type]
        product_id=review.product_id,
        user_id=review.user_id,
        user_name=review.user_name,
        rating=review.rating,
        title=review.title,
        comment=review.comment,
        status=review.status.value,
        helpful=review.helpful,
        created_at=timestamp(review.created_at),
    )


# --- Inventory ----------------------------------------------------------------


@dataclass(frozen=True)
class LowStockReportDTO:
    products: list[LowStockEntry]
    alert_id: str | None
    message: str


@dataclass(frozen=True)
class InventoryAlertDTO:
    id: str
    products: list[LowStockEntry]
    threshold: int
    sent_at: str


def to_alert_dto(alert: InventoryAlert) -> InventoryAlertDTO:
    return InventoryAlertDTO(
        id=alert.id,  # type: ignore[arg-type]
        products=list(alert.products),
        threshold=alert.threshold,
        sent_at=timestamp(alert.sent_at),
    )


# --- Wishlist -----------------------------------------------------------------


@dataclass(frozen=True)
class WishlistItemDTO:
    product_id: str
    name: str
    slug: str
    price: str
    image: str | None
    added_at: str


def to_wishlist_dtos(wishlist: Wishlist | None) -> list[WishlistItemDTO]:
    if wishlist is None:
        return []
    return [
        WishlistItemDTO(
            product_id=item.product_id,
            name=item.name,
            slug=item.slug,
            price=amount(item.price),
            image=item.image,
            added_at=timestamp(item.added_at),
        )
        for item in wishlist.items
    ]

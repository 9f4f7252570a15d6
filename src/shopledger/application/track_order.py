"""Application service: Track Order use case (customer-facing query).

Orders are looked up by their human-readable number. When an email is
given it must match the order's contact email; a mismatch looks exactly
like a missing order so numbers cannot be used to probe other customers'
orders.
"""

from __future__ import annotations

from shopledger.application.dto import (
    OrderTrackingDTO,
    TimelineStepDTO,
    amount,
    timestamp,
    to_line_item_dtos,
)
from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.model.order import Order, OrderStatus, normalize_order_number
from shopledger.domain.repository.order_repository import OrderRepository

TIMELINE = [
    ("pending", "Order Placed", "Your order has been received"),
    ("processing", "Processing", "We are preparing your order"),
    ("shipped", "Shipped", "Your order is on its way"),
    ("out_for_delivery", "Out for Delivery", "Your order will arrive today"),
    ("delivered", "Delivered", "Your order has been delivered"),
]

STEP_INDEX = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 0,
    OrderStatus.PROCESSING: 1,
    OrderStatus.SHIPPED: 2,
    OrderStatus.OUT_FOR_DELIVERY: 3,
    OrderStatus.DELIVERED: 4,
    OrderStatus.COMPLETED: 4,
}


class TrackOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_number: str, email: str | None = None) -> OrderTrackingDTO:
        if not order_number or not order_number.strip():
            raise ValidationError("Order number is required")

        order = self._order_repo.get_by_order_number(normalize_order_number(order_number))
        if order is None:
            raise NotFoundError("Order not found")
        if email and not order.contact.matches_email(email):
            raise NotFoundError("Order not found")

        return self._to_dto(order)

    @staticmethod
    def _timeline(order: Order) -> list[TimelineStepDTO]:
        # A cancelled order only keeps "Order Placed" as completed.
        current = STEP_INDEX.get(order.status, 0)
        steps = []
        for index, (key, label, description) in enumerate(TIMELINE):
            if order.is_cancelled:
                completed, is_current = index == 0, False
            else:
                completed, is_current = index <= current, index == current
            steps.append(TimelineStepDTO(
                key=key,
                label=label,
                description=description,
                completed=completed,
                current=is_current,
                timestamp=timestamp(order.created_at) if index == 0 else None,
            ))
        return steps

    def _to_dto(self, order: Order) -> OrderTrackingDTO:
        if order.is_cancelled:
            label = "Cancelled"
        else:
            label = TIMELINE[STEP_INDEX[order.status]][1]
        return OrderTrackingDTO(
            order_number=order.order_number,  # type: ignore[arg-type]
            status=order.status.value,
            status_label=label,
            is_cancelled=order.is_cancelled,
            timeline=self._timeline(order),
            tracking_number=order.tracking_number,
            items=to_line_item_dtos(order),
            shipping_address=dict(order.shipping_address),
            subtotal=amount(order.subtotal),
            shipping=amount(order.shipping),
            discount=amount(order.discount),
            total=amount(order.total),
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            order_date=timestamp(order.created_at),
        )

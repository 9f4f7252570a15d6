"""Application service: Advance Order Status use case.

Validates the move against the order state machine, persists it, then
tells the customer. The update and the notification are independent: a
failed email never rolls back the status change, it is reported as a
partial success instead.
"""

from __future__ import annotations

import logging

from shopledger.application.dto import StatusUpdateDTO
from shopledger.domain.exceptions import (
    DependencyError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from shopledger.domain.model.order import Order, OrderStatus
from shopledger.domain.repository.order_repository import OrderRepository
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.service.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

NOTIFICATION_FAILED = "Order updated but failed to send notification email"

# Statuses the shipping-notification flow may set, and the order status each maps to.
SHIPPING_STATUSES = {
    "processing": OrderStatus.PROCESSING,
    "shipped": OrderStatus.SHIPPED,
    "out_for_delivery": OrderStatus.OUT_FOR_DELIVERY,
    "delivered": OrderStatus.COMPLETED,
}


def status_moved(order: Order) -> InvalidStateTransition:
    return InvalidStateTransition(
        f"Order {order.order_number} changed status while it was being updated; "
        "reload it and try again"
    )


def restock_cancelled(product_repo: ProductRepository, order: Order) -> None:
    """Return a just-cancelled order's units to stock.

    The cancellation is already stored, so a failed restock is logged with
    the quantities needed to reconcile by hand before it propagates.
    """
    try:
        product_repo.restock(order.stock_quantities)
    except DependencyError:
        logger.error(
            "Order %s cancelled but restock failed; needs reconciliation: %s",
            order.order_number, order.stock_quantities,
        )
        raise


class AdvanceOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        notifier: NotificationDispatcher,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._notifier = notifier

    def handle(
        self,
        order_id: int,
        new_status: str | OrderStatus,
        tracking_number: str | None = None,
    ) -> StatusUpdateDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")

        status = new_status if isinstance(new_status, OrderStatus) else OrderStatus.parse(new_status)
        previous = order.status
        order.advance_to(status, tracking_number)
        if not self._order_repo.save_if_status(order, previous):
            raise status_moved(order)
        logger.info(
            "Order %s moved %s -> %s", order.order_number, previous.value, status.value
        )

        if order.is_cancelled:
            # Units go back on the shelf; coupon usage is never returned.
            restock_cancelled(self._product_repo, order)

        return self._notify(order)

    def _notify(self, order: Order) -> StatusUpdateDTO:
        try:
            self._notifier.shipping_update(order)
        except DependencyError as exc:
            logger.warning("Shipping update for %s not sent: %s", order.order_number, exc)
            return self._result(order, sent=False, warning=NOTIFICATION_FAILED)
        return self._result(order, sent=True)

    @staticmethod
    def _result(order: Order, sent: bool, warning: str | None = None) -> StatusUpdateDTO:
        return StatusUpdateDTO(
            order_id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,  # type: ignore[arg-type]
            status=order.status.value,
            email=order.contact.email,
            notification_sent=sent,
            warning=warning,
        )


class ShippingUpdateHandler:
    """The admin shipping screen: coarse shipping statuses only.

    ``delivered`` completes the order.
    """

    def __init__(self, advance: AdvanceOrderStatusHandler) -> None:
        self._advance = advance

    def handle(
        self,
        order_id: int,
        shipping_status: str,
        tracking_number: str | None = None,
    ) -> StatusUpdateDTO:
        status = SHIPPING_STATUSES.get(shipping_status)
        if status is None:
            raise ValidationError(
                "Invalid status. Must be: processing, shipped, out_for_delivery, or delivered"
            )
        return self._advance.handle(order_id, status, tracking_number)

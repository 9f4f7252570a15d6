"""Application service: Update Payment Status use case.

Payment is settled offline (cash on delivery or a manual InstaPay
transfer), so an admin reconciles it by hand.
"""

from __future__ import annotations

import logging

from shopledger.application.advance_order_status import status_moved
from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.model.order import PaymentStatus
from shopledger.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdatePaymentStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, payment_status: str) -> str:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")
        try:
            status = PaymentStatus(payment_status)
        except ValueError as exc:
            raise ValidationError(f"Unknown payment status '{payment_status}'") from exc

        order.update_payment_status(status)
        if not self._order_repo.save_if_status(order, order.status):
            raise status_moved(order)
        logger.info("Order %s payment is now %s", order.order_number, status.value)
        return status.value

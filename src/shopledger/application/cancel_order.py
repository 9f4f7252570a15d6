"""Application service: Cancel Order use case.

Cancelling puts every line item's units back in stock. Coupon usage
counted at checkout is kept.
"""

from __future__ import annotations

from shopledger.application.advance_order_status import AdvanceOrderStatusHandler
from shopledger.application.dto import StatusUpdateDTO
from shopledger.domain.model.order import OrderStatus


class CancelOrderHandler:

    def __init__(self, advance: AdvanceOrderStatusHandler) -> None:
        self._advance = advance

    def handle(self, order_id: int) -> StatusUpdateDTO:
        return self._advance.handle(order_id, OrderStatus.CANCELLED)

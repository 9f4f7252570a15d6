"""Domain service: Checkout Reservation.

Coordinates the cross-aggregate writes a checkout needs (product stock
and coupon usage) so that an order is only persisted once both have
been counted, and neither stays counted if the order is not persisted.

Each step is a single atomic repository operation. Steps that already
succeeded are compensated in reverse order when a later one fails.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from shopledger.domain.exceptions import CouponExhausted, NotFoundError
from shopledger.domain.model.order import Order
from shopledger.domain.repository.coupon_repository import CouponRepository
from shopledger.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CheckoutReservationService:

    def __init__(
        self,
        product_repo: ProductRepository,
        coupon_repo: CouponRepository,
    ) -> None:
        self._product_repo = product_repo
        self._coupon_repo = coupon_repo

    def reserve_for_order(self, order: Order) -> None:
        """Decrement stock for every line, then redeem the order's coupon.

        Raises InsufficientStock before anything is written if any line is
        short, and CouponExhausted (with the stock given back) if the coupon
        lost its last use to a concurrent checkout.
        """
        quantities = order.stock_quantities
        self._product_repo.reserve_stock(quantities)

        if order.coupon_code is None:
            return

        try:
            redeemed = self._coupon_repo.redeem(order.coupon_code, datetime.now(timezone.utc))
        except Exception:
            self._give_back_stock(quantities)
            raise
        if redeemed is None:
            self._give_back_stock(quantities)
            if self._coupon_repo.get_by_code(order.coupon_code) is None:
                raise NotFoundError(f"Coupon {order.coupon_code} not found")
            raise CouponExhausted(f"Coupon {order.coupon_code} can no longer be redeemed")

    def release_for_order(self, order: Order) -> None:
        """Undo ``reserve_for_order`` for an order that was never persisted."""
        self._give_back_stock(order.stock_quantities)
        if order.coupon_code is not None:
            logger.warning("Returning one use of coupon %s after failed checkout", order.coupon_code)
            self._coupon_repo.unredeem(order.coupon_code)

    def _give_back_stock(self, quantities: dict[str, int]) -> None:
        logger.warning("Compensating stock reservation: %s", quantities)
        self._product_repo.restock(quantities)

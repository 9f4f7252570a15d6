"""Application service: Create Coupon use case (admin)."""

from __future__ import annotations

import logging
from datetime import datetime

from shopledger.application.dto import CouponDTO, to_coupon_dto
from shopledger.domain.model.coupon import Coupon
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.coupon_repository import CouponRepository

logger = logging.getLogger(__name__)


class CreateCouponHandler:

    def __init__(self, coupon_repo: CouponRepository) -> None:
        self._coupon_repo = coupon_repo

    def handle(
        self,
        code: str,
        type: str,
        value: str,
        min_order_amount: str = "0",
        max_uses: int = 0,
        expires_at: datetime | None = None,
    ) -> CouponDTO:
        """Create a coupon; the code is stored upper-cased.

        Raises DuplicateCode if an active coupon already uses the code.
        """
        coupon = Coupon.create(
            code=code,
            type=type,
            value=value,
            min_order_amount=Money.of(min_order_amount or "0"),
            max_uses=max_uses or 0,
            expires_at=expires_at,
        )
        coupon = self._coupon_repo.add(coupon)
        logger.info("Coupon %s created (id=%s)", coupon.code, coupon.id)
        return to_coupon_dto(coupon)

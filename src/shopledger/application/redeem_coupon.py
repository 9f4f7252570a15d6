"""Application service: Redeem Coupon use case.

Checkout redeems coupons itself as part of the order reservation; this
handler serves the stand-alone "use" action.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from shopledger.application.dto import CouponDTO, to_coupon_dto
from shopledger.domain.exceptions import CouponExhausted, NotFoundError, ValidationError
from shopledger.domain.model.coupon import normalize_code
from shopledger.domain.repository.coupon_repository import CouponRepository

logger = logging.getLogger(__name__)


class RedeemCouponHandler:

    def __init__(self, coupon_repo: CouponRepository) -> None:
        self._coupon_repo = coupon_repo

    def handle(self, code: str) -> CouponDTO:
        if not code or not code.strip():
            raise ValidationError("Coupon code is required")
        code = normalize_code(code)

        coupon = self._coupon_repo.redeem(code, datetime.now(timezone.utc))
        if coupon is None:
            if self._coupon_repo.get_by_code(code) is None:
                raise NotFoundError(f"Coupon {code} not found")
            raise CouponExhausted(f"Coupon {code} can no longer be redeemed")

        logger.info("Coupon %s redeemed (%d/%s)", code, coupon.used_count, coupon.max_uses or "unlimited")
        return to_coupon_dto(coupon)

"""Application service: Validate Coupon use case (query).

An unusable coupon is a normal answer (``valid=False`` plus the reason),
not an error: the checkout page shows the reason next to the input.
"""

from __future__ import annotations

from datetime import datetime, timezone

from shopledger.application.dto import CouponValidationDTO, amount
from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.coupon import normalize_code
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.coupon_repository import CouponRepository


class ValidateCouponHandler:

    def __init__(self, coupon_repo: CouponRepository) -> None:
        self._coupon_repo = coupon_repo

    def handle(self, code: str, order_amount: str) -> CouponValidationDTO:
        if not code or not code.strip():
            raise ValidationError("Coupon code is required")

        coupon = self._coupon_repo.get_by_code(normalize_code(code))
        if coupon is None:
            return CouponValidationDTO(valid=False, error="Invalid coupon code")

        check = coupon.check(Money.of(order_amount or "0"), datetime.now(timezone.utc))
        if not check.valid:
            return CouponValidationDTO(valid=False, error=check.error)
        return CouponValidationDTO(
            valid=True,
            code=coupon.code,
            type=coupon.type.value,
            value=str(coupon.value),
            discount=amount(check.discount),
        )

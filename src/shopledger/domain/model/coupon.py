"""Coupon aggregate: discount codes with usage caps and expiry.

Invariants:
- ``code`` is stored upper-cased; lookups normalize the same way
- ``used_count <= max_uses`` whenever ``max_uses > 0``
- a computed discount is never negative and never exceeds the order amount
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum

from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.value_objects import Money


class CouponType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass(frozen=True)
class CouponCheck:
    """Outcome of checking a coupon against an order amount."""

    valid: bool
    discount: Money = field(default_factory=Money.zero)
    error: str | None = None


@dataclass
class Coupon:

    id: str | None
    code: str
    type: CouponType
    value: Decimal
    min_order_amount: Money = field(default_factory=Money.zero)
    max_uses: int = 0  # 0 = unlimited
    used_count: int = 0
    expires_at: datetime | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW coupons only) ----------------------------------

    @staticmethod
    def create(
        code: str,
        type: str | CouponType,
        value: str | int | float | Decimal,
        min_order_amount: Money | None = None,
        max_uses: int = 0,
        expires_at: datetime | None = None,
    ) -> Coupon:
        if not code or not code.strip():
            raise ValidationError("Coupon code is required")
        try:
            coupon_type = CouponType(type) if isinstance(type, str) else type
        except ValueError as exc:
            raise ValidationError(
                f"Invalid coupon type '{type}'. Must be: percentage or fixed"
            ) from exc
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid coupon value: {value!r}") from exc

        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Coupon value must be greater than zero")
        if coupon_type == CouponType.PERCENTAGE and amount > 100:
            raise ValidationError("Percentage coupons cannot exceed 100")
        if max_uses < 0:
            raise ValidationError("max_uses cannot be negative")
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        return Coupon(
            id=None,
            code=normalize_code(code),
            type=coupon_type,
            value=amount,
            min_order_amount=min_order_amount or Money.zero(),
            max_uses=max_uses,
            expires_at=expires_at,
        )

    # --- Queries --------------------------------------------------------------

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    @property
    def has_uses_remaining(self) -> bool:
        return self.max_uses == 0 or self.used_count < self.max_uses

    def is_redeemable(self, now: datetime) -> bool:
        return self.is_active and not self.is_expired(now) and self.has_uses_remaining

    def discount_for(self, order_amount: Money) -> Money:
        if self.type == CouponType.PERCENTAGE:
            raw = Money(order_amount.amount * self.value / Decimal(100))
        else:
            raw = Money(self.value)
        return raw.min(order_amount).rounded()

    def check(self, order_amount: Money, now: datetime) -> CouponCheck:
        """Run the validation chain; the first failing check wins."""
        if not self.is_active:
            return CouponCheck(valid=False, error="This coupon is no longer active")
        if self.is_expired(now):
            return CouponCheck(valid=False, error="This coupon has expired")
        if not self.has_uses_remaining:
            return CouponCheck(valid=False, error="This coupon has reached its usage limit")
        if order_amount < self.min_order_amount:
            return CouponCheck(
                valid=False,
                error=f"Minimum order amount is {self.min_order_amount.amount:.2f} EGP",
            )
        return CouponCheck(valid=True, discount=self.discount_for(order_amount))

    # --- Mutations ------------------------------------------------------------

    def redeem(self, now: datetime) -> None:
        """Count one use. Repositories call this inside their atomic section."""
        if not self.is_redeemable(now):
            raise ValidationError(f"Coupon {self.code} cannot be redeemed")
        self.used_count += 1

    def change_max_uses(self, max_uses: int) -> None:
        if max_uses < 0:
            raise ValidationError("max_uses cannot be negative")
        if max_uses and max_uses < self.used_count:
            raise ValidationError(
                f"max_uses cannot be lower than the {self.used_count} uses already counted"
            )
        self.max_uses = max_uses

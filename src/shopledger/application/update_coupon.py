"""Application service: Update Coupon / List Coupons use cases (admin)."""

from __future__ import annotations

from datetime import datetime, timezone

from shopledger.application.dto import CouponDTO, to_coupon_dto
from shopledger.domain.exceptions import DuplicateCode, NotFoundError, ValidationError
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.coupon_repository import CouponRepository

EDITABLE_FIELDS = frozenset({"is_active", "max_uses", "expires_at", "min_order_amount"})


def _whole_number(value: object) -> int:
    if isinstance(value, bool):
        raise ValidationError("max_uses must be a whole number")
    try:
        return int(str(value))
    except ValueError as exc:
        raise ValidationError("max_uses must be a whole number") from exc


def _timestamp(value: object) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid expiry date: {value!r}") from exc


class UpdateCouponHandler:

    def __init__(self, coupon_repo: CouponRepository) -> None:
        self._coupon_repo = coupon_repo

    def handle(self, coupon_id: str, fields: dict) -> CouponDTO:
        """Apply admin edits. ``used_count`` and ``code`` are not editable."""
        coupon = self._coupon_repo.get_by_id(coupon_id)
        if coupon is None:
            raise NotFoundError(f"Coupon {coupon_id} not found")

        rejected = sorted(set(fields) - EDITABLE_FIELDS)
        if rejected:
            raise ValidationError(f"Cannot update coupon field(s): {', '.join(rejected)}")

        if "max_uses" in fields:
            coupon.change_max_uses(_whole_number(fields["max_uses"]))
        if "min_order_amount" in fields:
            coupon.min_order_amount = Money.of(fields["min_order_amount"])
        if "expires_at" in fields:
            expires_at = _timestamp(fields["expires_at"])
            if expires_at is not None and expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            coupon.expires_at = expires_at
        if "is_active" in fields:
            if not isinstance(fields["is_active"], bool):
                raise ValidationError("is_active must be true or false")
            if fields["is_active"] and not coupon.is_active:
                other = self._coupon_repo.get_by_code(coupon.code)
                if other is not None and other.is_active and other.id != coupon.id:
                    raise DuplicateCode(
                        f"Another active coupon already uses the code {coupon.code}"
                    )
            coupon.is_active = bool(fields["is_active"])

        self._coupon_repo.save(coupon)
        return to_coupon_dto(coupon)


class ListCouponsHandler:

    def __init__(self, coupon_repo: CouponRepository) -> None:
        self._coupon_repo = coupon_repo

    def handle(self) -> list[CouponDTO]:
        return [to_coupon_dto(c) for c in self._coupon_repo.list_all()]

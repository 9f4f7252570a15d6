"""JSON-file-backed implementation of CouponRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from shopledger.domain.exceptions import DuplicateCode
from shopledger.domain.model.coupon import Coupon, CouponType, normalize_code
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.coupon_repository import CouponRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
    next_numeric_id,
)


class JsonCouponRepository(CouponRepository):

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._collection = JsonCollection(file_path, timeout)

    # --- CouponRepository interface -------------------------------------------

    def get_by_id(self, coupon_id: str) -> Coupon | None:
        for raw in self._collection.read():
            if raw["id"] == coupon_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Coupon | None:
        raw = self._find_code(self._collection.read(), normalize_code(code))
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[Coupon]:
        coupons = [self._to_domain(raw) for raw in self._collection.read()]
        return sorted(coupons, key=lambda c: c.created_at, reverse=True)

    def add(self, coupon: Coupon) -> Coupon:
        with self._collection.transaction() as records:
            if any(r["code"] == coupon.code and r["is_active"] for r in records):
                raise DuplicateCode("A coupon with this code already exists")
            coupon.id = str(next_numeric_id(records))
            records.append(self._to_raw(coupon))
        return coupon

    def save(self, coupon: Coupon) -> None:
        with self._collection.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == coupon.id:
                    updated = self._to_raw(coupon)
                    # usage only moves through redeem()/unredeem()
                    updated["used_count"] = raw["used_count"]
                    records[i] = updated
                    return
            records.append(self._to_raw(coupon))

    def redeem(self, code: str, now: datetime) -> Coupon | None:
        with self._collection.transaction() as records:
            raw = self._find_code(records, normalize_code(code))
            if raw is None:
                return None
            coupon = self._to_domain(raw)
            if not coupon.is_redeemable(now):
                return None
            coupon.redeem(now)
            raw["used_count"] = coupon.used_count
            return coupon

    def unredeem(self, code: str) -> None:
        with self._collection.transaction() as records:
            raw = self._find_code(records, normalize_code(code))
            if raw is not None and raw["used_count"] > 0:
                raw["used_count"] -= 1

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _find_code(records: list[dict], code: str) -> dict | None:
        matches = [r for r in records if r["code"] == code]
        if not matches:
            return None
        active = [r for r in matches if r["is_active"]]
        return (active or matches)[-1]

    @staticmethod
    def _to_raw(coupon: Coupon) -> dict:
        return {
            "id": coupon.id,
            "code": coupon.code,
            "type": coupon.type.value,
            "value": str(coupon.value),
            "min_order_amount": str(coupon.min_order_amount.amount),
            "max_uses": coupon.max_uses,
            "used_count": coupon.used_count,
            "expires_at": coupon.expires_at.isoformat() if coupon.expires_at else None,
            "is_active": coupon.is_active,
            "created_at": coupon.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Coupon:
        return Coupon(
            id=raw["id"],
            code=raw["code"],
            type=CouponType(raw["type"]),
            value=Decimal(raw["value"]),
            min_order_amount=Money(Decimal(raw.get("min_order_amount", "0"))),
            max_uses=raw.get("max_uses", 0),
            used_count=raw.get("used_count", 0),
            expires_at=datetime.fromisoformat(raw["expires_at"]) if raw.get("expires_at") else None,
            is_active=raw.get("is_active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

"""Integration tests for the coupon use cases."""

from datetime import datetime, timedelta, timezone

import pytest

from shopledger.application.create_coupon import CreateCouponHandler
from shopledger.application.redeem_coupon import RedeemCouponHandler
from shopledger.application.update_coupon import ListCouponsHandler, UpdateCouponHandler
from shopledger.application.validate_coupon import ValidateCouponHandler
from shopledger.domain.exceptions import (
    CouponExhausted,
    DuplicateCode,
    NotFoundError,
    ValidationError,
)
from tests.fakes import FakeCouponRepository


def _create(repo: FakeCouponRepository, code: str = "save10", **kwargs):
    return CreateCouponHandler(repo).handle(
        code=code,
        type=kwargs.pop("type", "percentage"),
        value=kwargs.pop("value", "10"),
        **kwargs,
    )


class TestCreateCoupon:

    def test_stores_upper_cased(self):
        repo = FakeCouponRepository()
        dto = _create(repo, min_order_amount="200", max_uses=100)
        assert dto.code == "SAVE10"
        assert dto.min_order_amount == "200.00"
        assert dto.used_count == 0
        assert repo.get_by_code("SAVE10") is not None

    def test_duplicate_active_code(self):
        repo = FakeCouponRepository()
        _create(repo)
        with pytest.raises(DuplicateCode):
            _create(repo, code="Save10")

    def test_code_reusable_after_deactivation(self):
        repo = FakeCouponRepository()
        first = _create(repo)
        UpdateCouponHandler(repo).handle(first.id, {"is_active": False})
        second = _create(repo, value="20")
        assert repo.get_by_code("SAVE10").id == second.id


class TestValidateCoupon:

    def test_valid(self):
        repo = FakeCouponRepository()
        _create(repo, min_order_amount="200", max_uses=100)
        result = ValidateCouponHandler(repo).handle("save10", "500")
        assert result.valid
        assert result.discount == "50.00"
        assert result.type == "percentage"

    def test_below_minimum(self):
        repo = FakeCouponRepository()
        _create(repo, min_order_amount="200")
        result = ValidateCouponHandler(repo).handle("SAVE10", "150")
        assert not result.valid
        assert result.error == "Minimum order amount is 200.00 EGP"

    def test_unknown_code(self):
        result = ValidateCouponHandler(FakeCouponRepository()).handle("NOPE", "100")
        assert result == result.__class__(valid=False, error="Invalid coupon code")

    def test_expired(self):
        repo = FakeCouponRepository()
        _create(repo, expires_at=datetime.now(timezone.utc) - timedelta(days=1))
        assert ValidateCouponHandler(repo).handle("SAVE10", "500").error == "This coupon has expired"

    def test_code_required(self):
        with pytest.raises(ValidationError):
            ValidateCouponHandler(FakeCouponRepository()).handle(" ", "100")

    def test_validation_does_not_redeem(self):
        repo = FakeCouponRepository()
        _create(repo, max_uses=1)
        ValidateCouponHandler(repo).handle("SAVE10", "500")
        assert repo.get_by_code("SAVE10").used_count == 0


class TestRedeemCoupon:

    def test_counts_until_exhausted(self):
        repo = FakeCouponRepository()
        _create(repo, max_uses=2)
        handler = RedeemCouponHandler(repo)
        assert handler.handle("save10").used_count == 1
        assert handler.handle("SAVE10").used_count == 2
        with pytest.raises(CouponExhausted):
            handler.handle("SAVE10")
        assert repo.get_by_code("SAVE10").used_count == 2

    def test_unknown(self):
        with pytest.raises(NotFoundError):
            RedeemCouponHandler(FakeCouponRepository()).handle("NOPE")


class TestUpdateCoupon:

    def test_used_count_not_editable(self):
        repo = FakeCouponRepository()
        dto = _create(repo)
        with pytest.raises(ValidationError, match="used_count"):
            UpdateCouponHandler(repo).handle(dto.id, {"used_count": 0})

    def test_reactivation_conflict(self):
        repo = FakeCouponRepository()
        first = _create(repo)
        UpdateCouponHandler(repo).handle(first.id, {"is_active": False})
        _create(repo)
        with pytest.raises(DuplicateCode):
            UpdateCouponHandler(repo).handle(first.id, {"is_active": True})

    @pytest.mark.parametrize("fields, message", [
        ({"max_uses": "lots"}, "max_uses"),
        ({"max_uses": None}, "max_uses"),
        ({"expires_at": "next week"}, "expiry"),
        ({"is_active": "yes"}, "is_active"),
    ])
    def test_malformed_values(self, fields, message):
        repo = FakeCouponRepository()
        dto = _create(repo)
        with pytest.raises(ValidationError, match=message):
            UpdateCouponHandler(repo).handle(dto.id, fields)

    def test_expiry_from_iso_text(self):
        repo = FakeCouponRepository()
        dto = _create(repo)
        updated = UpdateCouponHandler(repo).handle(dto.id, {"expires_at": "2030-01-01T00:00:00"})
        assert updated.expires_at == "2030-01-01T00:00:00+00:00"

    def test_list_newest_first(self):
        repo = FakeCouponRepository()
        _create(repo, code="A")
        _create(repo, code="B")
        codes = [c.code for c in ListCouponsHandler(repo).handle()]
        assert set(codes) == {"A", "B"}
        assert len(codes) == 2

"""Unit tests for the Product aggregate."""

from decimal import Decimal

import pytest

from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.product import Product, ProductStatus, average_rating, slugify
from shopledger.domain.model.value_objects import Money


def _product(**kwargs) -> Product:
    return Product.create(
        id="1", name=kwargs.pop("name", "Oversized Tee (Black)"),
        price=kwargs.pop("price", Money.of("450")), **kwargs,
    )


class TestProduct:

    def test_slug_derived_from_name(self):
        assert _product().slug == "oversized-tee-black"

    def test_invalid_slug_rejected(self):
        with pytest.raises(ValidationError, match="Invalid slug"):
            _product(slug="Bad Slug!")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="non-negative"):
            _product(stock=-1)

    def test_compare_at_below_price_rejected(self):
        with pytest.raises(ValidationError, match="Compare-at"):
            _product(compare_at_price=Money.of("100"))

    def test_zero_price_update_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            _product().update_price(Money.of("0"))

    def test_low_stock_uses_default_threshold(self):
        product = _product(stock=10)
        assert product.is_low_stock(10)
        assert not product.is_low_stock(9)

    def test_low_stock_prefers_own_threshold(self):
        product = _product(stock=4, low_stock_threshold=3)
        assert product.effective_threshold(10) == 3
        assert not product.is_low_stock(10)

    def test_status(self):
        product = _product(status=ProductStatus.DRAFT)
        assert not product.is_active
        product.change_status(ProductStatus.ACTIVE)
        assert product.is_active


class TestRatingHelpers:

    def test_slugify(self):
        assert slugify("  Zen -- Hoodie ") == "zen-hoodie"

    def test_average_empty(self):
        assert average_rating([]) == Decimal("0.0")

    def test_average_rounds_half_up(self):
        assert average_rating([4, 5]) == Decimal("4.5")
        assert average_rating([5, 5, 4, 4, 4, 4, 4, 4]) == Decimal("4.3")
        assert average_rating([1, 2, 2, 2]) == Decimal("1.8")

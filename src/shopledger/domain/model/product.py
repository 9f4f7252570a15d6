"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves, products are archived. Orders only ever hold
a snapshot of a product, never a live reference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.value_objects import Money

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")
_SLUG_VALID = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class ProductStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


def slugify(text: str) -> str:
    """'Oversized Tee (Black)' -> 'oversized-tee-black'."""
    return _SLUG_STRIP.sub("-", text.lower()).strip("-")


def average_rating(ratings: list[int]) -> Decimal:
    """Mean of *ratings* rounded half-up to one decimal, 0 when empty."""
    if not ratings:
        return Decimal("0.0")
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


@dataclass
class Product:
    """A product in the catalog.

    ``stock`` is only ever moved through the repository's atomic
    ``reserve_stock`` / ``restock`` operations once the product is
    persisted; ``set_stock`` is the admin override.
    """

    id: str
    name: str
    slug: str
    price: Money
    stock: int = 0
    status: ProductStatus = ProductStatus.ACTIVE
    compare_at_price: Money | None = None
    low_stock_threshold: int | None = None
    images: list[str] = field(default_factory=list)
    average_rating: Decimal = Decimal("0.0")
    review_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        id: str,
        name: str,
        price: Money,
        stock: int = 0,
        slug: str | None = None,
        status: ProductStatus = ProductStatus.ACTIVE,
        compare_at_price: Money | None = None,
        low_stock_threshold: int | None = None,
        images: list[str] | None = None,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        slug = slug.strip().lower() if slug else slugify(name)
        if not _SLUG_VALID.match(slug):
            raise ValidationError(f"Invalid slug '{slug}'")
        product = Product(
            id=id,
            name=name.strip(),
            slug=slug,
            price=price,
            status=status,
            images=list(images or []),
        )
        product.set_stock(stock)
        product.update_compare_at_price(compare_at_price)
        product.update_low_stock_threshold(low_stock_threshold)
        return product

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    @property
    def first_image(self) -> str | None:
        return self.images[0] if self.images else None

    def effective_threshold(self, default: int) -> int:
        return self.low_stock_threshold if self.low_stock_threshold is not None else default

    def is_low_stock(self, default_threshold: int) -> bool:
        return self.stock <= self.effective_threshold(default_threshold)

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price
        self._touch()

    def update_compare_at_price(self, compare_at: Money | None) -> None:
        if compare_at is not None and compare_at < self.price:
            raise ValidationError("Compare-at price cannot be lower than the price")
        self.compare_at_price = compare_at
        self._touch()

    def update_low_stock_threshold(self, threshold: int | None) -> None:
        if threshold is not None and threshold < 0:
            raise ValidationError("Low-stock threshold cannot be negative")
        self.low_stock_threshold = threshold
        self._touch()

    def change_status(self, status: ProductStatus) -> None:
        self.status = status
        self._touch()

    def set_stock(self, quantity: int) -> None:
        if not isinstance(quantity, int) or quantity < 0:
            raise ValidationError("Stock must be a non-negative integer")
        self.stock = quantity
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

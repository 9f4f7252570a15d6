"""Wishlist aggregate, keyed by user id.

Holds denormalized product snapshots, in the same way orders hold line
items: later catalog edits do not flow back into a saved wishlist.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from shopledger.domain.model.product import Product
from shopledger.domain.model.value_objects import Money


@dataclass(frozen=True)
class WishlistItem:
    product_id: str
    name: str
    slug: str
    price: Money
    image: str | None
    added_at: datetime

    @staticmethod
    def snapshot(product: Product) -> WishlistItem:
        return WishlistItem(
            product_id=product.id,
            name=product.name,
            slug=product.slug,
            price=product.price,
            image=product.first_image,
            added_at=datetime.now(timezone.utc),
        )


@dataclass
class Wishlist:

    user_id: str
    items: list[WishlistItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def contains(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)

    def add(self, product: Product) -> bool:
        """Add a snapshot of *product*; returns False if it was already there."""
        if self.contains(product.id):
            return False
        self.items.append(WishlistItem.snapshot(product))
        self.updated_at = datetime.now(timezone.utc)
        return True

    def remove(self, product_id: str) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if item.product_id != product_id]
        self.updated_at = datetime.now(timezone.utc)
        return len(self.items) != before

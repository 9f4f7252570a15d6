"""JSON-file-backed implementation of WishlistRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from shopledger.domain.model.value_objects import Money
from shopledger.domain.model.wishlist import Wishlist, WishlistItem
from shopledger.domain.repository.wishlist_repository import WishlistRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
)


class JsonWishlistRepository(WishlistRepository):

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._collection = JsonCollection(file_path, timeout)

    def get_for_user(self, user_id: str) -> Wishlist | None:
        for raw in self._collection.read():
            if raw["user_id"] == user_id:
                return self._to_domain(raw)
        return None

    def save(self, wishlist: Wishlist) -> None:
        with self._collection.transaction() as records:
            for i, raw in enumerate(records):
                if raw["user_id"] == wishlist.user_id:
                    records[i] = self._to_raw(wishlist)
                    return
            records.append(self._to_raw(wishlist))

    @staticmethod
    def _to_raw(wishlist: Wishlist) -> dict:
        return {
            "user_id": wishlist.user_id,
            "created_at": wishlist.created_at.isoformat(),
            "updated_at": wishlist.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "slug": item.slug,
                    "price": str(item.price.amount),
                    "image": item.image,
                    "added_at": item.added_at.isoformat(),
                }
                for item in wishlist.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Wishlist:
        return Wishlist(
            user_id=raw["user_id"],
            items=[
                WishlistItem(
                    product_id=i["product_id"],
                    name=i["name"],
                    slug=i["slug"],
                    price=Money(Decimal(i["price"])),
                    image=i.get("image"),
                    added_at=datetime.fromisoformat(i["added_at"]),
                )
                for i in raw.get("items", [])
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

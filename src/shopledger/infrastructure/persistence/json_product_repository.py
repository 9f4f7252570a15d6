"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from shopledger.domain.exceptions import InsufficientStock, NotFoundError
from shopledger.domain.model.product import Product, ProductStatus
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
    next_numeric_id,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._collection = JsonCollection(file_path, timeout)

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        return str(next_numeric_id(self._collection.read()))

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._collection.read():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_slug(self, slug: str) -> Product | None:
        for raw in self._collection.read():
            if raw["slug"] == slug.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._collection.read()]

    def save(self, product: Product) -> None:
        with self._collection.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    updated = self._to_raw(product)
                    for key in ("stock", "average_rating", "review_count"):
                        updated[key] = raw[key]
                    records[i] = updated
                    break
            else:
                records.append(self._to_raw(product))

    def set_stock(self, product_id: str, quantity: int) -> None:
        with self._collection.transaction() as records:
            for raw in records:
                if raw["id"] == product_id:
                    raw["stock"] = quantity
                    return
            raise NotFoundError(f"Product not found: '{product_id}'")

    def reserve_stock(self, quantities: dict[str, int]) -> None:
        with self._collection.transaction() as records:
            by_id = {raw["id"]: raw for raw in records}
            # Phase 1: validate every line before touching any of them
            for product_id, qty in quantities.items():
                raw = by_id.get(product_id)
                if raw is None:
                    raise NotFoundError(f"Product not found: '{product_id}'")
                if qty > raw["stock"]:
                    raise InsufficientStock(
                        f"Insufficient stock for {raw['name']} "
                        f"(need {qty}, have {raw['stock']} available)"
                    )
            # Phase 2: mutate
            for product_id, qty in quantities.items():
                by_id[product_id]["stock"] -= qty

    def restock(self, quantities: dict[str, int]) -> None:
        with self._collection.transaction() as records:
            by_id = {raw["id"]: raw for raw in records}
            for product_id, qty in quantities.items():
                # A product deleted since checkout has nothing to restock.
                if product_id in by_id:
                    by_id[product_id]["stock"] += qty

    def set_rating(self, product_id: str, average: Decimal, count: int) -> None:
        with self._collection.transaction() as records:
            for raw in records:
                if raw["id"] == product_id:
                    raw["average_rating"] = str(average)
                    raw["review_count"] = count
                    return
            raise NotFoundError(f"Product not found: '{product_id}'")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "compare_at_price": (
                str(product.compare_at_price.amount) if product.compare_at_price else None
            ),
            "stock": product.stock,
            "status": product.status.value,
            "low_stock_threshold": product.low_stock_threshold,
            "images": list(product.images),
            "average_rating": str(product.average_rating),
            "review_count": product.review_count,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "EGP")
        compare_at = raw.get("compare_at_price")
        return Product(
            id=raw["id"],
            name=raw["name"],
            slug=raw["slug"],
            price=Money(Decimal(raw["price"]), currency),
            compare_at_price=Money(Decimal(compare_at), currency) if compare_at else None,
            stock=raw.get("stock", 0),
            status=ProductStatus(raw.get("status", "active")),
            low_stock_threshold=raw.get("low_stock_threshold"),
            images=list(raw.get("images", [])),
            average_rating=Decimal(raw.get("average_rating", "0.0")),
            review_count=raw.get("review_count", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

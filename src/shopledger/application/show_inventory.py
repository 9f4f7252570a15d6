"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from shopledger.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    status: str
    stock: int
    threshold: int
    low: bool


class ShowInventoryHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, threshold_default: int) -> list[InventoryLineDTO]:
        return [
            InventoryLineDTO(
                product_id=p.id,
                product_name=p.name,
                status=p.status.value,
                stock=p.stock,
                threshold=p.effective_threshold(threshold_default),
                low=p.is_low_stock(threshold_default),
            )
            for p in self._product_repo.list_all()
        ]

"""Application service: Set Stock use case (admin stock count)."""

from __future__ import annotations

from shopledger.domain.exceptions import NotFoundError
from shopledger.domain.repository.product_repository import ProductRepository


class SetStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int) -> None:
        """Overwrite the stock level after a physical count or a delivery."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID '{product_id}' not found")

        product.set_stock(quantity)  # validates
        self._product_repo.set_stock(product_id, quantity)

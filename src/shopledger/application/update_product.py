"""Application service: Update Product use case."""

from __future__ import annotations

from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.model.product import ProductStatus
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        price: str | None = None,
        compare_at_price: str | None = None,
        status: str | None = None,
        low_stock_threshold: int | None = None,
    ) -> None:
        """Update a product's price, status or low-stock threshold.

        This does NOT affect any existing orders — they captured a
        price snapshot at creation time.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID '{product_id}' not found")

        if price is not None:
            product.update_price(Money.of(price))
        if compare_at_price is not None:
            product.update_compare_at_price(Money.of(compare_at_price) if compare_at_price else None)
        if status is not None:
            try:
                product.change_status(ProductStatus(status))
            except ValueError as exc:
                raise ValidationError(f"Invalid product status '{status}'") from exc
        if low_stock_threshold is not None:
            product.update_low_stock_threshold(low_stock_threshold)
        self._product_repo.save(product)

"""Application service: Add Product use case."""

from __future__ import annotations

from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.product import Product, ProductStatus
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        stock: int = 0,
        slug: str | None = None,
        status: str = "active",
        compare_at_price: str | None = None,
        low_stock_threshold: int | None = None,
        images: list[str] | None = None,
    ) -> Product:
        """Add a new product to the catalog."""
        try:
            product_status = ProductStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Invalid product status '{status}'") from exc

        product = Product.create(
            id=self._product_repo.next_id(),
            name=name,
            price=Money.of(price),
            stock=stock,
            slug=slug,
            status=product_status,
            compare_at_price=Money.of(compare_at_price) if compare_at_price else None,
            low_stock_threshold=low_stock_threshold,
            images=images,
        )
        if product.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        existing = self._product_repo.get_by_slug(product.slug)
        if existing is not None:
            raise ValidationError(f"Product with slug '{product.slug}' already exists")

        self._product_repo.save(product)
        return product

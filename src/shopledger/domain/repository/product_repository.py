"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and in the test fakes.

Stock is never written with a plain read-then-save: ``reserve_stock`` and
``restock`` must each run as one atomic operation against the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from shopledger.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique product ID."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Product | None:
        """Return a product by its slug, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new product, or admin edits to an existing one.

        For an existing product the stored stock and rating aggregate are
        kept: those only move through the dedicated operations below.
        """

    @abstractmethod
    def set_stock(self, product_id: str, quantity: int) -> None:
        """Overwrite one product's stock level (admin count)."""

    @abstractmethod
    def reserve_stock(self, quantities: dict[str, int]) -> None:
        """Atomically decrement stock for every product in *quantities*.

        All or nothing: raises InsufficientStock (and changes nothing) if
        any product is short, NotFoundError if any product is unknown.
        """

    @abstractmethod
    def restock(self, quantities: dict[str, int]) -> None:
        """Atomically add *quantities* back (cancellation, compensation)."""

    @abstractmethod
    def set_rating(self, product_id: str, average: Decimal, count: int) -> None:
        """Overwrite the rating aggregate of one product."""

"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopledger.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def next_order_number(self) -> str:
        """Atomically allocate the next human-readable order number."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its normalized order number, or None."""

    @abstractmethod
    def list_all(self, user_id: str | None = None) -> list[Order]:
        """Return orders newest first, optionally only one customer's."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""

    @abstractmethod
    def save_if_status(self, order: Order, expected: OrderStatus) -> bool:
        """Replace a stored order only if its stored status is still *expected*.

        Compare and write happen as one atomic step. Returns False, writing
        nothing, when another writer changed the status first.
        """

"""Abstract repository for customer purchase statistics."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopledger.domain.model.customer import Customer
from shopledger.domain.model.value_objects import Money


class CustomerRepository(ABC):

    @abstractmethod
    def get_by_id(self, customer_id: str) -> Customer | None:
        """Return a customer, or None."""

    @abstractmethod
    def save(self, customer: Customer) -> None:
        """Persist a new or updated customer."""

    @abstractmethod
    def record_purchase(self, customer_id: str, amount: Money) -> Customer | None:
        """Atomically bump order count and lifetime spend.

        Returns None (and records nothing) for an unknown customer.
        """

"""JSON-file-backed implementation of CustomerRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from shopledger.domain.model.customer import Customer
from shopledger.domain.model.value_objects import Money
from shopledger.domain.repository.customer_repository import CustomerRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
)


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._collection = JsonCollection(file_path, timeout)

    def get_by_id(self, customer_id: str) -> Customer | None:
        for raw in self._collection.read():
            if raw["id"] == customer_id:
                return self._to_domain(raw)
        return None

    def save(self, customer: Customer) -> None:
        with self._collection.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == customer.id:
                    records[i] = self._to_raw(customer)
                    return
            records.append(self._to_raw(customer))

    def record_purchase(self, customer_id: str, amount: Money) -> Customer | None:
        with self._collection.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == customer_id:
                    customer = self._to_domain(raw)
                    customer.record_purchase(amount)
                    records[i] = self._to_raw(customer)
                    return customer
        return None

    @staticmethod
    def _to_raw(customer: Customer) -> dict:
        return {
            "id": customer.id,
            "email": customer.email,
            "name": customer.name,
            "order_count": customer.order_count,
            "total_spent": str(customer.total_spent.amount),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Customer:
        return Customer(
            id=raw["id"],
            email=raw.get("email", ""),
            name=raw.get("name", ""),
            order_count=raw.get("order_count", 0),
            total_spent=Money(Decimal(raw.get("total_spent", "0"))),
        )

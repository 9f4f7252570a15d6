"""Customer record: only the purchase statistics the ledger maintains."""

from __future__ import annotations

from dataclasses import dataclass, field

from shopledger.domain.model.value_objects import Money


@dataclass
class Customer:

    id: str
    email: str = ""
    name: str = ""
    order_count: int = 0
    total_spent: Money = field(default_factory=Money.zero)

    def record_purchase(self, amount: Money) -> None:
        self.order_count += 1
        self.total_spent = self.total_spent + amount

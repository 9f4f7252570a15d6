"""Low-stock alert history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class LowStockEntry:
    product_id: str
    name: str
    stock: int
    threshold: int


@dataclass
class InventoryAlert:
    """One batched alert: every product that was low at scan time."""

    id: str | None
    products: list[LowStockEntry]
    threshold: int  # the default that was in effect for the scan
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

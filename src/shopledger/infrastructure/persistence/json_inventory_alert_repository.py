"""JSON-file-backed implementation of InventoryAlertRepository."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from shopledger.domain.model.inventory_alert import InventoryAlert, LowStockEntry
from shopledger.domain.repository.inventory_alert_repository import InventoryAlertRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
    next_numeric_id,
)


class JsonInventoryAlertRepository(InventoryAlertRepository):

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._collection = JsonCollection(file_path, timeout)

    def add(self, alert: InventoryAlert) -> InventoryAlert:
        with self._collection.transaction() as records:
            alert.id = str(next_numeric_id(records))
            records.append({
                "id": alert.id,
                "products": [asdict(entry) for entry in alert.products],
                "threshold": alert.threshold,
                "sent_at": alert.sent_at.isoformat(),
            })
        return alert

    def latest(self, limit: int = 50) -> list[InventoryAlert]:
        alerts = [
            InventoryAlert(
                id=raw["id"],
                products=[LowStockEntry(**entry) for entry in raw["products"]],
                threshold=raw["threshold"],
                sent_at=datetime.fromisoformat(raw["sent_at"]),
            )
            for raw in self._collection.read()
        ]
        alerts.sort(key=lambda a: a.sent_at, reverse=True)
        return alerts[:limit]

"""Abstract repository for low-stock alert history."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopledger.domain.model.inventory_alert import InventoryAlert


class InventoryAlertRepository(ABC):

    @abstractmethod
    def add(self, alert: InventoryAlert) -> InventoryAlert:
        """Record an alert that was sent, assigning its ID."""

    @abstractmethod
    def latest(self, limit: int = 50) -> list[InventoryAlert]:
        """Return the most recent alerts, newest first."""

"""Notification Dispatcher port.

The ledger decides *when* a customer or the admin must be told something;
formatting and delivery belong to the adapter behind this interface.
Every method raises DependencyError when delivery fails or times out, and
callers decide whether that failure is fatal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopledger.domain.model.inventory_alert import LowStockEntry
from shopledger.domain.model.order import Order


class NotificationDispatcher(ABC):

    @abstractmethod
    def order_confirmation(self, order: Order) -> None:
        """Tell the customer their order was received."""

    @abstractmethod
    def admin_order_notification(self, order: Order) -> None:
        """Tell the shop admin a new order arrived."""

    @abstractmethod
    def shipping_update(self, order: Order) -> None:
        """Tell the customer their order moved to its current status."""

    @abstractmethod
    def low_stock_alert(self, entries: list[LowStockEntry]) -> None:
        """Send one batched alert listing every low-stock product."""

    @abstractmethod
    def verification_code(self, email: str, code: str) -> None:
        """Send a sign-in verification code."""

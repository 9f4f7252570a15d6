"""Shared plumbing: turn dispatcher calls into one ``deliver(message)``."""

from __future__ import annotations

from abc import abstractmethod

from shopledger.domain.model.inventory_alert import LowStockEntry
from shopledger.domain.model.order import Order
from shopledger.domain.service.notification_dispatcher import NotificationDispatcher
from shopledger.infrastructure.notifications import messages
from shopledger.infrastructure.notifications.messages import EmailMessage


class EmailDispatcher(NotificationDispatcher):

    def __init__(self, admin_email: str) -> None:
        self._admin_email = admin_email

    @abstractmethod
    def deliver(self, message: EmailMessage) -> None:
        """Send one message; raise DependencyError on failure."""

    def order_confirmation(self, order: Order) -> None:
        self.deliver(messages.order_confirmation(order))

    def admin_order_notification(self, order: Order) -> None:
        self.deliver(messages.admin_order_notification(order, self._admin_email))

    def shipping_update(self, order: Order) -> None:
        self.deliver(messages.shipping_update(order))

    def low_stock_alert(self, entries: list[LowStockEntry]) -> None:
        self.deliver(messages.low_stock_alert(entries, self._admin_email))

    def verification_code(self, email: str, code: str) -> None:
        self.deliver(messages.verification_code(email, code))

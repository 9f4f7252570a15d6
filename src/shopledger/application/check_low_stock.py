"""Application service: Check Low Stock use case.

Scans active products, sends one batched alert for everything at or below
its threshold and records the alert. Repeated calls re-alert for the same
products; callers schedule the scan.
"""

from __future__ import annotations

import logging

from shopledger.application.dto import InventoryAlertDTO, LowStockReportDTO, to_alert_dto
from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.inventory_alert import InventoryAlert, LowStockEntry
from shopledger.domain.repository.inventory_alert_repository import InventoryAlertRepository
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.service.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 10


class CheckLowStockHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        alert_repo: InventoryAlertRepository,
        notifier: NotificationDispatcher,
    ) -> None:
        self._product_repo = product_repo
        self._alert_repo = alert_repo
        self._notifier = notifier

    def handle(self, threshold_default: int = DEFAULT_THRESHOLD) -> LowStockReportDTO:
        if isinstance(threshold_default, bool) or not isinstance(threshold_default, int) \
                or threshold_default < 0:
            raise ValidationError("threshold must be a non-negative integer")

        low = [
            LowStockEntry(
                product_id=p.id,
                name=p.name,
                stock=p.stock,
                threshold=p.effective_threshold(threshold_default),
            )
            for p in self._product_repo.list_all()
            if p.is_active and p.is_low_stock(threshold_default)
        ]
        if not low:
            return LowStockReportDTO(products=[], alert_id=None, message="No low stock products found")

        # A failed send propagates: nothing is recorded for an alert nobody got.
        self._notifier.low_stock_alert(low)
        alert = self._alert_repo.add(InventoryAlert(id=None, products=low, threshold=threshold_default))
        logger.info("Low inventory alert %s sent for %d products", alert.id, len(low))

        return LowStockReportDTO(
            products=low,
            alert_id=alert.id,
            message=f"Low inventory alert sent for {len(low)} products",
        )


class ListInventoryAlertsHandler:

    def __init__(self, alert_repo: InventoryAlertRepository) -> None:
        self._alert_repo = alert_repo

    def handle(self, limit: int = 50) -> list[InventoryAlertDTO]:
        return [to_alert_dto(a) for a in self._alert_repo.latest(limit)]

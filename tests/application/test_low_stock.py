"""Integration tests for low-stock alerting."""

import pytest

from shopledger.application.check_low_stock import CheckLowStockHandler, ListInventoryAlertsHandler
from shopledger.domain.exceptions import DependencyError, ValidationError
from shopledger.domain.model.product import Product, ProductStatus
from shopledger.domain.model.value_objects import Money
from tests.fakes import FakeInventoryAlertRepository, FakeNotifier, FakeProductRepository


def _product(pid: str, stock: int, threshold: int | None = None, **kwargs) -> Product:
    return Product(
        id=pid, name=f"Item {pid}", slug=f"item-{pid}", price=Money.of("100"),
        stock=stock, low_stock_threshold=threshold, **kwargs,
    )


def _setup(*products: Product, notifier: FakeNotifier | None = None):
    alerts = FakeInventoryAlertRepository()
    notifier = notifier or FakeNotifier()
    handler = CheckLowStockHandler(FakeProductRepository(list(products)), alerts, notifier)
    return handler, alerts, notifier


class TestCheckLowStock:

    def test_flags_at_or_below_threshold(self):
        handler, alerts, notifier = _setup(
            _product("1", 10), _product("2", 11), _product("3", 0),
        )
        report = handler.handle(10)

        assert [e.product_id for e in report.products] == ["1", "3"]
        assert report.alert_id == "1"
        assert notifier.kinds() == ["low_stock_alert"]
        assert len(alerts.latest()) == 1

    def test_own_threshold_wins(self):
        handler, _, _ = _setup(_product("1", 4, threshold=3), _product("2", 20, threshold=25))
        report = handler.handle(10)
        assert [(e.product_id, e.threshold) for e in report.products] == [("2", 25)]

    def test_inactive_products_skipped(self):
        handler, _, notifier = _setup(
            _product("1", 0, status=ProductStatus.DRAFT),
            _product("2", 0, status=ProductStatus.ARCHIVED),
        )
        report = handler.handle(10)
        assert report.products == []
        assert report.message == "No low stock products found"
        assert notifier.sent == []

    def test_one_batched_alert(self):
        handler, _, notifier = _setup(*[_product(str(i), 1) for i in range(1, 6)])
        handler.handle(10)
        assert len(notifier.sent) == 1
        assert len(notifier.sent[0][1]) == 5

    def test_repeated_scan_alerts_again(self):
        handler, alerts, _ = _setup(_product("1", 2))
        handler.handle(10)
        handler.handle(10)
        assert len(alerts.latest()) == 2

    def test_send_failure_records_nothing(self):
        handler, alerts, _ = _setup(_product("1", 2), notifier=FakeNotifier(fail={"low_stock_alert"}))
        with pytest.raises(DependencyError):
            handler.handle(10)
        assert alerts.latest() == []

    def test_negative_threshold(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError):
            handler.handle(-1)


class TestListInventoryAlerts:

    def test_newest_first(self):
        handler, alerts, _ = _setup(_product("1", 2))
        handler.handle(10)
        handler.handle(5)
        listed = ListInventoryAlertsHandler(alerts).handle()
        assert [a.threshold for a in listed] == [5, 10]

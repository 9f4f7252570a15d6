"""Integration tests for order status changes: advance, ship, cancel, edit."""

import pytest

from shopledger.application.advance_order_status import (
    NOTIFICATION_FAILED,
    AdvanceOrderStatusHandler,
    ShippingUpdateHandler,
)
from shopledger.application.cancel_order import CancelOrderHandler
from shopledger.application.update_order import UpdateOrderHandler
from shopledger.application.update_payment_status import UpdatePaymentStatusHandler
from shopledger.domain.exceptions import (
    DependencyError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from shopledger.domain.model.order import (
    ContactInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentStatus,
)
from shopledger.domain.model.product import Product
from shopledger.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeNotifier, FakeOrderRepository, FakeProductRepository


def _setup(
    status: OrderStatus = OrderStatus.PENDING,
    notifier: FakeNotifier | None = None,
    orders: FakeOrderRepository | None = None,
):
    products = FakeProductRepository([
        Product(id="1", name="Zen Tee", slug="zen-tee", price=Money.of("250"), stock=8),
    ])
    orders = FakeOrderRepository() if orders is None else orders
    order = Order.create(
        contact=ContactInfo(email="alice@example.com", name="Alice"),
        items=[OrderLineItem("1", "Zen Tee", Money.of("250"), Quantity(2))],
        shipping=Money.of("50"),
    )
    order.order_number = "ZEN000001"
    order.status = status
    orders.save(order)
    notifier = notifier or FakeNotifier()
    advance = AdvanceOrderStatusHandler(orders, products, notifier)
    return advance, orders, products, notifier, order.id


class TestAdvanceOrderStatus:

    def test_moves_and_notifies(self):
        advance, orders, _, notifier, order_id = _setup(OrderStatus.PROCESSING)
        dto = advance.handle(order_id, "shipped", "TRK-77")

        assert dto.status == "shipped"
        assert dto.notification_sent
        assert dto.email == "alice@example.com"
        saved = orders.get_by_id(order_id)
        assert saved.status == OrderStatus.SHIPPED
        assert saved.tracking_number == "TRK-77"
        assert notifier.sent == [("shipping_update", ("ZEN000001", "shipped"))]

    def test_invalid_transition_changes_nothing(self):
        advance, orders, _, notifier, order_id = _setup(OrderStatus.PENDING)
        with pytest.raises(InvalidStateTransition):
            advance.handle(order_id, "processing")
        assert orders.get_by_id(order_id).status == OrderStatus.PENDING
        assert notifier.sent == []

    def test_unknown_order(self):
        advance, *_ = _setup()
        with pytest.raises(NotFoundError):
            advance.handle(99, "confirmed")

    def test_notification_failure_keeps_update(self):
        advance, orders, _, _, order_id = _setup(
            OrderStatus.PENDING, FakeNotifier(fail={"shipping_update"})
        )
        dto = advance.handle(order_id, "confirmed")

        assert not dto.notification_sent
        assert dto.warning == NOTIFICATION_FAILED
        assert orders.get_by_id(order_id).status == OrderStatus.CONFIRMED


class TestCancelOrder:

    def test_cancel_restocks(self):
        advance, orders, products, _, order_id = _setup(OrderStatus.CONFIRMED)
        CancelOrderHandler(advance).handle(order_id)
        assert orders.get_by_id(order_id).is_cancelled
        assert products.get_by_id("1").stock == 10

    def test_cancel_after_delivery_rejected(self):
        advance, _, products, _, order_id = _setup(OrderStatus.DELIVERED)
        with pytest.raises(InvalidStateTransition):
            CancelOrderHandler(advance).handle(order_id)
        assert products.get_by_id("1").stock == 8

    def test_cancel_twice_restocks_once(self):
        advance, _, products, _, order_id = _setup(OrderStatus.PENDING)
        CancelOrderHandler(advance).handle(order_id)
        with pytest.raises(InvalidStateTransition):
            CancelOrderHandler(advance).handle(order_id)
        assert products.get_by_id("1").stock == 10


class TestShippingUpdate:

    def test_delivered_completes_order(self):
        advance, orders, _, _, order_id = _setup(OrderStatus.OUT_FOR_DELIVERY)
        dto = ShippingUpdateHandler(advance).handle(order_id, "delivered")
        assert dto.status == "completed"
        assert orders.get_by_id(order_id).shipping_status == "delivered"

    def test_rejects_non_shipping_status(self):
        advance, _, _, _, order_id = _setup()
        with pytest.raises(ValidationError, match="Invalid status"):
            ShippingUpdateHandler(advance).handle(order_id, "cancelled")


class TestUpdateOrder:

    def test_edits_contact_and_address(self):
        _, orders, products, _, order_id = _setup()
        UpdateOrderHandler(orders, products).handle(order_id, {
            "phone": "01000000000",
            "shipping_address": {"city": "Cairo"},
            "id": order_id,
        })
        saved = orders.get_by_id(order_id)
        assert saved.contact.phone == "01000000000"
        assert saved.contact.email == "alice@example.com"
        assert saved.shipping_address == {"city": "Cairo"}

    def test_totals_are_not_editable(self):
        _, orders, products, _, order_id = _setup()
        with pytest.raises(ValidationError, match="total"):
            UpdateOrderHandler(orders, products).handle(order_id, {"total": "1"})

    def test_status_goes_through_state_machine(self):
        _, orders, products, _, order_id = _setup(OrderStatus.PENDING)
        with pytest.raises(InvalidStateTransition):
            UpdateOrderHandler(orders, products).handle(order_id, {"status": "shipped"})

    def test_cancel_via_update_restocks(self):
        _, orders, products, _, order_id = _setup(OrderStatus.PROCESSING)
        UpdateOrderHandler(orders, products).handle(order_id, {"status": "cancelled"})
        assert products.get_by_id("1").stock == 10


class TestUpdatePaymentStatus:

    def test_mark_paid(self):
        _, orders, _, _, order_id = _setup()
        assert UpdatePaymentStatusHandler(orders).handle(order_id, "paid") == "paid"
        assert orders.get_by_id(order_id).payment_status == PaymentStatus.PAID

    def test_unknown_value(self):
        _, orders, _, _, order_id = _setup()
        with pytest.raises(ValidationError, match="Unknown payment status"):
            UpdatePaymentStatusHandler(orders).handle(order_id, "maybe")


class _InterleavedOrders(FakeOrderRepository):
    """Runs ``meanwhile`` once, right after the first read of an order."""

    def __init__(self) -> None:
        super().__init__()
        self.meanwhile = None

    def get_by_id(self, order_id):
        order = super().get_by_id(order_id)
        step, self.meanwhile = self.meanwhile, None
        if step is not None:
            step()
        return order


def _interleaved_setup():
    advance, orders, products, _, order_id = _setup(orders=_InterleavedOrders())
    return advance, orders, products, order_id


class TestConcurrentStatusChanges:

    def test_second_cancel_loses_and_restocks_nothing(self):
        advance, orders, products, order_id = _interleaved_setup()
        orders.meanwhile = lambda: CancelOrderHandler(advance).handle(order_id)

        with pytest.raises(InvalidStateTransition, match="changed status"):
            CancelOrderHandler(advance).handle(order_id)
        assert orders.get_by_id(order_id).is_cancelled
        assert products.get_by_id("1").stock == 10

    def test_confirm_cannot_revive_a_cancelled_order(self):
        advance, orders, products, order_id = _interleaved_setup()
        orders.meanwhile = lambda: CancelOrderHandler(advance).handle(order_id)

        with pytest.raises(InvalidStateTransition):
            advance.handle(order_id, "confirmed")
        assert orders.get_by_id(order_id).status == OrderStatus.CANCELLED
        assert products.get_by_id("1").stock == 10

    def test_edit_does_not_overwrite_a_newer_status(self):
        advance, orders, products, order_id = _interleaved_setup()
        orders.meanwhile = lambda: CancelOrderHandler(advance).handle(order_id)

        with pytest.raises(InvalidStateTransition):
            UpdateOrderHandler(orders, products).handle(order_id, {"notes": "gift wrap"})
        saved = orders.get_by_id(order_id)
        assert saved.is_cancelled
        assert saved.notes == ""

    def test_payment_update_does_not_overwrite_a_newer_status(self):
        advance, orders, _, order_id = _interleaved_setup()
        orders.meanwhile = lambda: CancelOrderHandler(advance).handle(order_id)

        with pytest.raises(InvalidStateTransition):
            UpdatePaymentStatusHandler(orders).handle(order_id, "paid")
        assert orders.get_by_id(order_id).payment_status == PaymentStatus.PENDING

    def test_failed_restock_is_logged_for_reconciliation(self, monkeypatch, caplog):
        advance, orders, products, _, order_id = _setup()

        def unavailable(quantities):
            raise DependencyError("product store unavailable")

        monkeypatch.setattr(products, "restock", unavailable)
        with pytest.raises(DependencyError):
            CancelOrderHandler(advance).handle(order_id)

        assert orders.get_by_id(order_id).is_cancelled
        assert "needs reconciliation" in caplog.text
        assert "ZEN000001" in caplog.text


class TestUpdateOrderInput:

    def test_non_text_email_rejected(self):
        _, orders, products, _, order_id = _setup()
        with pytest.raises(ValidationError, match="email"):
            UpdateOrderHandler(orders, products).handle(order_id, {"email": 42})

    def test_non_text_status_rejected(self):
        _, orders, products, _, order_id = _setup()
        with pytest.raises(ValidationError, match="status"):
            UpdateOrderHandler(orders, products).handle(order_id, {"status": ["cancelled"]})

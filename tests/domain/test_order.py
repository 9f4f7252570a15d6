"""Unit tests for the Order aggregate and its business rules."""

import pytest

from shopledger.domain.exceptions import InvalidStateTransition, ValidationError
from shopledger.domain.model.order import (
    ContactInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentStatus,
    format_order_number,
    normalize_order_number,
)
from shopledger.domain.model.value_objects import Money, Quantity


def _make_item(product_id: str = "1", qty: int = 1, price: str = "100.00") -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        product_id=product_id,
        name=f"Tee {product_id}",
        unit_price=Money.of(price),
        quantity=Quantity(qty),
    )


def _make_order(status: OrderStatus = OrderStatus.PENDING, **kwargs) -> Order:
    order = Order.create(
        contact=ContactInfo(email="alice@example.com", name="Alice"),
        items=kwargs.pop("items", [_make_item()]),
        shipping=Money.of(kwargs.pop("shipping", "0")),
        **kwargs,
    )
    order.status = status
    return order


class TestOrderCreation:

    def test_totals(self):
        order = _make_order(
            items=[_make_item("1", 2, "50.00"), _make_item("2", 1, "100.00")],
            shipping="20",
            discount=Money.of("30"),
        )
        assert order.subtotal == Money.of("200")
        assert order.total == Money.of("190")
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING

    def test_guest_when_no_user(self):
        order = _make_order()
        assert order.user_id == "guest"
        assert order.is_guest

    def test_id_and_number_assigned_later(self):
        order = _make_order()
        assert order.id is None
        assert order.order_number is None

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _make_order(items=[])

    def test_51_items_rejected(self):
        with pytest.raises(ValidationError, match="Maximum 50 items"):
            _make_order(items=[_make_item(str(i)) for i in range(51)])

    def test_discount_above_subtotal_rejected(self):
        with pytest.raises(ValidationError, match="Discount cannot exceed"):
            _make_order(discount=Money.of("150"))

    def test_client_total_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="does not equal"):
            _make_order(shipping="10", expected_total=Money.of("100"))

    def test_client_subtotal_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            _make_order(expected_subtotal=Money.of("99"))

    def test_matching_client_figures_accepted(self):
        order = _make_order(
            shipping="10",
            expected_subtotal=Money.of("100.00"),
            expected_total=Money.of("110"),
        )
        assert order.total == Money.of("110")

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError, match="valid contact email"):
            ContactInfo(email="not-an-email")

    def test_stock_quantities_merge_lines(self):
        order = _make_order(items=[_make_item("1", 2), _make_item("1", 1), _make_item("2", 4)])
        assert order.stock_quantities == {"1": 3, "2": 4}


class TestOrderStateMachine:

    @pytest.mark.parametrize("current,target", [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY),
        (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED),
        (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.COMPLETED),
    ])
    def test_forward_moves(self, current, target):
        order = _make_order(current)
        order.advance_to(target)
        assert order.status == target

    def test_skipping_a_step_rejected(self):
        order = _make_order(OrderStatus.PENDING)
        with pytest.raises(InvalidStateTransition, match="from pending to processing"):
            order.advance_to(OrderStatus.PROCESSING)

    def test_moving_backwards_rejected(self):
        order = _make_order(OrderStatus.SHIPPED)
        with pytest.raises(InvalidStateTransition):
            order.advance_to(OrderStatus.PROCESSING)

    @pytest.mark.parametrize("status", [
        OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING,
        OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY,
    ])
    def test_cancel_before_delivery(self, status):
        order = _make_order(status)
        order.cancel()
        assert order.is_cancelled

    @pytest.mark.parametrize("status", [
        OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderStatus.CANCELLED,
    ])
    def test_terminal_states_are_final(self, status):
        order = _make_order(status)
        assert order.is_terminal
        with pytest.raises(InvalidStateTransition):
            order.cancel()

    def test_tracking_number_recorded(self):
        order = _make_order(OrderStatus.PROCESSING)
        order.advance_to(OrderStatus.SHIPPED, " TRK-1 ")
        assert order.tracking_number == "TRK-1"

    def test_shipping_status_is_derived(self):
        order = _make_order(OrderStatus.CONFIRMED)
        assert order.shipping_status == "processing"
        order.status = OrderStatus.COMPLETED
        assert order.shipping_status == "delivered"
        order.status = OrderStatus.CANCELLED
        assert order.shipping_status is None

    def test_unknown_status_string(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            OrderStatus.parse("lost")


class TestPaymentStatus:

    def test_pending_to_paid_to_refunded(self):
        order = _make_order()
        order.update_payment_status(PaymentStatus.PAID)
        order.update_payment_status(PaymentStatus.REFUNDED)
        assert order.payment_status == PaymentStatus.REFUNDED

    def test_failed_can_be_retried(self):
        order = _make_order()
        order.update_payment_status(PaymentStatus.FAILED)
        order.update_payment_status(PaymentStatus.PAID)
        assert order.payment_status == PaymentStatus.PAID

    def test_refund_before_payment_rejected(self):
        order = _make_order()
        with pytest.raises(InvalidStateTransition, match="payment"):
            order.update_payment_status(PaymentStatus.REFUNDED)


class TestOrderNumbers:

    def test_format_pads_base36(self):
        assert format_order_number(1) == "ZEN000001"
        assert format_order_number(36) == "ZEN000010"
        assert format_order_number(36 ** 6) == "ZEN1000000"

    def test_non_positive_rejected(self):
        with pytest.raises(ValidationError):
            format_order_number(0)

    @pytest.mark.parametrize("raw", ["ZEN000123", "#zen000123", "Order #ZEN000123", " zen000123 "])
    def test_normalize(self, raw):
        assert normalize_order_number(raw) == "ZEN000123"

"""Application service: Create Order use case (checkout).

Orchestrates the flow between repositories, the domain model and the
notification port. This is the only place that coordinates catalog,
coupon, order and customer writes for one checkout.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from shopledger.application.dto import OrderInput, OrderPlacementDTO, amount
from shopledger.domain.exceptions import DependencyError, NotFoundError, ValidationError
from shopledger.domain.model.coupon import normalize_code
from shopledger.domain.model.order import (
    ContactInfo,
    Order,
    OrderLineItem,
    PaymentMethod,
)
from shopledger.domain.model.value_objects import Money, Quantity
from shopledger.domain.repository.coupon_repository import CouponRepository
from shopledger.domain.repository.customer_repository import CustomerRepository
from shopledger.domain.repository.order_repository import OrderRepository
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.service.checkout_reservation_service import (
    CheckoutReservationService,
)
from shopledger.domain.service.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        coupon_repo: CouponRepository,
        customer_repo: CustomerRepository,
        notifier: NotificationDispatcher,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._coupon_repo = coupon_repo
        self._customer_repo = customer_repo
        self._notifier = notifier

    def handle(self, data: OrderInput) -> OrderPlacementDTO:
        """Place an order.

        Steps:
        1. Snapshot every requested product at its current price.
        2. Price the coupon (if any) against the computed subtotal.
        3. Let the Order aggregate validate totals.
        4. Reserve stock and redeem the coupon atomically, then persist;
           compensate both if persisting fails.
        5. Best-effort: customer stats and notifications.
        """
        if not data.items:
            raise ValidationError("Order must contain at least one item")
        contact = ContactInfo(email=data.email.strip(), name=data.name.strip(), phone=data.phone.strip())
        payment_method = self._parse_payment_method(data.payment_method)

        line_items = [self._snapshot(spec.product_id, spec.quantity, spec.size, spec.color)
                      for spec in data.items]
        subtotal = Money.zero()
        for item in line_items:
            subtotal = subtotal + item.line_total

        coupon_code, discount = self._price_coupon(data, subtotal)

        order = Order.create(
            contact=contact,
            items=line_items,
            shipping=Money.of(data.shipping or "0"),
            discount=discount,
            user_id=data.user_id,
            payment_method=payment_method,
            coupon_code=coupon_code,
            payment_screenshot=data.payment_screenshot,
            shipping_address=data.shipping_address,
            notes=data.notes,
            expected_subtotal=Money.of(data.subtotal) if data.subtotal is not None else None,
            expected_total=Money.of(data.total) if data.total is not None else None,
        )

        reservation = CheckoutReservationService(self._product_repo, self._coupon_repo)
        reservation.reserve_for_order(order)
        try:
            order.order_number = self._order_repo.next_order_number()
            self._order_repo.save(order)
        except Exception:
            reservation.release_for_order(order)
            raise

        logger.info("Order %s placed (id=%s, total=%s)", order.order_number, order.id, order.total)
        self._record_customer_purchase(order)
        warnings = self._notify(order)

        return OrderPlacementDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            total=amount(order.total),
            warnings=warnings,
        )

    # --- Steps ----------------------------------------------------------------

    def _snapshot(
        self, product_id: str, quantity: int, size: str | None, color: str | None
    ) -> OrderLineItem:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: '{product_id}'")
        if not product.is_active:
            raise ValidationError(f"Product '{product.name}' is not available")
        return OrderLineItem(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,  # <-- price snapshot
            quantity=Quantity(quantity),
            size=size,
            color=color,
            image=product.first_image,
        )

    def _price_coupon(self, data: OrderInput, subtotal: Money) -> tuple[str | None, Money]:
        if not data.coupon_code or not data.coupon_code.strip():
            if data.discount is not None and Money.of(data.discount).amount != 0:
                raise ValidationError("A discount can only come from a coupon code")
            return None, Money.zero()

        code = normalize_code(data.coupon_code)
        coupon = self._coupon_repo.get_by_code(code)
        if coupon is None:
            raise ValidationError("Invalid coupon code")
        check = coupon.check(subtotal, datetime.now(timezone.utc))
        if not check.valid:
            raise ValidationError(check.error)
        return code, check.discount

    def _record_customer_purchase(self, order: Order) -> None:
        if order.is_guest:
            return
        try:
            customer = self._customer_repo.record_purchase(order.user_id, order.total)
        except DependencyError as exc:
            logger.warning("Failed to update stats for customer %s: %s", order.user_id, exc)
            return
        if customer is None:
            logger.info("No customer record for %s; stats not updated", order.user_id)

    def _notify(self, order: Order) -> list[str]:
        warnings: list[str] = []
        try:
            self._notifier.order_confirmation(order)
        except DependencyError as exc:
            logger.warning("Order confirmation for %s not sent: %s", order.order_number, exc)
            warnings.append("Failed to send order confirmation email")
        try:
            self._notifier.admin_order_notification(order)
        except DependencyError as exc:
            logger.warning("Admin notification for %s not sent: %s", order.order_number, exc)
            warnings.append("Failed to send admin order notification")
        return warnings

    @staticmethod
    def _parse_payment_method(raw: str) -> PaymentMethod:
        try:
            return PaymentMethod((raw or "cod").strip().lower())
        except ValueError as exc:
            raise ValidationError(
                f"Invalid payment method '{raw}'. Must be: cod or instapay"
            ) from exc

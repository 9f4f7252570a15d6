"""Application service: Update Order use case (admin partial update).

Contact details, address, notes, tracking number and payment screenshot
are plain edits. Status and payment status go through their state
machines. Identity, totals and line items can never change after
checkout.
"""

from __future__ import annotations

import logging

from shopledger.application.advance_order_status import restock_cancelled, status_moved
from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.model.order import ContactInfo, OrderStatus, PaymentStatus
from shopledger.domain.repository.order_repository import OrderRepository
from shopledger.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "email", "name", "phone", "notes", "shipping_address",
    "payment_screenshot", "tracking_number", "status", "payment_status",
})
# Silently dropped, as clients routinely echo them back.
IGNORED_FIELDS = frozenset({"id", "created_at", "updated_at"})
TEXT_FIELDS = (
    "email", "name", "phone", "notes", "payment_screenshot", "tracking_number",
    "status", "payment_status",
)


class UpdateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: int, fields: dict) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")

        changes = {k: v for k, v in fields.items() if v is not None and k not in IGNORED_FIELDS}
        rejected = sorted(set(changes) - EDITABLE_FIELDS)
        if rejected:
            raise ValidationError(f"Cannot update order field(s): {', '.join(rejected)}")
        not_text = [k for k in TEXT_FIELDS if k in changes and not isinstance(changes[k], str)]
        if not_text:
            raise ValidationError(f"Order field(s) must be text: {', '.join(not_text)}")

        previous = order.status

        if {"email", "name", "phone"} & changes.keys():
            order.contact = ContactInfo(
                email=changes.get("email", order.contact.email),
                name=changes.get("name", order.contact.name),
                phone=changes.get("phone", order.contact.phone),
            )
        if "notes" in changes:
            order.notes = str(changes["notes"])
        if "shipping_address" in changes:
            if not isinstance(changes["shipping_address"], dict):
                raise ValidationError("shipping_address must be an object")
            order.shipping_address = dict(changes["shipping_address"])
        if "payment_screenshot" in changes:
            order.payment_screenshot = changes["payment_screenshot"]
        if "tracking_number" in changes:
            order.tracking_number = str(changes["tracking_number"]).strip() or None

        cancelled_now = False
        if "status" in changes:
            status = OrderStatus.parse(changes["status"])
            if status != order.status:
                order.advance_to(status)
                cancelled_now = order.is_cancelled
        if "payment_status" in changes:
            try:
                payment_status = PaymentStatus(changes["payment_status"])
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown payment status '{changes['payment_status']}'"
                ) from exc
            if payment_status != order.payment_status:
                order.update_payment_status(payment_status)

        order.touch()
        if not self._order_repo.save_if_status(order, previous):
            raise status_moved(order)
        if cancelled_now:
            restock_cancelled(self._product_repo, order)
        logger.info("Order %s updated: %s", order.order_number, sorted(changes))

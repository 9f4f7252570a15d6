"""Plain-text email messages for each ledger event.

Only the facts each message must carry are decided here; styled HTML
templates are out of scope.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopledger.domain.model.inventory_alert import LowStockEntry
from shopledger.domain.model.order import Order

SHIPPING_HEADLINES = {
    "processing": "We are preparing your order",
    "shipped": "Your order is on its way",
    "out_for_delivery": "Your order will arrive today",
    "delivered": "Your order has been delivered",
}


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    text: str


def _item_lines(order: Order) -> list[str]:
    lines = []
    for item in order.items:
        variant = " / ".join(v for v in (item.size, item.color) if v)
        suffix = f" ({variant})" if variant else ""
        lines.append(f"  {item.quantity.value} x {item.name}{suffix} - {item.line_total}")
    return lines


def order_confirmation(order: Order) -> EmailMessage:
    lines = [
        f"Hi {order.contact.name or 'Valued Customer'},",
        "",
        f"Thanks for your order #{order.order_number}.",
        "",
        *_item_lines(order),
        "",
        f"Subtotal: {order.subtotal}",
        f"Shipping: {order.shipping}",
    ]
    if order.discount.amount:
        lines.append(f"Discount: -{order.discount}")
    lines += [f"Total: {order.total}", f"Payment: {order.payment_method.value}"]
    return EmailMessage(
        to=order.contact.email,
        subject=f"Order Confirmed #{order.order_number} - ZEN LOCAL BRAND",
        text="\n".join(lines),
    )


def admin_order_notification(order: Order, admin_email: str) -> EmailMessage:
    address = ", ".join(str(v) for v in order.shipping_address.values() if v)
    lines = [
        f"New order #{order.order_number}",
        "",
        f"Customer: {order.contact.name or 'Unknown'} <{order.contact.email}>",
        f"Phone: {order.contact.phone or 'Not provided'}",
        f"Address: {address or 'Not provided'}",
        f"Payment: {order.payment_method.value}",
    ]
    if order.payment_screenshot:
        lines.append(f"Payment screenshot: {order.payment_screenshot}")
    lines += ["", *_item_lines(order), "", f"Total: {order.total}"]
    return EmailMessage(
        to=admin_email,
        subject=f"New Order #{order.order_number} - {order.total}",
        text="\n".join(lines),
    )


def shipping_update(order: Order) -> EmailMessage:
    shipping_status = order.shipping_status
    if shipping_status is None:
        headline = "Your order has been cancelled"
    else:
        headline = SHIPPING_HEADLINES[shipping_status]
    lines = [
        f"Hi {order.contact.name or 'Customer'},",
        "",
        f"{headline}.",
        f"Order: #{order.order_number}",
    ]
    if order.tracking_number:
        lines.append(f"Tracking number: {order.tracking_number}")
    return EmailMessage(
        to=order.contact.email,
        subject=f"Order #{order.order_number} update: {headline}",
        text="\n".join(lines),
    )


def low_stock_alert(entries: list[LowStockEntry], admin_email: str) -> EmailMessage:
    lines = ["These products are at or below their low-stock threshold:", ""]
    lines += [f"  {e.name}: {e.stock} left (threshold {e.threshold})" for e in entries]
    return EmailMessage(
        to=admin_email,
        subject=f"Low inventory alert: {len(entries)} products",
        text="\n".join(lines),
    )


def verification_code(email: str, code: str) -> EmailMessage:
    return EmailMessage(
        to=email,
        subject="Your Security Code - ZEN LOCAL BRAND",
        text=(
            "Enter this code to complete your sign-in:\n\n"
            f"  {code}\n\n"
            "The code expires in 10 minutes. If you did not try to sign in, "
            "you can ignore this email."
        ),
    )

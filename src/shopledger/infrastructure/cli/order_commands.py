"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from shopledger.application.advance_order_status import AdvanceOrderStatusHandler
from shopledger.application.cancel_order import CancelOrderHandler
from shopledger.application.create_order import CreateOrderHandler
from shopledger.application.dto import OrderInput, OrderItemSpec, StatusUpdateDTO
from shopledger.application.show_order import ShowOrderHandler
from shopledger.application.track_order import TrackOrderHandler
from shopledger.application.update_payment_status import UpdatePaymentStatusHandler
from shopledger.domain.exceptions import DomainException
from shopledger.infrastructure.bootstrap import container


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '3:2,7:1:M:black' (id:qty[:size[:color]]) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        parts = [p.strip() for p in entry.strip().split(":")]
        if len(parts) < 2 or len(parts) > 4 or not parts[0]:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Quantity[:Size[:Color]]'."
            )
        try:
            qty = int(parts[1])
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{parts[1]}' for product '{parts[0]}'."
            )
        size = parts[2] or None if len(parts) > 2 else None
        color = parts[3] or None if len(parts) > 3 else None
        specs.append(OrderItemSpec(product_id=parts[0], quantity=qty, size=size, color=color))
    return specs


def _advance_handler() -> AdvanceOrderStatusHandler:
    c = container()
    return AdvanceOrderStatusHandler(c.orders, c.products, c.notifier)


def _report_status(dto: StatusUpdateDTO) -> None:
    click.echo(f"Order {dto.order_number} is now {dto.status}.")
    if not dto.notification_sent:
        click.echo(f"Warning: {dto.warning}", err=True)


@click.command("create")
@click.option("--email", required=True, help="Customer email.")
@click.option("--name", default="", help="Customer name.")
@click.option("--phone", default="", help="Customer phone.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty[:Size[:Color]],...'.")
@click.option("--shipping", default="0", help="Shipping fee in EGP.")
@click.option("--coupon", default=None, help="Coupon code.")
@click.option("--payment", default="cod", type=click.Choice(["cod", "instapay"]))
@click.option("--user", "user_id", default=None, help="Account user ID (guest if omitted).")
def order_create(
    email: str,
    name: str,
    phone: str,
    items: str,
    shipping: str,
    coupon: str | None,
    payment: str,
    user_id: str | None,
) -> None:
    """Place a new order."""
    c = container()
    handler = CreateOrderHandler(
        order_repo=c.orders,
        product_repo=c.products,
        coupon_repo=c.coupons,
        customer_repo=c.customers,
        notifier=c.notifier,
    )

    try:
        dto = handler.handle(OrderInput(
            email=email,
            name=name,
            phone=phone,
            items=_parse_items(items),
            shipping=shipping,
            coupon_code=coupon,
            payment_method=payment,
            user_id=user_id,
        ))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} placed (id={dto.id}, total={dto.total} EGP)")
    for warning in dto.warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=container().orders)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} #{dto.id}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"Customer: {dto.name} <{dto.email}>")
    click.echo(f"Created:  {dto.created_at}")
    if dto.tracking_number:
        click.echo(f"Tracking: {dto.tracking_number}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>20}")
    click.echo(f"  {'Shipping':<30} {dto.shipping:>20}")
    if dto.coupon_code:
        click.echo(f"  {'Discount (' + dto.coupon_code + ')':<30} {'-' + dto.discount:>20}")
    click.echo(f"  {'Order Total':<30} {dto.total:>20}")


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--status", required=True, help="Target status (e.g. processing, shipped).")
@click.option("--tracking", default=None, help="Carrier tracking number.")
def order_advance(order_id: int, status: str, tracking: str | None) -> None:
    """Move an order along its lifecycle and notify the customer."""
    try:
        dto = _advance_handler().handle(order_id, status, tracking)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _report_status(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
def order_cancel(order_id: int) -> None:
    """Cancel an order (puts its units back in stock)."""
    try:
        dto = CancelOrderHandler(_advance_handler()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _report_status(dto)


@click.command("pay")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status", required=True, type=click.Choice(["pending", "paid", "failed", "refunded"])
)
def order_pay(order_id: int, status: str) -> None:
    """Record a payment status after reconciling COD cash or an InstaPay transfer."""
    try:
        value = UpdatePaymentStatusHandler(container().orders).handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} payment is now {value}.")


@click.command("track")
@click.option("--number", "order_number", required=True, help="Order number, e.g. ZEN000123.")
@click.option("--email", default=None, help="Email the order was placed with.")
def order_track(order_number: str, email: str | None) -> None:
    """Show an order's progress the way the customer sees it."""
    handler = TrackOrderHandler(order_repo=container().orders)

    try:
        dto = handler.handle(order_number, email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number}: {dto.status_label}")
    for step in dto.timeline:
        mark = "x" if step.completed else " "
        current = "  <- current" if step.current else ""
        click.echo(f"  [{mark}] {step.label}{current}")
    if dto.tracking_number:
        click.echo(f"Tracking number: {dto.tracking_number}")

"""CLI commands for the Coupon aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from shopledger.application.create_coupon import CreateCouponHandler
from shopledger.application.update_coupon import ListCouponsHandler
from shopledger.application.validate_coupon import ValidateCouponHandler
from shopledger.domain.exceptions import DomainException
from shopledger.infrastructure.bootstrap import container


@click.command("create")
@click.option("--code", required=True, help="Coupon code (stored upper-cased).")
@click.option("--type", "type_", required=True, type=click.Choice(["percentage", "fixed"]))
@click.option("--value", required=True, help="Percent off, or EGP off for fixed coupons.")
@click.option("--min-order", default="0", help="Minimum order amount in EGP.")
@click.option("--max-uses", default=0, type=int, help="0 means unlimited.")
@click.option("--expires", default=None, type=click.DateTime(), help="Expiry (UTC).")
def coupon_create(
    code: str, type_: str, value: str, min_order: str, max_uses: int, expires: datetime | None
) -> None:
    """Create a coupon."""
    handler = CreateCouponHandler(coupon_repo=container().coupons)

    try:
        dto = handler.handle(
            code=code, type=type_, value=value, min_order_amount=min_order,
            max_uses=max_uses, expires_at=expires,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Coupon {dto.code} created (id={dto.id})")


@click.command("list")
def coupon_list() -> None:
    """List coupons, newest first."""
    coupons = ListCouponsHandler(coupon_repo=container().coupons).handle()

    if not coupons:
        click.echo("No coupons found.")
        return

    click.echo(f"{'Code':<16} {'Type':<11} {'Value':>8} {'Used':>10} {'Active':>7}  Expires")
    click.echo("-" * 72)
    for c in coupons:
        uses = f"{c.used_count}/{c.max_uses or '-'}"
        click.echo(
            f"{c.code:<16} {c.type:<11} {c.value:>8} {uses:>10} {str(c.is_active):>7}  {c.expires_at or '-'}"
        )


@click.command("validate")
@click.option("--code", required=True)
@click.option("--amount", "order_amount", required=True, help="Order subtotal in EGP.")
def coupon_validate(code: str, order_amount: str) -> None:
    """Check a coupon against an order amount without redeeming it."""
    handler = ValidateCouponHandler(coupon_repo=container().coupons)

    try:
        result = handler.handle(code, order_amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.valid:
        raise click.ClickException(result.error or "Invalid coupon")
    click.echo(f"{result.code}: {result.discount} EGP off")

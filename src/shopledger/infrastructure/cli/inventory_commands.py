"""CLI commands for stock levels and low-stock alerts."""

from __future__ import annotations

import click

from shopledger.application.check_low_stock import CheckLowStockHandler
from shopledger.application.show_inventory import ShowInventoryHandler
from shopledger.domain.exceptions import DomainException
from shopledger.infrastructure.bootstrap import container


@click.command("show")
def inventory_show() -> None:
    """Show current stock levels."""
    c = container()
    lines = ShowInventoryHandler(product_repo=c.products).handle(c.settings.low_stock_threshold)

    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Product':<24} {'Stock':>6} {'Threshold':>10}")
    click.echo("-" * 50)
    for line in lines:
        flag = "  LOW" if line.low else ""
        click.echo(
            f"{line.product_id:<6} {line.product_name:<24} {line.stock:>6} {line.threshold:>10}{flag}"
        )


@click.command("check")
@click.option("--threshold", default=None, type=int, help="Default threshold for products without one.")
def inventory_check(threshold: int | None) -> None:
    """Send a low-stock alert for every active product at or below its threshold."""
    c = container()
    handler = CheckLowStockHandler(c.products, c.alerts, c.notifier)

    try:
        report = handler.handle(c.settings.low_stock_threshold if threshold is None else threshold)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(report.message)
    for entry in report.products:
        click.echo(f"  {entry.name:<24} {entry.stock:>4} left (threshold {entry.threshold})")

"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from shopledger.application.add_product import AddProductHandler
from shopledger.application.set_stock import SetStockHandler
from shopledger.application.update_product import UpdateProductHandler
from shopledger.domain.exceptions import DomainException
from shopledger.infrastructure.bootstrap import container


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price in EGP (e.g. 450.00).")
@click.option("--stock", default=0, type=int, help="Units on hand.")
@click.option("--slug", default=None, help="URL slug (derived from the name if omitted).")
@click.option("--threshold", default=None, type=int, help="Per-product low-stock threshold.")
@click.option("--status", default="active", type=click.Choice(["draft", "active", "archived"]))
def product_add(
    name: str, price: str, stock: int, slug: str | None, threshold: int | None, status: str
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=container().products)

    try:
        product = handler.handle(
            name=name, price=price, stock=stock, slug=slug, status=status,
            low_stock_threshold=threshold,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.price} ({product.stock} in stock)")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = container().products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Status':<9} {'Price':>14} {'Stock':>6} {'Rating':>7}")
    click.echo("-" * 71)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.name:<24} {p.status.value:<9} {str(p.price):>14} "
            f"{p.stock:>6} {str(p.average_rating):>7}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 499.00).")
@click.option("--status", default=None, type=click.Choice(["draft", "active", "archived"]))
@click.option("--threshold", default=None, type=int, help="Low-stock threshold.")
def product_update(
    product_id: str, price: str | None, status: str | None, threshold: int | None
) -> None:
    """Update a product's price, status or low-stock threshold."""
    handler = UpdateProductHandler(product_repo=container().products)

    try:
        handler.handle(
            product_id=product_id, price=price, status=status, low_stock_threshold=threshold
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} updated")


@click.command("stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units on hand after the count.")
def product_stock(product_id: str, quantity: int) -> None:
    """Set the stock level of a product."""
    handler = SetStockHandler(product_repo=container().products)

    try:
        handler.handle(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product {product_id} set to {quantity}")

import click

from shopledger.infrastructure.bootstrap import container
from shopledger.infrastructure.cli.coupon_commands import coupon_create, coupon_list, coupon_validate
from shopledger.infrastructure.cli.inventory_commands import inventory_check, inventory_show
from shopledger.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_create,
    order_pay,
    order_show,
    order_track,
)
from shopledger.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_stock,
    product_update,
)
from shopledger.infrastructure.cli.review_commands import review_add, review_list, review_recompute
from shopledger.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override SHOPLEDGER_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """shopledger: orders, coupons, reviews and stock for the storefront"""
    configure_logging(log_level or container().settings.log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def coupon() -> None:
    """Manage coupons."""


@cli.group()
def review() -> None:
    """Manage product reviews."""


@cli.group()
def inventory() -> None:
    """Stock levels and low-stock alerts."""


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    from shopledger.infrastructure.http.app import create_app

    uvicorn.run(create_app(container()), host=host, port=port, log_config=None)


# Register subcommands
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_pay)
order.add_command(order_show)
order.add_command(order_track)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_stock)
product.add_command(product_update)
coupon.add_command(coupon_create)
coupon.add_command(coupon_list)
coupon.add_command(coupon_validate)
review.add_command(review_add)
review.add_command(review_list)
review.add_command(review_recompute)
inventory.add_command(inventory_check)
inventory.add_command(inventory_show)

"""CLI commands for product reviews."""

from __future__ import annotations

import click

from shopledger.application.list_reviews import ListReviewsHandler
from shopledger.application.recompute_ratings import RecomputeRatingsHandler
from shopledger.application.submit_review import SubmitReviewHandler
from shopledger.domain.exceptions import DomainException
from shopledger.infrastructure.bootstrap import container


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--user", "user_id", required=True, help="Reviewer's user ID.")
@click.option("--rating", required=True, type=int, help="1 to 5.")
@click.option("--title", default="")
@click.option("--comment", default="")
@click.option("--name", "user_name", default=None, help="Display name.")
def review_add(
    product_id: str, user_id: str, rating: int, title: str, comment: str, user_name: str | None
) -> None:
    """Submit a review and refresh the product's rating."""
    c = container()
    handler = SubmitReviewHandler(review_repo=c.reviews, product_repo=c.products)

    try:
        dto = handler.handle(
            product_id=product_id, user_id=user_id, rating=rating,
            title=title, comment=comment, user_name=user_name,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Review {dto.id} added for product {product_id}")


@click.command("list")
@click.option("--product", "product_id", required=True, help="Product ID.")
def review_list(product_id: str) -> None:
    """List a product's reviews, newest first."""
    try:
        result = ListReviewsHandler(review_repo=container().reviews).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Average {result.average_rating} from {result.total_reviews} review(s)")
    for r in result.reviews:
        click.echo(f"  [{r.rating}] {r.title or '(no title)'}  by {r.user_name}  helpful={r.helpful}")


@click.command("recompute")
def review_recompute() -> None:
    """Recompute every product's rating from its reviews."""
    c = container()
    failed = RecomputeRatingsHandler(product_repo=c.products, review_repo=c.reviews).handle()

    if failed:
        raise click.ClickException(f"Rating recompute failed for: {', '.join(failed)}")
    click.echo("Ratings recomputed.")

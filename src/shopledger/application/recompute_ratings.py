"""Application service: Recompute Ratings use case.

Reconciliation for products whose rating recompute failed after a review
was stored. Safe to run at any time.
"""

from __future__ import annotations

from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.repository.review_repository import ReviewRepository
from shopledger.domain.service.rating_service import RatingAggregationService


class RecomputeRatingsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
    ) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo

    def handle(self) -> list[str]:
        """Recompute every product; returns the ids that still failed."""
        svc = RatingAggregationService(self._product_repo, self._review_repo)
        return [p.id for p in self._product_repo.list_all() if not svc.recompute(p.id)]

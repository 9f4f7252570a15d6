"""Domain service: Rating Aggregation.

Re-derives a product's ``average_rating`` and ``review_count`` from its
approved reviews. The recompute reads the full review set every time, so
running it again always converges, whatever happened in between.

Reviews are only ever added: a writer that sees the count move after its
write goes round again, so the last write covers every stored review.
"""

from __future__ import annotations

import logging

from shopledger.domain.exceptions import DependencyError
from shopledger.domain.model.product import average_rating
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.repository.review_repository import ReviewRepository

logger = logging.getLogger(__name__)

RATING_RETRIES = 3


class RatingAggregationService:

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
        retries: int = RATING_RETRIES,
    ) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo
        self._retries = retries

    def recompute(self, product_id: str) -> bool:
        """Recompute one product; returns False if every attempt failed.

        A failure never propagates: the review that triggered the recompute
        is already stored, and the product is logged for reconciliation.
        """
        for attempt in range(1, self._retries + 1):
            try:
                self._write_until_current(product_id)
                return True
            except DependencyError as exc:
                logger.warning(
                    "Rating recompute for product %s failed (attempt %d/%d): %s",
                    product_id, attempt, self._retries, exc,
                )
        logger.error("Rating for product %s needs reconciliation", product_id)
        return False

    def _write_until_current(self, product_id: str) -> None:
        ratings = self._approved_ratings(product_id)
        while True:
            self._product_repo.set_rating(product_id, average_rating(ratings), len(ratings))
            latest = self._approved_ratings(product_id)
            if len(latest) == len(ratings):
                return
            ratings = latest

    def _approved_ratings(self, product_id: str) -> list[int]:
        return [
            review.rating
            for review in self._review_repo.list_for_product(product_id)
            if review.is_approved
        ]

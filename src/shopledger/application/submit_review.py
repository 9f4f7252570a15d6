"""Application service: Submit Review use case.

The duplicate check is not a separate query: the repository's insert
enforces (product, user) uniqueness, so two concurrent submissions by
the same user can never both land.
"""

from __future__ import annotations

import logging

from shopledger.application.dto import ReviewDTO, to_review_dto
from shopledger.domain.exceptions import NotFoundError
from shopledger.domain.model.review import Review
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.repository.review_repository import ReviewRepository
from shopledger.domain.service.rating_service import RatingAggregationService

logger = logging.getLogger(__name__)


class SubmitReviewHandler:

    def __init__(
        self,
        review_repo: ReviewRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._review_repo = review_repo
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        user_id: str,
        rating: int,
        title: str = "",
        comment: str = "",
        user_name: str | None = None,
    ) -> ReviewDTO:
        review = Review.create(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            title=title,
            comment=comment,
            user_name=user_name,
        )
        if self._product_repo.get_by_id(product_id) is None:
            raise NotFoundError(f"Product not found: '{product_id}'")

        review = self._review_repo.add(review)
        logger.info("Review %s added for product %s", review.id, product_id)

        RatingAggregationService(self._product_repo, self._review_repo).recompute(product_id)
        return to_review_dto(review)

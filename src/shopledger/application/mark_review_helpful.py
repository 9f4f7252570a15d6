"""Application service: Mark Review Helpful use case.

Votes are not tied to a voter, so the same person can vote repeatedly.
"""

from __future__ import annotations

from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.repository.review_repository import ReviewRepository


class MarkReviewHelpfulHandler:

    def __init__(self, review_repo: ReviewRepository) -> None:
        self._review_repo = review_repo

    def handle(self, review_id: str) -> int:
        if not review_id:
            raise ValidationError("reviewId is required")
        review = self._review_repo.increment_helpful(review_id)
        if review is None:
            raise NotFoundError(f"Review {review_id} not found")
        return review.helpful

"""Application service: List Reviews use case (query)."""

from __future__ import annotations

from shopledger.application.dto import ReviewListDTO, to_review_dto
from shopledger.domain.exceptions import ValidationError
from shopledger.domain.model.product import average_rating
from shopledger.domain.repository.review_repository import ReviewRepository


class ListReviewsHandler:

    def __init__(self, review_repo: ReviewRepository) -> None:
        self._review_repo = review_repo

    def handle(self, product_id: str) -> ReviewListDTO:
        if not product_id:
            raise ValidationError("productId is required")
        reviews = [r for r in self._review_repo.list_for_product(product_id) if r.is_approved]
        return ReviewListDTO(
            reviews=[to_review_dto(r) for r in reviews],
            average_rating=str(average_rating([r.rating for r in reviews])),
            total_reviews=len(reviews),
        )

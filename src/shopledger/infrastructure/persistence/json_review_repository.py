"""JSON-file-backed implementation of ReviewRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from shopledger.domain.exceptions import DuplicateReview
from shopledger.domain.model.review import Review, ReviewStatus
from shopledger.domain.repository.review_repository import ReviewRepository
from shopledger.infrastructure.persistence.json_collection import (
    DEFAULT_TIMEOUT,
    JsonCollection,
    next_numeric_id,
)


class JsonReviewRepository(ReviewRepository):

    def __init__(self, file_path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._collection = JsonCollection(file_path, timeout)

    # --- ReviewRepository interface -------------------------------------------

    def add(self, review: Review) -> Review:
        with self._collection.transaction() as records:
            for raw in records:
                if raw["product_id"] == review.product_id and raw["user_id"] == review.user_id:
                    raise DuplicateReview("You have already reviewed this product")
            review.id = str(next_numeric_id(records))
            records.append(self._to_raw(review))
        return review

    def get_by_id(self, review_id: str) -> Review | None:
        for raw in self._collection.read():
            if raw["id"] == review_id:
                return self._to_domain(raw)
        return None

    def list_for_product(self, product_id: str) -> list[Review]:
        reviews = [
            self._to_domain(raw)
            for raw in self._collection.read()
            if raw["product_id"] == product_id
        ]
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)

    def increment_helpful(self, review_id: str) -> Review | None:
        with self._collection.transaction() as records:
            for raw in records:
                if raw["id"] == review_id:
                    raw["helpful"] += 1
                    return self._to_domain(raw)
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(review: Review) -> dict:
        return {
            "id": review.id,
            "product_id": review.product_id,
            "user_id": review.user_id,
            "user_name": review.user_name,
            "rating": review.rating,
            "title": review.title,
            "comment": review.comment,
            "status": review.status.value,
            "helpful": review.helpful,
            "created_at": review.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Review:
        return Review(
            id=raw["id"],
            product_id=raw["product_id"],
            user_id=raw["user_id"],
            user_name=raw.get("user_name", "Anonymous"),
            rating=raw["rating"],
            title=raw.get("title", ""),
            comment=raw.get("comment", ""),
            status=ReviewStatus(raw.get("status", "approved")),
            helpful=raw.get("helpful", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

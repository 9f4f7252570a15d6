"""Review aggregate: one rating per (product, user)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shopledger.domain.exceptions import InvalidRating, ValidationError

MIN_RATING = 1
MAX_RATING = 5


class ReviewStatus(Enum):
    APPROVED = "approved"


@dataclass
class Review:

    id: str | None
    product_id: str
    user_id: str
    rating: int
    title: str = ""
    comment: str = ""
    user_name: str = "Anonymous"
    status: ReviewStatus = ReviewStatus.APPROVED
    helpful: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        product_id: str,
        user_id: str,
        rating: int,
        title: str = "",
        comment: str = "",
        user_name: str | None = None,
    ) -> Review:
        if not product_id or not user_id:
            raise ValidationError("productId and userId are required")
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise InvalidRating("Rating must be a whole number between 1 and 5")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidRating("Rating must be between 1 and 5")
        # Auto-approved: there is no moderation queue.
        return Review(
            id=None,
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            title=title.strip(),
            comment=comment.strip(),
            user_name=(user_name or "").strip() or "Anonymous",
        )

    @property
    def is_approved(self) -> bool:
        return self.status == ReviewStatus.APPROVED

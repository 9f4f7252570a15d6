"""Abstract repository for the Review aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopledger.domain.model.review import Review


class ReviewRepository(ABC):

    @abstractmethod
    def add(self, review: Review) -> Review:
        """Insert a review, assigning its ID.

        Enforces uniqueness of (product_id, user_id) in the same atomic
        step as the insert; raises DuplicateReview on a repeat.
        """

    @abstractmethod
    def get_by_id(self, review_id: str) -> Review | None:
        """Return a review by its ID, or None."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[Review]:
        """Return every review of a product, newest first."""

    @abstractmethod
    def increment_helpful(self, review_id: str) -> Review | None:
        """Atomically add one helpful vote; None if the review is unknown."""

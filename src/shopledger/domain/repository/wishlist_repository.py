"""Abstract repository for the Wishlist aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopledger.domain.model.wishlist import Wishlist


class WishlistRepository(ABC):

    @abstractmethod
    def get_for_user(self, user_id: str) -> Wishlist | None:
        """Return a user's wishlist, or None if they never saved one."""

    @abstractmethod
    def save(self, wishlist: Wishlist) -> None:
        """Persist a new or updated wishlist."""

"""Application services: Wishlist use cases."""

from __future__ import annotations

from shopledger.application.dto import WishlistItemDTO, to_wishlist_dtos
from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.model.wishlist import Wishlist
from shopledger.domain.repository.product_repository import ProductRepository
from shopledger.domain.repository.wishlist_repository import WishlistRepository


def _require(user_id: str, product_id: str) -> None:
    if not user_id or not product_id:
        raise ValidationError("userId and productId are required")


class ShowWishlistHandler:

    def __init__(self, wishlist_repo: WishlistRepository) -> None:
        self._wishlist_repo = wishlist_repo

    def handle(self, user_id: str) -> list[WishlistItemDTO]:
        if not user_id:
            raise ValidationError("userId is required")
        return to_wishlist_dtos(self._wishlist_repo.get_for_user(user_id))


class AddToWishlistHandler:

    def __init__(
        self,
        wishlist_repo: WishlistRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._wishlist_repo = wishlist_repo
        self._product_repo = product_repo

    def handle(self, user_id: str, product_id: str) -> bool:
        """Snapshot the product into the wishlist; False if already saved."""
        _require(user_id, product_id)
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: '{product_id}'")

        wishlist = self._wishlist_repo.get_for_user(user_id) or Wishlist(user_id=user_id)
        added = wishlist.add(product)
        if added:
            self._wishlist_repo.save(wishlist)
        return added


class RemoveFromWishlistHandler:

    def __init__(self, wishlist_repo: WishlistRepository) -> None:
        self._wishlist_repo = wishlist_repo

    def handle(self, user_id: str, product_id: str) -> bool:
        _require(user_id, product_id)
        wishlist = self._wishlist_repo.get_for_user(user_id)
        if wishlist is None or not wishlist.remove(product_id):
            return False
        self._wishlist_repo.save(wishlist)
        return True

"""Integration tests for the wishlist use cases."""

import pytest

from shopledger.application.wishlist import (
    AddToWishlistHandler,
    RemoveFromWishlistHandler,
    ShowWishlistHandler,
)
from shopledger.domain.exceptions import NotFoundError, ValidationError
from shopledger.domain.model.product import Product
from shopledger.domain.model.value_objects import Money
from tests.fakes import FakeProductRepository, FakeWishlistRepository


def _setup():
    products = FakeProductRepository([
        Product(id="1", name="Zen Tee", slug="zen-tee", price=Money.of("250"), images=["t.jpg"]),
    ])
    wishlists = FakeWishlistRepository()
    return AddToWishlistHandler(wishlists, products), wishlists


class TestWishlist:

    def test_add_and_show(self):
        add, wishlists = _setup()
        assert add.handle("u1", "1")
        items = ShowWishlistHandler(wishlists).handle("u1")
        assert [(i.product_id, i.price, i.image) for i in items] == [("1", "250.00", "t.jpg")]

    def test_add_twice_keeps_one(self):
        add, wishlists = _setup()
        add.handle("u1", "1")
        assert not add.handle("u1", "1")
        assert len(ShowWishlistHandler(wishlists).handle("u1")) == 1

    def test_unknown_product(self):
        add, _ = _setup()
        with pytest.raises(NotFoundError):
            add.handle("u1", "9")

    def test_remove(self):
        add, wishlists = _setup()
        add.handle("u1", "1")
        remove = RemoveFromWishlistHandler(wishlists)
        assert remove.handle("u1", "1")
        assert not remove.handle("u1", "1")
        assert ShowWishlistHandler(wishlists).handle("u1") == []

    def test_empty_for_new_user(self):
        assert ShowWishlistHandler(FakeWishlistRepository()).handle("nobody") == []

    def test_ids_required(self):
        add, _ = _setup()
        with pytest.raises(ValidationError):
            add.handle("", "1")

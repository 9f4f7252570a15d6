"""Abstract repository for the Coupon aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from shopledger.domain.model.coupon import Coupon


class CouponRepository(ABC):

    @abstractmethod
    def get_by_id(self, coupon_id: str) -> Coupon | None:
        """Return a coupon by its ID, or None."""

    @abstractmethod
    def get_by_code(self, code: str) -> Coupon | None:
        """Return the coupon for a normalized code, or None.

        When several coupons share a code (only one may be active) the
        active one wins.
        """

    @abstractmethod
    def list_all(self) -> list[Coupon]:
        """Return every coupon, newest first."""

    @abstractmethod
    def add(self, coupon: Coupon) -> Coupon:
        """Insert a new coupon, assigning its ID.

        Raises DuplicateCode if an active coupon with the same code exists;
        the check and the insert are one atomic step.
        """

    @abstractmethod
    def save(self, coupon: Coupon) -> None:
        """Persist admin edits to an existing coupon."""

    @abstractmethod
    def redeem(self, code: str, now: datetime) -> Coupon | None:
        """Conditionally count one use.

        Increments ``used_count`` only if the coupon is redeemable at *now*
        (active, unexpired, uses remaining), as a single compare-and-increment.
        Returns the updated coupon, or None when nothing was incremented.
        """

    @abstractmethod
    def unredeem(self, code: str) -> None:
        """Give back one use. Only for compensating a checkout that failed
        after its redemption was counted."""

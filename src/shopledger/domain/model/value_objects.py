"""Money and quantities as the ledger counts them.

Every price, discount and total in the store is an EGP amount held as a
Decimal. Coupon percentages produce fractions of a piastre, so discounts
are rounded half-up to whole cents (``Money.rounded``) before they reach
an order.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shopledger.domain.exceptions import ValidationError

CENTS = Decimal("0.01")
STORE_CURRENCY = "EGP"


@dataclass(frozen=True)
class Money:
    """A non-negative amount in one currency (EGP unless stated)."""

    amount: Decimal
    currency: str = STORE_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money needs a Decimal amount, not {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Build an EGP amount from user or file input ("450", 450, "99.90")."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same(other).amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        # A discount larger than the subtotal is clamped before it gets here.
        remaining = self.amount - self._same(other).amount
        if remaining < 0:
            raise ValidationError(f"Cannot take {other} from {self}")
        return Money(remaining, self.currency)

    def __mul__(self, units: int) -> Money:
        if not isinstance(units, int):
            raise TypeError(f"Money multiplies by a unit count, not {type(units).__name__}")
        return Money(self.amount * units, self.currency)

    def _compare(self, other: Money, op) -> bool:
        return op(self.amount, self._same(other).amount)

    def __lt__(self, other: Money) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Money) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: Money) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Money) -> bool:
        return self._compare(other, operator.ge)

    def min(self, other: Money) -> Money:
        return self if self <= other else other

    def rounded(self) -> Money:
        """Half-up to whole cents: 10% of 199.95 is 20.00, not 19.995."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def _same(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValidationError(f"Cannot mix {self.currency} and {other.currency} amounts")
        return other


@dataclass(frozen=True)
class Quantity:
    """Units of one product on an order line; always at least one."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True is not "one tee".
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be a whole number, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be at least 1")

    def __str__(self) -> str:
        return str(self.value)

"""
Signed balance arithmetic.

Accounts store a balance as a non-negative magnitude plus a side
(Dr or Cr). That pair is an encoding of one signed number, so all
arithmetic happens on a single Balance type: Dr is positive, Cr is
negative. Posting, ledger replay and statements all go through it,
which keeps the sign-flip rule identical everywhere.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from books_ledger.models.enums import AccountGroup, BalanceSide

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize(value) -> Decimal:
    """Round a money amount to 2 places, half up."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Balance:
    """A signed money amount, positive on the Dr side."""

    amount: Decimal = ZERO

    @classmethod
    def from_side(cls, magnitude, side: BalanceSide) -> "Balance":
        magnitude = quantize(magnitude)
        if magnitude < 0:
            raise ValueError("balance magnitude cannot be negative")
        return cls(magnitude if side == BalanceSide.DR else -magnitude)

    def apply(self, debit=ZERO, credit=ZERO) -> "Balance":
        """Return the balance after a debit and/or credit."""
        return Balance(quantize(self.amount + quantize(debit) - quantize(credit)))

    def __add__(self, other: "Balance") -> "Balance":
        return Balance(quantize(self.amount + other.amount))

    @property
    def magnitude(self) -> Decimal:
        return quantize(abs(self.amount))

    @property
    def is_zero(self) -> bool:
        return self.magnitude == ZERO

    def side(self, default: BalanceSide = BalanceSide.DR) -> BalanceSide:
        if self.amount > 0:
            return BalanceSide.DR
        if self.amount < 0:
            return BalanceSide.CR
        return default

    def normalized(self, group: AccountGroup) -> tuple[Decimal, BalanceSide]:
        """
        Canonical (magnitude, side) pair for an account of this group.

        A zero balance takes the group's natural side.
        """
        return self.magnitude, self.side(default=group.natural_side)

    def natural_amount(self, group: AccountGroup) -> Decimal:
        """
        Signed amount read from the group's natural side.

        Positive when the balance sits on the side the group normally
        carries (Dr for assets, Cr for income), negative otherwise.
        """
        if group.natural_side == BalanceSide.DR:
            return quantize(self.amount)
        return quantize(-self.amount)

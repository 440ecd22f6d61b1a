"""
Common Value Objects

- Money: a non-negative monetary amount with currency, used for prices
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from shared.domain.base import ValueObject

CENT = Decimal('0.01')
DEFAULT_CURRENCY = 'TND'


def quantize_amount(value) -> Decimal:
    """Round a number to currency precision (2 decimal places)."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports multiplication by a factor (rate x hours).
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * Decimal(factor), self.currency)

    def quantized(self) -> 'Money':
        """Same amount rounded half-up to cents"""
        return Money(quantize_amount(self.amount), self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"

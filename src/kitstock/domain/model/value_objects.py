"""Money, the one value object prices, line totals and revenue share."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import total_ordering

from kitstock.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "PLN"

_ZERO = Decimal("0")


@total_ordering
@dataclass(frozen=True)
class Money:
    """Non-negative Decimal amount tagged with a currency code.

    Kit prices, sale prices and badge prices are all Money; mixing
    currencies in arithmetic or comparisons is a ValidationError.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money needs a Decimal amount, got {type(self.amount).__name__}"
            )
        if self.amount < _ZERO:
            raise ValidationError(f"Price cannot be negative: {self.amount}")

    @classmethod
    def of(cls, amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build Money from CLI or JSON input, going through str for floats."""
        try:
            return cls(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Not a price: {amount!r}") from exc

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(Decimal("0.00"), currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == _ZERO

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._checked(other).amount, self.currency)

    def __mul__(self, quantity: int) -> Money:
        if not isinstance(quantity, int):
            raise TypeError(f"Money times {type(quantity).__name__} is undefined")
        return Money(self.amount * quantity, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._checked(other).amount

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def _checked(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(
                f"Currency mismatch: {self.currency} vs {other.currency}"
            )
        return other

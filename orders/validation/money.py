"""Exact decimal money with a currency code."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import reduce
from typing import Any, Iterable, Mapping, Optional

from .errors import CurrencyMismatchError

# shape of the money columns
MONEY_MAX_DIGITS = 19
MONEY_DECIMAL_PLACES = 4


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "currency", str(self.currency).upper())

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(Decimal("0"), currency)

    @classmethod
    def coerce(cls, value: Any, default_currency: str) -> "Money":
        """Build Money from a Money, a {"amount", "currency"} mapping or a bare number.

        Raises ValueError when the value cannot be read as money.
        """
        if isinstance(value, Money):
            return value
        if isinstance(value, Mapping):
            if "amount" not in value:
                raise ValueError("money mapping needs an amount")
            return cls(to_decimal(value["amount"]), value.get("currency") or default_currency)
        if isinstance(value, bool):
            raise ValueError("booleans are not money")
        return cls(to_decimal(value), default_currency)

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: Any) -> "Money":
        if isinstance(factor, Money) or isinstance(factor, bool):
            return NotImplemented
        return Money(self.amount * to_decimal(factor), self.currency)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "currency": self.currency}


def to_decimal(value: Any) -> Decimal:
    # floats go through str() so 0.1 stays 0.1
    if isinstance(value, bool):
        raise ValueError(f"not a decimal: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"not a decimal: {value!r}")
    if not result.is_finite():
        raise ValueError(f"not a finite decimal: {value!r}")
    return result


def sum_money(values: Iterable[Money], currency: Optional[str] = None) -> Money:
    """Left-to-right exact sum; an empty sequence sums to zero in ``currency``."""
    values = list(values)
    if not values:
        if currency is None:
            raise ValueError("an empty sum needs a currency")
        return Money.zero(currency)
    return reduce(lambda acc, item: acc + item, values)


def fits_precision(amount: Decimal, max_digits: int = MONEY_MAX_DIGITS,
                   decimal_places: int = MONEY_DECIMAL_PLACES) -> bool:
    """True when ``amount`` can be stored in a decimal column of that shape without rounding."""
    if abs(amount) >= Decimal(10) ** (max_digits - decimal_places):
        return False
    return amount == amount.quantize(Decimal(1).scaleb(-decimal_places))

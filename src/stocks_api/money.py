"""
# money.py

Money: an arbitrary-precision decimal amount with a currency-prefixed text
form and magnitude-suffix parsing.

Usage:
    price = Money.parse('$172.50')
    str(price)               # '$172.50'
    f'{price:f}'             # '$172.50'
    price.to_text()          # '$172.50'

A trailing magnitude letter (M, B, T) is stripped on parse and the amount is
scaled by 10**6, 10**9 and 10**12 respectively, so '2.5M' parses to
2500000. Every text form carries the currency prefix exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, getcontext
from typing import Dict

# Enough precision for catalog prices and market caps
getcontext().prec = 28

CURRENCY_PREFIX = '$'

# Exponent applied for each recognised magnitude suffix
_SCALE: Dict[str, int] = {
    'M': 6,
    'B': 9,
    'T': 12,
}


class InvalidMoneyError(ValueError):
    """Raised when a string cannot be parsed as a money value."""


@dataclass(frozen=True, order=True)
class Money:
    """Immutable money amount backed by a Decimal.

    Equality and ordering compare the underlying amount. Addition and
    subtraction with another Money return a new Money.
    """

    amount: Decimal = Decimal('0')

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, 'amount', Decimal(self.amount))
            except (InvalidOperation, TypeError, ValueError) as exc:
                raise InvalidMoneyError(f"invalid money amount: {self.amount!r}") from exc
        if not self.amount.is_finite():
            raise InvalidMoneyError(f"money amount must be finite: {self.amount!r}")

    @classmethod
    def parse(cls, text: str) -> 'Money':
        """Parse text such as '$12.34', '5', or '$2.71T'.

        One leading currency prefix is stripped, then one trailing magnitude
        suffix. Raises InvalidMoneyError if what remains is not a finite
        decimal number.
        """
        if not isinstance(text, str):
            raise InvalidMoneyError(f"money text must be a string: {text!r}")
        s = text
        if s.startswith(CURRENCY_PREFIX):
            s = s[len(CURRENCY_PREFIX):]
        factor = 0
        if s and s[-1] in _SCALE:
            factor = _SCALE[s[-1]]
            s = s[:-1]
        try:
            dec = Decimal(s)
        except (InvalidOperation, ValueError) as exc:
            raise InvalidMoneyError(f"invalid money text: {text!r}") from exc
        if not dec.is_finite():
            raise InvalidMoneyError(f"invalid money text: {text!r}")
        return cls(dec.scaleb(factor))

    def to_text(self) -> str:
        """Serialized form used in JSON responses."""
        return CURRENCY_PREFIX + str(self.amount)

    def __str__(self) -> str:
        return self.to_text()

    def __format__(self, spec: str) -> str:
        return CURRENCY_PREFIX + format(self.amount, spec)

    def __add__(self, other: object) -> 'Money':
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount + other.amount)

    def __sub__(self, other: object) -> 'Money':
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount - other.amount)

    def __neg__(self) -> 'Money':
        return Money(-self.amount)


__all__ = ['Money', 'InvalidMoneyError', 'CURRENCY_PREFIX']

#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer minor units internally.
Prevents floating-point errors and provides type-safe currency operations.
"""

from dataclasses import dataclass

from .currency import (
    currency_exponent,
    format_minor_units,
    minor_units_to_decimal_str,
    parse_decimal_str_to_minor_units,
    split_evenly,
)


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in minor units of a single currency.

    Supports both positive (credits) and negative (debits) amounts, matching
    the sign convention of Monzo transactions.

    Examples:
        >>> spend = Money.from_minor_units(-1500, "GBP")
        >>> str(spend)
        '-15.00 GBP'
        >>> spend.abs().to_decimal_str()
        '15.00'
        >>> [m.amount for m in Money.from_minor_units(1000, "GBP").split(3)]
        [334, 333, 333]
    """

    amount: int
    currency: str = "GBP"

    @classmethod
    def from_minor_units(cls, amount: int, currency: str = "GBP") -> "Money":
        """Create Money from integer minor units."""
        return cls(amount=amount, currency=currency.upper())

    @classmethod
    def from_decimal_str(cls, value: str, currency: str = "GBP") -> "Money":
        """
        Parse from a decimal string such as Splitwise's "12.34".

        Args:
            value: Decimal string
            currency: ISO currency code

        Returns:
            Money object
        """
        currency = currency.upper()
        return cls(amount=parse_decimal_str_to_minor_units(value, currency_exponent(currency)), currency=currency)

    def to_decimal_str(self) -> str:
        """Get value as a plain decimal string, the format Splitwise expects."""
        return minor_units_to_decimal_str(self.amount, currency_exponent(self.currency))

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(amount=abs(self.amount), currency=self.currency)

    def is_debit(self) -> bool:
        """True for outgoing (negative) amounts."""
        return self.amount < 0

    def split(self, parts: int) -> list["Money"]:
        """
        Split a non-negative amount into ``parts`` maximally equal shares.

        The first ``amount % parts`` shares carry one extra minor unit.

        Raises:
            ValueError: If the amount is negative or parts is less than 1
        """
        return [Money(amount=share, currency=self.currency) for share in split_evenly(self.amount, parts)]

    def __str__(self) -> str:
        """Format as "12.34 GBP"."""
        return format_minor_units(self.amount, self.currency)

#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All monetary calculations use integer minor units to avoid floating-point errors.

Currency Systems:
- Monzo reports amounts as signed integer minor units (pence for GBP)
- Splitwise expects decimal strings ("12.34") in its forms and returns
  the same format in expense payloads
- Display uses "12.34 GBP"

Key Principles:
- Never use floating-point arithmetic for currency calculations
- Convert to and from decimal strings with integer arithmetic only
- Validate calculations with sum checks
"""

from typing import Any

DEFAULT_EXPONENT = 2

# ISO 4217 currencies whose minor unit is not 1/100
CURRENCY_EXPONENTS: dict[str, int] = {
    "BHD": 3,
    "CLP": 0,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
    "VND": 0,
}


def currency_exponent(currency: str) -> int:
    """Number of decimal places used by a currency's minor unit."""
    return CURRENCY_EXPONENTS.get(currency.upper(), DEFAULT_EXPONENT)


def minor_units_to_decimal_str(amount: int, exponent: int = DEFAULT_EXPONENT) -> str:
    """
    Convert minor units to a decimal string using pure integer arithmetic.

    Args:
        amount: Amount in minor units (may be negative)
        exponent: Decimal places of the currency's minor unit

    Returns:
        Decimal string

    Examples:
        minor_units_to_decimal_str(4599) -> "45.99"
        minor_units_to_decimal_str(-5) -> "-0.05"
        minor_units_to_decimal_str(1500, 0) -> "1500"
    """
    is_negative = amount < 0
    abs_amount = abs(int(amount))

    if exponent == 0:
        body = str(abs_amount)
    else:
        scale = 10**exponent
        whole = abs_amount // scale
        fraction = abs_amount % scale
        body = f"{whole}.{fraction:0{exponent}d}"

    return f"-{body}" if is_negative else body


def parse_decimal_str_to_minor_units(value: str, exponent: int = DEFAULT_EXPONENT) -> int:
    """
    Parse a decimal string into minor units using integer arithmetic only.

    Extra fractional digits beyond the exponent are truncated.

    Examples:
        parse_decimal_str_to_minor_units("12.34") -> 1234
        parse_decimal_str_to_minor_units("12.5") -> 1250
        parse_decimal_str_to_minor_units("1,234") -> 123400
        parse_decimal_str_to_minor_units("") -> 0

    Raises:
        ValueError: If the string is not a decimal number
    """
    clean = value.replace(",", "").strip()

    if not clean:
        return 0

    is_negative = clean.startswith("-")
    if is_negative or clean.startswith("+"):
        clean = clean[1:]

    if "." in clean:
        whole_str, fraction_str = clean.split(".", 1)
    else:
        whole_str, fraction_str = clean, ""

    if not (whole_str or fraction_str) or not (whole_str + fraction_str).isdigit():
        raise ValueError(f"Not a decimal amount: {value!r}")

    whole = int(whole_str) if whole_str else 0
    fraction = int(fraction_str.ljust(exponent, "0")[:exponent]) if exponent else 0
    total = whole * 10**exponent + fraction

    return -total if is_negative else total


def format_minor_units(amount: int, currency: str) -> str:
    """Format minor units for display, e.g. "12.34 GBP"."""
    return f"{minor_units_to_decimal_str(amount, currency_exponent(currency))} {currency.upper()}"


def validate_sum_equals_total(amounts: list[int], total: int) -> bool:
    """Check that integer amounts sum exactly to the total."""
    return sum(amounts) == total


def summarize_shares(shares: list[int]) -> dict[str, Any]:
    """
    Summarize a list of owed shares for logging and reports.

    Args:
        shares: Per-participant shares in minor units

    Returns:
        Dictionary with count, total and spread of the shares
    """
    if not shares:
        return {"count": 0, "total": 0, "largest": 0, "smallest": 0, "spread": 0}

    return {
        "count": len(shares),
        "total": sum(shares),
        "largest": max(shares),
        "smallest": min(shares),
        "spread": max(shares) - min(shares),
    }


def split_evenly(amount: int, parts: int) -> list[int]:
    """
    Divide a non-negative amount into maximally equal integer parts.

    Every part receives ``amount // parts``; the first ``amount % parts``
    parts receive one extra minor unit, so the parts always sum to the
    amount and differ by at most one.

    Args:
        amount: Amount in minor units (must be >= 0)
        parts: Number of parts (must be >= 1)

    Returns:
        List of ``parts`` integer amounts

    Example:
        split_evenly(1000, 3) -> [334, 333, 333]

    Raises:
        ValueError: If amount is negative or parts is less than 1
    """
    if parts < 1:
        raise ValueError(f"Cannot split into {parts} parts")
    if amount < 0:
        raise ValueError(f"Cannot split negative amount {amount}")

    base, remainder = divmod(amount, parts)
    return [base + 1 if i < remainder else base for i in range(parts)]

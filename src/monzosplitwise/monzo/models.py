#!/usr/bin/env python3
"""
Monzo Domain Models

Type-safe models representing the parts of the Monzo API this tool reads.
Amounts use the Money primitive; timestamps are timezone-aware datetimes.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..core.money import Money

# Account type of a Monzo current account, preferred over prepaid/joint
RETAIL_ACCOUNT_TYPE = "uk_retail"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp as returned by Monzo.

    Naive timestamps are assumed to be UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Account:
    """Monzo account from API."""

    id: str
    type: str
    description: str = ""
    closed: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=data["id"],
            type=data.get("type", ""),
            description=data.get("description", ""),
            closed=data.get("closed", False),
        )


@dataclass(frozen=True)
class Transaction:
    """
    Monzo transaction, a read-only snapshot for one reconciliation run.

    Note: amount is signed, negative amounts are debits (money leaving the account).
    """

    id: str
    amount: Money
    description: str
    memo: str
    created: datetime
    merchant_name: str | None = None

    @property
    def currency(self) -> str:
        return self.amount.currency

    @property
    def display_name(self) -> str:
        """Merchant name when Monzo resolved one, otherwise the raw description."""
        return self.merchant_name or self.description

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """
        Create Transaction from a Monzo API dict.

        The merchant field is an object when requested with ``expand[]=merchant``
        and a bare merchant id (or null) otherwise.

        Args:
            data: Dictionary from the Monzo transactions endpoint

        Returns:
            Transaction instance
        """
        merchant = data.get("merchant")
        merchant_name = merchant.get("name") if isinstance(merchant, dict) else None

        return cls(
            id=data["id"],
            amount=Money.from_minor_units(int(data["amount"]), data.get("currency", "GBP")),
            description=data.get("description") or "",
            memo=data.get("notes") or "",
            created=parse_timestamp(data["created"]),
            merchant_name=merchant_name or None,
        )

#!/usr/bin/env python3
"""
Splitwise Domain Models

Type-safe models for the Splitwise API objects this tool reads: the current
user, groups with their members, and existing expenses (ledger entries).
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.money import Money

# Splitwise uses group id 0 for expenses that are not in any group
UNGROUPED_GROUP_ID = 0


@dataclass(frozen=True)
class User:
    """Authenticated Splitwise user."""

    id: int
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    default_currency: str | None = None

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.email or str(self.id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=int(data["id"]),
            email=data.get("email") or "",
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            default_currency=data.get("default_currency"),
        )


@dataclass(frozen=True)
class Member:
    """Group member; only the id matters for splitting."""

    id: int
    first_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Member":
        return cls(id=int(data["id"]), first_name=data.get("first_name") or "")


@dataclass(frozen=True)
class Group:
    """
    Splitwise group with its members in API order.

    The API also lists a pseudo-group with id 0 ("Non-group expenses"); it is
    kept as returned and takes part in name resolution like any other group.
    """

    id: int
    name: str
    members: tuple[Member, ...] = ()

    @property
    def member_ids(self) -> list[int]:
        return [m.id for m in self.members]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        """
        Create Group from Splitwise API dict.

        Duplicate member ids are dropped, keeping first occurrence order.
        """
        members: list[Member] = []
        seen: set[int] = set()
        for raw in data.get("members") or []:
            member = Member.from_dict(raw)
            if member.id not in seen:
                seen.add(member.id)
                members.append(member)

        return cls(id=int(data["id"]), name=data.get("name") or "", members=tuple(members))


@dataclass(frozen=True)
class LedgerEntry:
    """
    Existing Splitwise expense.

    Only ``details`` takes part in duplicate detection; the remaining fields
    are kept for logging and reports.
    """

    id: int
    group_id: int
    description: str
    details: str
    cost: Money
    participant_ids: tuple[int, ...] = field(default_factory=tuple)
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerEntry":
        """
        Create LedgerEntry from Splitwise API dict.

        Splitwise reports ``cost`` as a decimal string and ``group_id`` as
        null for expenses outside any group.
        """
        currency = data.get("currency_code") or "GBP"
        return cls(
            id=int(data["id"]),
            group_id=int(data.get("group_id") or UNGROUPED_GROUP_ID),
            description=data.get("description") or "",
            details=data.get("details") or "",
            cost=Money.from_decimal_str(str(data.get("cost") or "0"), currency),
            participant_ids=tuple(int(u["user_id"]) for u in data.get("users") or [] if "user_id" in u),
            deleted=data.get("deleted_at") is not None,
        )


@dataclass(frozen=True)
class ExpenseShare:
    """One user's side of an expense, in minor units."""

    user_id: int
    paid_share: int
    owed_share: int


@dataclass(frozen=True)
class ExpenseRequest:
    """
    Normalized create-expense payload.

    ``details`` carries the idempotency marker of the source transaction so a
    later run recognizes the expense as already posted.
    """

    cost: Money
    description: str
    group_id: int
    details: str
    date: str
    creation_method: str
    shares: tuple[ExpenseShare, ...]
    payment: bool = False

    @property
    def currency(self) -> str:
        return self.cost.currency

    def to_form(self) -> dict[str, str]:
        """
        Encode as the form fields of Splitwise's create_expense endpoint.

        Amounts become decimal strings; users are flattened to
        ``users__<index>__<field>`` keys in share order.
        """
        form = {
            "payment": "true" if self.payment else "false",
            "cost": self.cost.to_decimal_str(),
            "currency_code": self.cost.currency,
            "description": self.description,
            "group_id": str(self.group_id),
            "details": self.details,
            "date": self.date,
            "creation_method": self.creation_method,
        }
        for i, share in enumerate(self.shares):
            paid = Money.from_minor_units(share.paid_share, self.cost.currency)
            owed = Money.from_minor_units(share.owed_share, self.cost.currency)
            form[f"users__{i}__user_id"] = str(share.user_id)
            form[f"users__{i}__paid_share"] = paid.to_decimal_str()
            form[f"users__{i}__owed_share"] = owed.to_decimal_str()
        return form

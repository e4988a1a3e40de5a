"""
Splitwise Integration Package

Reads the current user, groups and expenses; creates expenses.
"""

from .client import SplitwiseAPIError, SplitwiseClient
from .models import (
    UNGROUPED_GROUP_ID,
    ExpenseRequest,
    ExpenseShare,
    Group,
    LedgerEntry,
    Member,
    User,
)

__all__ = [
    "UNGROUPED_GROUP_ID",
    "ExpenseRequest",
    "ExpenseShare",
    "Group",
    "LedgerEntry",
    "Member",
    "SplitwiseAPIError",
    "SplitwiseClient",
    "User",
]

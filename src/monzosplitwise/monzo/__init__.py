"""
Monzo Integration Package

Read-only access to Monzo accounts and transactions.
"""

from .client import MonzoAPIError, MonzoClient
from .models import Account, Transaction

__all__ = [
    "Account",
    "MonzoAPIError",
    "MonzoClient",
    "Transaction",
]

"""
Monzo to Splitwise - Shared Expense Reconciliation

Posts Monzo card spending tagged with "#splitwise-<group>" to Splitwise as
equally split expenses, exactly once per transaction.

Domain Packages:
- core: Money, currency handling, configuration, run outcome models
- monzo: Monzo API client and transaction models
- splitwise: Splitwise API client and ledger models
- reconcile: Tag extraction, dedup, group resolution, splitting, orchestration
- cli: Command-line interface

Example Usage:
    from monzosplitwise.reconcile import Reconciler, calculate_equal_shares
    from monzosplitwise.core.money import Money
"""

__version__ = "0.3.0"
__author__ = "Karl Davis"

from .core.config import Environment, get_config
from .core.models import OutcomeStatus, ReconciliationSummary, TransactionOutcome
from .core.money import Money

__all__ = [
    # Configuration
    "Environment",
    "get_config",
    # Core models
    "Money",
    "OutcomeStatus",
    "ReconciliationSummary",
    "TransactionOutcome",
]

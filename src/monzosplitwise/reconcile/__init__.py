"""
Reconciliation Package

Turns tagged Monzo transactions into Splitwise expenses.

Key Components:
- tags: Finds "#splitwise" tags in transaction memos
- dedup: Detects transactions that already have an expense
- groups: Resolves a tag to a Splitwise group and its members
- split_calculator: Exact, equal integer splits
- expense_builder: Idempotent create-expense requests
- orchestrator: Concurrent fetch, then sequential per-transaction processing
"""

from .dedup import MARKER_PREFIX, LedgerIndex, is_already_reconciled, transaction_marker
from .expense_builder import DEFAULT_CREATION_METHOD, build_expense_request
from .groups import GroupNotFoundError, MalformedTagError, normalize_group_name, resolve_group
from .models import ResolvedGroup, SplitPlan, SplitShare, TaggedTransaction
from .orchestrator import (
    BankSnapshot,
    LedgerSnapshot,
    Reconciler,
    fetch_snapshots,
    reconcile_snapshots,
    reconcile_transaction,
)
from .split_calculator import SplitCalculationError, calculate_equal_shares, calculate_split_plan
from .tags import TAG_MARKER, extract_tagged_transactions, find_tag

__all__ = [
    # Models
    "ResolvedGroup",
    "SplitPlan",
    "SplitShare",
    "TaggedTransaction",
    # Tag extraction
    "TAG_MARKER",
    "extract_tagged_transactions",
    "find_tag",
    # Dedup
    "MARKER_PREFIX",
    "LedgerIndex",
    "is_already_reconciled",
    "transaction_marker",
    # Group resolution
    "GroupNotFoundError",
    "MalformedTagError",
    "normalize_group_name",
    "resolve_group",
    # Splitting
    "SplitCalculationError",
    "calculate_equal_shares",
    "calculate_split_plan",
    # Requests
    "DEFAULT_CREATION_METHOD",
    "build_expense_request",
    # Orchestration
    "BankSnapshot",
    "LedgerSnapshot",
    "Reconciler",
    "fetch_snapshots",
    "reconcile_snapshots",
    "reconcile_transaction",
]

#!/usr/bin/env python3
"""
Core Data Models for Monzo to Splitwise Reconciliation

Batch outcome types shared by the reconciler, the CLI and run reports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class OutcomeStatus(Enum):
    """What happened to one tagged transaction."""

    POSTED = "posted"
    PLANNED = "planned"  # dry run: request built but not sent
    SKIPPED_DUPLICATE = "skipped-duplicate"
    SKIPPED_NO_GROUP = "skipped-no-group"
    FAILED = "failed"


@dataclass
class TransactionOutcome:
    """Result of reconciling one tagged transaction."""

    transaction_id: str
    tag: str
    status: OutcomeStatus

    # Optional fields
    group_id: int | None = None
    group_name: str | None = None
    amount: int | None = None  # Minor units, absolute
    currency: str | None = None
    owed_shares: list[int] = field(default_factory=list)
    expense_id: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "transaction_id": self.transaction_id,
            "tag": self.tag,
            "status": self.status.value,
            "group_id": self.group_id,
            "group_name": self.group_name,
            "amount": self.amount,
            "currency": self.currency,
            "owed_shares": self.owed_shares,
            "expense_id": self.expense_id,
            "error": self.error,
        }


@dataclass
class ReconciliationSummary:
    """
    Result of one reconciliation run.

    Contains one outcome per tagged transaction plus fetch statistics.
    """

    outcomes: list[TransactionOutcome] = field(default_factory=list)

    # Fetch statistics
    transactions_fetched: int = 0
    expenses_fetched: int = 0
    groups_fetched: int = 0
    transaction_cap_reached: bool = False
    cancelled: bool = False
    dry_run: bool = False

    # Timing information
    start_time: datetime | None = None
    end_time: datetime | None = None

    def add(self, outcome: TransactionOutcome) -> None:
        self.outcomes.append(outcome)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def posted(self) -> int:
        return self.count(OutcomeStatus.POSTED)

    @property
    def planned(self) -> int:
        return self.count(OutcomeStatus.PLANNED)

    @property
    def skipped_duplicate(self) -> int:
        return self.count(OutcomeStatus.SKIPPED_DUPLICATE)

    @property
    def skipped_no_group(self) -> int:
        return self.count(OutcomeStatus.SKIPPED_NO_GROUP)

    @property
    def failed(self) -> int:
        return self.count(OutcomeStatus.FAILED)

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    @property
    def processing_time(self) -> float | None:
        """Run duration in seconds."""
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def counts(self) -> dict[str, int]:
        return {status.value: self.count(status) for status in OutcomeStatus}

    def to_dict(self) -> dict[str, Any]:
        """Convert run summary to dict for JSON serialization."""
        return {
            "metadata": {
                "start_time": self.start_time.isoformat() if self.start_time else None,
                "end_time": self.end_time.isoformat() if self.end_time else None,
                "processing_time": self.processing_time,
                "dry_run": self.dry_run,
                "cancelled": self.cancelled,
                "transactions_fetched": self.transactions_fetched,
                "expenses_fetched": self.expenses_fetched,
                "groups_fetched": self.groups_fetched,
                "transaction_cap_reached": self.transaction_cap_reached,
            },
            "summary": self.counts(),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }

#!/usr/bin/env python3
"""
Duplicate Detection

Decides whether a transaction already has a Splitwise expense. A transaction
counts as reconciled when any ledger entry's details contain its id as a
substring. That rule is loose (ids that occur inside unrelated text also
match) but it is what recognizes every expense this tool has ever posted, so
the marker format and the matching rule must not change.
"""

import logging
import re
from collections.abc import Iterable

from ..splitwise.models import LedgerEntry

logger = logging.getLogger(__name__)

MARKER_PREFIX = "MonzoTransaction:"
_MARKER_PATTERN = re.compile(re.escape(MARKER_PREFIX) + r"(\S+)")


def transaction_marker(transaction_id: str) -> str:
    """Idempotency marker embedded in the details of posted expenses."""
    return f"{MARKER_PREFIX}{transaction_id}"


class LedgerIndex:
    """
    Ledger snapshot indexed by embedded transaction markers.

    Lookups hit the marker map first and fall back to a substring scan over
    all details, so results are identical to a plain linear scan.
    """

    def __init__(self, entries: Iterable[LedgerEntry] = ()):
        self._details: list[str] = []
        self._by_marker: dict[str, LedgerEntry | None] = {}
        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        return len(self._details)

    def add(self, entry: LedgerEntry) -> None:
        self._add_details(entry.details, entry)

    def record_posted(self, transaction_id: str, entry: LedgerEntry | None = None) -> None:
        """Mark a transaction as reconciled by an expense created during this run."""
        self._add_details(transaction_marker(transaction_id), entry)

    def _add_details(self, details: str, entry: LedgerEntry | None) -> None:
        self._details.append(details)
        for match in _MARKER_PATTERN.finditer(details):
            self._by_marker.setdefault(match.group(1), entry)

    def contains(self, transaction_id: str) -> bool:
        """True if any indexed details contain the transaction id."""
        if not transaction_id:
            # The empty string is a substring of everything
            return bool(self._details)
        if transaction_id in self._by_marker:
            return True
        return any(transaction_id in details for details in self._details)

    def entry_for(self, transaction_id: str) -> LedgerEntry | None:
        """Ledger entry whose marker names exactly this transaction, if indexed."""
        return self._by_marker.get(transaction_id)


def is_already_reconciled(transaction_id: str, ledger: LedgerIndex) -> bool:
    matched = ledger.contains(transaction_id)
    if matched:
        logger.debug("Transaction %s already present in ledger", transaction_id)
    return matched

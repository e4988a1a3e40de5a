#!/usr/bin/env python3
"""
Split Tag Extraction

Finds ``#splitwise`` tags in Monzo transaction memos.
"""

from collections.abc import Iterable, Iterator

from ..monzo.models import Transaction
from .models import TaggedTransaction

TAG_MARKER = "#splitwise"


def find_tag(memo: str) -> str | None:
    """Return the first whitespace-separated memo token containing the marker."""
    for token in memo.split():
        if TAG_MARKER in token:
            return token
    return None


class TaggedTransactions:
    """
    Lazy view of the tagged debits in a transaction sequence.

    Iterating again re-scans the source, so the view can be consumed more
    than once. Credits and zero amounts are never tagged.
    """

    def __init__(self, transactions: Iterable[Transaction]):
        self._transactions = transactions

    def __iter__(self) -> Iterator[TaggedTransaction]:
        for transaction in self._transactions:
            if not transaction.amount.is_debit():
                continue
            tag = find_tag(transaction.memo)
            if tag is not None:
                yield TaggedTransaction(transaction=transaction, tag=tag)


def extract_tagged_transactions(transactions: Iterable[Transaction]) -> TaggedTransactions:
    """
    Select debit transactions whose memo carries a split tag.

    Args:
        transactions: Transactions to scan; should be a re-iterable
            collection if the result is iterated more than once

    Returns:
        Restartable iterable of TaggedTransaction, at most one per transaction
    """
    return TaggedTransactions(transactions)

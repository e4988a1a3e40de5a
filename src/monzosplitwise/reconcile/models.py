#!/usr/bin/env python3
"""
Reconciliation Pipeline Models

Transient values created and consumed within a single run; none of them are
persisted.
"""

from dataclasses import dataclass

from ..core.money import Money
from ..monzo.models import Transaction


@dataclass(frozen=True)
class TaggedTransaction:
    """A debit transaction together with the first split tag found in its memo."""

    transaction: Transaction
    tag: str


@dataclass(frozen=True)
class ResolvedGroup:
    """
    Target of a split: a Splitwise group (or the ungrouped pseudo-target) and
    who takes part.
    """

    group_id: int
    name: str
    participant_ids: tuple[int, ...]
    payer_id: int


@dataclass(frozen=True)
class SplitShare:
    """One participant's owed share of a split."""

    participant_id: int
    owed: int


@dataclass(frozen=True)
class SplitPlan:
    """
    Per-participant owed amounts for one transaction.

    Invariant: the owed shares sum exactly to ``total``.
    """

    payer_id: int
    total: Money
    shares: tuple[SplitShare, ...]

    @property
    def owed_shares(self) -> list[int]:
        return [s.owed for s in self.shares]

    @property
    def participant_ids(self) -> list[int]:
        return [s.participant_id for s in self.shares]

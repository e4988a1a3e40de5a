#!/usr/bin/env python3
"""
Split Calculator for Shared Expenses.

Divides a transaction amount equally among the participants of a group.
Uses integer arithmetic throughout to avoid floating-point precision errors.

Key Features:
- Maximally equal shares: any two shares differ by at most one minor unit
- Remainder goes to the first participants in member order
- Sum verification for exact total matching
"""

import logging
from collections.abc import Sequence

from ..core.currency import summarize_shares, validate_sum_equals_total
from ..core.money import Money
from .models import ResolvedGroup, SplitPlan, SplitShare

logger = logging.getLogger(__name__)


class SplitCalculationError(Exception):
    """Raised when split calculation fails validation"""


def calculate_equal_shares(amount: int, participant_count: int) -> list[int]:
    """
    Calculate owed shares for an equal split.

    Args:
        amount: Positive amount in minor units
        participant_count: Number of participants (N >= 1)

    Returns:
        N shares in participant order; the first ``amount % N`` are one unit larger

    Raises:
        SplitCalculationError: If the inputs are out of range
    """
    if participant_count < 1:
        raise SplitCalculationError(f"Cannot split between {participant_count} participants")
    if amount <= 0:
        raise SplitCalculationError(f"Split amount must be positive, got {amount}")

    return [m.amount for m in Money.from_minor_units(amount).split(participant_count)]


def calculate_split_plan(amount: Money, participant_ids: Sequence[int], payer_id: int) -> SplitPlan:
    """
    Calculate the split plan for one expense.

    Args:
        amount: Expense amount; the sign is ignored
        participant_ids: Participants in the order shares are assigned
        payer_id: User who paid the full amount

    Returns:
        SplitPlan whose owed shares sum exactly to the absolute amount

    Raises:
        SplitCalculationError: If there are no participants, the amount is
            zero, or the shares fail the sum check
    """
    total = amount.abs()
    if len(set(participant_ids)) != len(participant_ids):
        raise SplitCalculationError(f"Duplicate participants in {list(participant_ids)}")

    shares = calculate_equal_shares(total.amount, len(participant_ids))

    if not validate_sum_equals_total(shares, total.amount):
        raise SplitCalculationError(f"Split shares total {sum(shares)} doesn't match amount {total.amount}")

    logger.debug("Split %s among %s: %s", total, list(participant_ids), summarize_shares(shares))

    return SplitPlan(
        payer_id=payer_id,
        total=total,
        shares=tuple(SplitShare(participant_id=pid, owed=owed) for pid, owed in zip(participant_ids, shares)),
    )


def plan_for_group(amount: Money, group: ResolvedGroup) -> SplitPlan:
    """Calculate the split plan for a resolved group."""
    return calculate_split_plan(amount, group.participant_ids, group.payer_id)

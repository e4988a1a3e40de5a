#!/usr/bin/env python3
"""
Expense Request Builder

Turns a split plan and its source transaction into the Splitwise
create-expense payload.
"""

from ..monzo.models import Transaction
from ..splitwise.models import ExpenseRequest, ExpenseShare
from .dedup import transaction_marker
from .models import SplitPlan

DEFAULT_CREATION_METHOD = "quickadd"


def build_expense_request(
    plan: SplitPlan,
    transaction: Transaction,
    group_id: int,
    creation_method: str = DEFAULT_CREATION_METHOD,
) -> ExpenseRequest:
    """
    Build an idempotent create-expense request.

    The payer's paid share is the full amount and everyone else's is zero;
    owed shares come straight from the plan. A payer who is not among the
    participants is appended with an owed share of zero so the amounts still
    balance.

    Args:
        plan: Split plan for the transaction
        transaction: Source Monzo transaction
        group_id: Splitwise group id, 0 for ungrouped
        creation_method: Audit tag recorded by Splitwise

    Returns:
        ExpenseRequest with the transaction marker in its details
    """
    total = plan.total.amount
    shares = [
        ExpenseShare(
            user_id=share.participant_id,
            paid_share=total if share.participant_id == plan.payer_id else 0,
            owed_share=share.owed,
        )
        for share in plan.shares
    ]
    if plan.payer_id not in plan.participant_ids:
        shares.append(ExpenseShare(user_id=plan.payer_id, paid_share=total, owed_share=0))

    return ExpenseRequest(
        cost=plan.total,
        description=transaction.display_name,
        group_id=group_id,
        details=transaction_marker(transaction.id),
        date=transaction.created.isoformat(),
        creation_method=creation_method,
        shares=tuple(shares),
        payment=False,
    )

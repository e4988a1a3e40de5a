#!/usr/bin/env python3
"""
Reconciliation Orchestrator

Drives one reconciliation pass:

1. Fetch the bank snapshot (Monzo transactions) and the ledger snapshot
   (Splitwise user, groups and expenses) as two concurrent tasks
2. Join both before doing anything else
3. Walk the tagged transactions one at a time: dedup, resolve group,
   split, build request, post

Per-transaction problems (unknown group, failed post) are recorded as
outcomes and never stop the batch. Fetch failures abort the run before any
expense is posted.
"""

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from ..core.models import OutcomeStatus, ReconciliationSummary, TransactionOutcome
from ..monzo.client import MonzoClient
from ..monzo.models import Transaction
from ..splitwise.client import SplitwiseAPIError, SplitwiseClient
from ..splitwise.models import ExpenseRequest, Group, LedgerEntry, User
from .dedup import LedgerIndex, is_already_reconciled
from .expense_builder import DEFAULT_CREATION_METHOD, build_expense_request
from .groups import GroupNotFoundError, resolve_group
from .models import TaggedTransaction
from .split_calculator import SplitCalculationError, plan_for_group
from .tags import extract_tagged_transactions

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 15
DEFAULT_TRANSACTION_LIMIT = 100


class ExpenseSink(Protocol):
    """Anything that can create a Splitwise expense."""

    def create_expense(self, request: ExpenseRequest) -> LedgerEntry: ...


@dataclass(frozen=True)
class BankSnapshot:
    """Monzo transactions for the run window."""

    account_id: str
    transactions: tuple[Transaction, ...]
    cap_reached: bool = False


@dataclass(frozen=True)
class LedgerSnapshot:
    """Splitwise state for the run window."""

    user: User
    groups: tuple[Group, ...]
    entries: tuple[LedgerEntry, ...]


def fetch_bank_snapshot(
    monzo: MonzoClient,
    since: datetime,
    before: datetime,
    limit: int = DEFAULT_TRANSACTION_LIMIT,
    account_id: str | None = None,
) -> BankSnapshot:
    """
    Fetch transactions in ``[since, before)`` for the selected account.

    Pagination is not followed. Reaching the page-size cap is logged as a
    warning because older tagged transactions may be missing.
    """
    account = monzo.select_account(account_id)
    transactions = monzo.transactions(account.id, since=since, before=before, limit=limit)
    logger.info("Fetched %d transactions from Monzo account %s", len(transactions), account.id)

    cap_reached = len(transactions) >= limit
    if cap_reached:
        logger.warning(
            "%d transactions fetched, the page-size cap; transactions beyond it are not reconciled",
            len(transactions),
        )
    return BankSnapshot(account_id=account.id, transactions=tuple(transactions), cap_reached=cap_reached)


def fetch_ledger_snapshot(splitwise: SplitwiseClient, since: datetime, expense_limit: int = 0) -> LedgerSnapshot:
    """Fetch the current user, all groups, and every expense dated after ``since``."""
    user = splitwise.get_current_user()
    logger.info("Logged in as Splitwise user %s", user.display_name)

    groups = splitwise.get_groups()
    logger.info("Fetched %d Splitwise groups", len(groups))

    entries = splitwise.get_expenses(dated_after=since, limit=expense_limit)
    logger.info("Fetched %d Splitwise expenses", len(entries))
    if expense_limit and len(entries) >= expense_limit:
        logger.warning("%d expenses fetched, the expense cap; duplicates may go undetected", len(entries))

    return LedgerSnapshot(user=user, groups=tuple(groups), entries=tuple(entries))


def fetch_snapshots(
    monzo: MonzoClient,
    splitwise: SplitwiseClient,
    since: datetime,
    before: datetime,
    transaction_limit: int = DEFAULT_TRANSACTION_LIMIT,
    expense_limit: int = 0,
    account_id: str | None = None,
) -> tuple[BankSnapshot, LedgerSnapshot]:
    """
    Run the two independent fetches concurrently and wait for both.

    Raises:
        Whatever either fetch raised, after both have finished
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="fetch") as executor:
        bank_future = executor.submit(
            fetch_bank_snapshot, monzo, since, before, transaction_limit, account_id
        )
        ledger_future = executor.submit(fetch_ledger_snapshot, splitwise, since, expense_limit)
        bank = bank_future.result()
        ledger = ledger_future.result()
    return bank, ledger


def reconcile_transaction(
    tagged: TaggedTransaction,
    ledger: LedgerSnapshot,
    index: LedgerIndex,
    sink: ExpenseSink | None,
    creation_method: str = DEFAULT_CREATION_METHOD,
) -> TransactionOutcome:
    """
    Reconcile one tagged transaction.

    A None sink means dry run: the request is built but not posted.
    Successful posts are recorded in the index so the same transaction is
    never posted twice in one run.
    Any error raised by the sink fails this transaction only.
    """
    transaction = tagged.transaction
    outcome = TransactionOutcome(
        transaction_id=transaction.id,
        tag=tagged.tag,
        status=OutcomeStatus.FAILED,
        amount=transaction.amount.abs().amount,
        currency=transaction.currency,
    )

    if is_already_reconciled(transaction.id, index):
        outcome.status = OutcomeStatus.SKIPPED_DUPLICATE
        existing = index.entry_for(transaction.id)
        if existing is not None:
            outcome.expense_id = existing.id
            if existing.deleted:
                logger.info("Transaction %s matches deleted expense %d; not reposting", transaction.id, existing.id)
        return outcome

    try:
        group = resolve_group(tagged.tag, ledger.groups, ledger.user.id)
    except GroupNotFoundError as e:
        outcome.status = OutcomeStatus.SKIPPED_NO_GROUP
        outcome.error = str(e)
        return outcome

    outcome.group_id = group.group_id
    outcome.group_name = group.name

    try:
        plan = plan_for_group(transaction.amount, group)
    except SplitCalculationError as e:
        outcome.error = str(e)
        return outcome

    outcome.owed_shares = plan.owed_shares
    request = build_expense_request(plan, transaction, group.group_id, creation_method)

    if sink is None:
        outcome.status = OutcomeStatus.PLANNED
        return outcome

    try:
        created = sink.create_expense(request)
    except SplitwiseAPIError as e:
        outcome.error = str(e)
        return outcome
    except Exception as e:
        logger.exception("Unexpected error posting transaction %s", transaction.id)
        outcome.error = f"{type(e).__name__}: {e}"
        return outcome

    index.record_posted(transaction.id, created)
    outcome.status = OutcomeStatus.POSTED
    outcome.expense_id = created.id
    return outcome


def reconcile_snapshots(
    transactions: Sequence[Transaction],
    ledger: LedgerSnapshot,
    sink: ExpenseSink | None,
    creation_method: str = DEFAULT_CREATION_METHOD,
    cancel_event: threading.Event | None = None,
    summary: ReconciliationSummary | None = None,
) -> ReconciliationSummary:
    """
    Reconcile already-fetched snapshots, one transaction at a time.

    Stops before the next transaction once ``cancel_event`` is set; expenses
    already posted stay posted.
    """
    if summary is None:
        summary = ReconciliationSummary(dry_run=sink is None)

    index = LedgerIndex(ledger.entries)
    logger.debug("Indexed %d ledger entries for duplicate detection", len(index))

    try:
        for tagged in extract_tagged_transactions(transactions):
            if cancel_event is not None and cancel_event.is_set():
                summary.cancelled = True
                logger.warning("Run cancelled; remaining transactions not processed")
                break

            outcome = reconcile_transaction(tagged, ledger, index, sink, creation_method)
            summary.add(outcome)
            _log_outcome(outcome)
    except KeyboardInterrupt:
        summary.cancelled = True
        logger.warning("Interrupted; remaining transactions not processed")

    return summary


def _log_outcome(outcome: TransactionOutcome) -> None:
    if outcome.status == OutcomeStatus.FAILED:
        logger.error("Transaction %s (%s) failed: %s", outcome.transaction_id, outcome.tag, outcome.error)
    elif outcome.status == OutcomeStatus.SKIPPED_NO_GROUP:
        logger.warning("Transaction %s skipped: %s", outcome.transaction_id, outcome.error)
    else:
        logger.info(
            "Transaction %s %s group=%s shares=%s",
            outcome.transaction_id,
            outcome.status.value,
            outcome.group_name,
            outcome.owed_shares,
        )


class Reconciler:
    """
    Runs a full reconciliation pass between one Monzo account and Splitwise.

    Example:
        reconciler = Reconciler(monzo_client, splitwise_client)
        summary = reconciler.run()
    """

    def __init__(
        self,
        monzo: MonzoClient,
        splitwise: SplitwiseClient,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        transaction_limit: int = DEFAULT_TRANSACTION_LIMIT,
        expense_limit: int = 0,
        account_id: str | None = None,
        creation_method: str = DEFAULT_CREATION_METHOD,
    ):
        self.monzo = monzo
        self.splitwise = splitwise
        self.lookback_days = lookback_days
        self.transaction_limit = transaction_limit
        self.expense_limit = expense_limit
        self.account_id = account_id
        self.creation_method = creation_method

    def run(
        self,
        dry_run: bool = False,
        now: datetime | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ReconciliationSummary:
        """
        Fetch both snapshots, then reconcile sequentially.

        Args:
            dry_run: Build requests without posting them
            now: End of the window (default: current UTC time)
            cancel_event: Set to stop before the next transaction

        Returns:
            Summary with one outcome per tagged transaction
        """
        now = now or datetime.now(timezone.utc)
        since = now - timedelta(days=self.lookback_days)
        summary = ReconciliationSummary(dry_run=dry_run, start_time=datetime.now(timezone.utc))

        bank, ledger = fetch_snapshots(
            self.monzo,
            self.splitwise,
            since=since,
            before=now,
            transaction_limit=self.transaction_limit,
            expense_limit=self.expense_limit,
            account_id=self.account_id,
        )
        summary.transactions_fetched = len(bank.transactions)
        summary.transaction_cap_reached = bank.cap_reached
        summary.groups_fetched = len(ledger.groups)
        summary.expenses_fetched = len(ledger.entries)

        reconcile_snapshots(
            bank.transactions,
            ledger,
            sink=None if dry_run else self.splitwise,
            creation_method=self.creation_method,
            cancel_event=cancel_event,
            summary=summary,
        )
        summary.end_time = datetime.now(timezone.utc)

        logger.info(
            "Reconciliation done: %d posted, %d planned, %d duplicate, %d no group, %d failed",
            summary.posted,
            summary.planned,
            summary.skipped_duplicate,
            summary.skipped_no_group,
            summary.failed,
        )
        return summary

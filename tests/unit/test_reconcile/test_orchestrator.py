#!/usr/bin/env python3
"""Tests for the reconciliation orchestrator using in-memory clients."""

import logging
import threading
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from monzosplitwise.core.models import OutcomeStatus
from monzosplitwise.reconcile.orchestrator import (
    LedgerSnapshot,
    Reconciler,
    fetch_bank_snapshot,
    fetch_snapshots,
    reconcile_snapshots,
)
from monzosplitwise.splitwise.client import SplitwiseClient
from monzosplitwise.splitwise.models import LedgerEntry
from tests.fixtures.fakes import FakeMonzoClient, FakeSplitwiseClient
from tests.fixtures.synthetic_data import NOW, expense_dict, make_current_user, make_ledger_entry, make_transaction


def _ledger(groups, entries=()) -> LedgerSnapshot:
    return LedgerSnapshot(user=make_current_user(), groups=tuple(groups), entries=tuple(entries))


@pytest.mark.reconcile
class TestReconcileSnapshots:
    """Test the sequential per-transaction pipeline."""

    def test_trip_example_posts_one_expense(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group])
        transactions = [make_transaction("tx_1", -1500, "dinner #splitwise-trip")]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert summary.posted == 1
        assert len(sink.created) == 1
        request = sink.created[0]
        assert request.group_id == 20
        assert [s.owed_share for s in request.shares] == [750, 750]
        assert "MonzoTransaction:tx_1" in request.details
        outcome = summary.outcomes[0]
        assert outcome.status == OutcomeStatus.POSTED
        assert outcome.group_name == "Trip"
        assert outcome.expense_id == 5001

    def test_existing_entry_is_skipped(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group])
        ledger = _ledger([trip_group], [make_ledger_entry(1, "MonzoTransaction:tx_1", group_id=20)])

        summary = reconcile_snapshots([make_transaction("tx_1", -1500, "#splitwise-trip")], ledger, sink)

        assert summary.skipped_duplicate == 1
        assert sink.created == []
        assert summary.outcomes[0].expense_id == 1

    def test_unknown_group_does_not_stop_batch(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group])
        transactions = [
            make_transaction("tx_1", -1000, "#splitwise-holiday"),
            make_transaction("tx_2", -1000, "#splitwise-trip"),
        ]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert [o.status for o in summary.outcomes] == [OutcomeStatus.SKIPPED_NO_GROUP, OutcomeStatus.POSTED]
        assert "holiday" in summary.outcomes[0].error

    def test_post_failure_does_not_stop_batch(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group], failing_transaction_ids={"tx_1"})
        transactions = [
            make_transaction("tx_1", -1000, "#splitwise-trip"),
            make_transaction("tx_2", -1000, "#splitwise-trip"),
        ]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert [o.status for o in summary.outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.POSTED]
        assert "Invalid expense" in summary.outcomes[0].error
        assert summary.has_failures

    def test_dry_run_builds_without_posting(self, flatmates_group):
        transactions = [make_transaction("tx_1", -1000, "#splitwise-FlatMates")]

        summary = reconcile_snapshots(transactions, _ledger([flatmates_group]), sink=None)

        assert summary.dry_run
        assert summary.planned == 1
        assert summary.outcomes[0].owed_shares == [334, 333, 333]

    def test_ungrouped_tag(self):
        sink = FakeSplitwiseClient()

        summary = reconcile_snapshots([make_transaction("tx_1", -1234, "#splitwise")], _ledger([]), sink)

        assert summary.posted == 1
        request = sink.created[0]
        assert request.group_id == 0
        assert [(s.user_id, s.paid_share, s.owed_share) for s in request.shares] == [(1001, 1234, 1234)]

    def test_same_transaction_twice_posts_once(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group])
        tx = make_transaction("tx_1", -1500, "#splitwise-trip")

        summary = reconcile_snapshots([tx, tx], _ledger([trip_group]), sink)

        assert [o.status for o in summary.outcomes] == [OutcomeStatus.POSTED, OutcomeStatus.SKIPPED_DUPLICATE]
        assert len(sink.created) == 1
        assert summary.outcomes[1].expense_id == summary.outcomes[0].expense_id

    def test_cancel_before_start(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group])
        cancel = threading.Event()
        cancel.set()

        summary = reconcile_snapshots(
            [make_transaction("tx_1", -1500, "#splitwise-trip")], _ledger([trip_group]), sink, cancel_event=cancel
        )

        assert summary.cancelled
        assert summary.outcomes == []
        assert sink.created == []

    def test_cancel_mid_run_keeps_posted(self, trip_group):
        cancel = threading.Event()

        class CancellingSink(FakeSplitwiseClient):
            def create_expense(self, request):
                entry = super().create_expense(request)
                cancel.set()
                return entry

        sink = CancellingSink(groups=[trip_group])
        transactions = [make_transaction(f"tx_{i}", -1000, "#splitwise-trip") for i in range(3)]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink, cancel_event=cancel)

        assert summary.cancelled
        assert summary.posted == 1
        assert len(sink.created) == 1

    def test_deleted_expense_still_blocks_repost(self, trip_group):
        data = expense_dict(8, "MonzoTransaction:tx_1", group_id=20)
        data["deleted_at"] = "2024-08-19T13:00:00Z"
        sink = FakeSplitwiseClient(groups=[trip_group])
        ledger = _ledger([trip_group], [LedgerEntry.from_dict(data)])

        summary = reconcile_snapshots([make_transaction("tx_1", -1500, "#splitwise-trip")], ledger, sink)

        assert summary.outcomes[0].status == OutcomeStatus.SKIPPED_DUPLICATE
        assert summary.outcomes[0].expense_id == 8
        assert sink.created == []

    def test_malformed_create_response_fails_each_transaction(self, trip_group):
        response = MagicMock()
        response.status_code = 200
        response.ok = True
        response.json.return_value = {"expenses": [{"cost": "10.00"}]}
        session = MagicMock()
        session.headers = {}
        session.request.return_value = response
        sink = SplitwiseClient("token-xyz", session=session)
        transactions = [
            make_transaction("tx_1", -1000, "#splitwise-trip"),
            make_transaction("tx_2", -1000, "#splitwise-trip"),
        ]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert [o.status for o in summary.outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.FAILED]
        assert "malformed expense" in summary.outcomes[0].error
        assert session.request.call_count == 2

    def test_unexpected_sink_error_fails_only_that_transaction(self, trip_group):
        class BrokenOnceSink(FakeSplitwiseClient):
            def create_expense(self, request):
                if "tx_1" in request.details:
                    raise OSError("connection reset")
                return super().create_expense(request)

        sink = BrokenOnceSink(groups=[trip_group])
        transactions = [
            make_transaction("tx_1", -1000, "#splitwise-trip"),
            make_transaction("tx_2", -1000, "#splitwise-trip"),
        ]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert [o.status for o in summary.outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.POSTED]
        assert summary.outcomes[0].error == "OSError: connection reset"
        assert len(sink.created) == 1

    def test_keyboard_interrupt_keeps_posted(self, trip_group):
        class InterruptedSink(FakeSplitwiseClient):
            def create_expense(self, request):
                if self.created:
                    raise KeyboardInterrupt
                return super().create_expense(request)

        sink = InterruptedSink(groups=[trip_group])
        transactions = [make_transaction(f"tx_{i}", -1000, "#splitwise-trip") for i in range(3)]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert summary.cancelled
        assert [o.status for o in summary.outcomes] == [OutcomeStatus.POSTED]
        assert len(sink.created) == 1

    def test_untagged_and_credits_ignored(self, trip_group):
        sink = FakeSplitwiseClient(groups=[trip_group])
        transactions = [
            make_transaction("tx_1", -1500, "groceries"),
            make_transaction("tx_2", 1500, "#splitwise-trip"),
        ]

        summary = reconcile_snapshots(transactions, _ledger([trip_group]), sink)

        assert summary.outcomes == []


@pytest.mark.reconcile
class TestFetch:
    def test_cap_warning(self, caplog):
        monzo = FakeMonzoClient([make_transaction(f"tx_{i}", -100) for i in range(5)])

        with caplog.at_level(logging.WARNING, logger="monzosplitwise.reconcile.orchestrator"):
            snapshot = fetch_bank_snapshot(monzo, NOW - timedelta(days=15), NOW, limit=5)

        assert snapshot.cap_reached
        assert len(snapshot.transactions) == 5
        assert "page-size cap" in caplog.text

    def test_below_cap(self):
        monzo = FakeMonzoClient([make_transaction("tx_1", -100)])
        snapshot = fetch_bank_snapshot(monzo, NOW - timedelta(days=15), NOW, limit=5)
        assert not snapshot.cap_reached
        assert snapshot.account_id == "acc_retail"

    def test_fetch_snapshots_joins_both(self, trip_group, caplog):
        monzo = FakeMonzoClient([make_transaction("tx_1", -100)])
        splitwise = FakeSplitwiseClient(groups=[trip_group], entries=[make_ledger_entry(1, "x")])

        with caplog.at_level(logging.INFO, logger="monzosplitwise.reconcile.orchestrator"):
            bank, ledger = fetch_snapshots(monzo, splitwise, NOW - timedelta(days=15), NOW)

        assert "Logged in as Splitwise user Test User" in caplog.text
        assert [t.id for t in bank.transactions] == ["tx_1"]
        assert ledger.groups == (trip_group,)
        assert len(ledger.entries) == 1
        assert ledger.user.id == 1001

    def test_fetch_failure_propagates(self, trip_group):
        from monzosplitwise.monzo.client import MonzoAPIError

        monzo = FakeMonzoClient([], fail=True)
        splitwise = FakeSplitwiseClient(groups=[trip_group])

        with pytest.raises(MonzoAPIError):
            fetch_snapshots(monzo, splitwise, NOW - timedelta(days=15), NOW)


@pytest.mark.reconcile
class TestReconciler:
    def test_window_and_limits(self, trip_group):
        monzo = FakeMonzoClient([make_transaction("tx_1", -1500, "#splitwise-trip")])
        splitwise = FakeSplitwiseClient(groups=[trip_group])

        summary = Reconciler(monzo, splitwise, lookback_days=15, transaction_limit=50).run(now=NOW)

        call = monzo.calls[0]
        assert call["since"] == NOW - timedelta(days=15)
        assert call["before"] == NOW
        assert call["limit"] == 50
        assert summary.transactions_fetched == 1
        assert summary.groups_fetched == 1
        assert summary.posted == 1
        assert summary.end_time is not None

    def test_second_run_posts_nothing(self, trip_group, flatmates_group):
        monzo = FakeMonzoClient(
            [
                make_transaction("tx_1", -1500, "dinner #splitwise-trip"),
                make_transaction("tx_2", -900, "#splitwise-flatmates"),
            ]
        )
        splitwise = FakeSplitwiseClient(groups=[trip_group, flatmates_group])
        reconciler = Reconciler(monzo, splitwise)

        first = reconciler.run(now=NOW)
        second = reconciler.run(now=NOW)

        assert first.posted == 2
        assert second.posted == 0
        assert second.skipped_duplicate == 2
        assert len(splitwise.created) == 2

    def test_dry_run_does_not_post(self, trip_group):
        monzo = FakeMonzoClient([make_transaction("tx_1", -1500, "#splitwise-trip")])
        splitwise = FakeSplitwiseClient(groups=[trip_group])

        summary = Reconciler(monzo, splitwise).run(dry_run=True, now=NOW)

        assert summary.planned == 1
        assert splitwise.created == []

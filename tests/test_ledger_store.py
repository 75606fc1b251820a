"""Mini README: Tests for the in-memory ledger store.

Structure:
    * lookups - unknown ships and mismatched periods raise ``UnknownShip``.
    * commits - single and batch commits append history in order.
    * atomicity - a rejected batch leaves balances, banked and history intact.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fuelcompliance.ledger import (
    ComplianceBalance,
    LedgerIntegrityError,
    LedgerStore,
    PendingTransaction,
    StaleBalance,
    TransactionKind,
    UnknownShip,
)

FIXED_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _store() -> LedgerStore:
    return LedgerStore(
        balances=[
            ComplianceBalance("A", 2025, 500.0),
            ComplianceBalance("B", 2025, -200.0),
        ],
        clock=lambda: FIXED_TIME,
    )


def test_default_store_seeds_demo_ships() -> None:
    store = LedgerStore()
    assert store.list_ship_ids() == ["SHIP001", "SHIP002", "SHIP003", "SHIP004", "SHIP005"]
    assert all(store.get_banked_amount(ship_id) == 0 for ship_id in store.list_ship_ids())


def test_explicit_empty_store_is_not_seeded() -> None:
    assert LedgerStore(balances=[]).list_ship_ids() == []


def test_get_balance_checks_ship_and_period() -> None:
    store = _store()
    assert store.get_balance("A", 2025).value_gco2eq == 500.0

    with pytest.raises(UnknownShip):
        store.get_balance("Z")
    with pytest.raises(UnknownShip) as excinfo:
        store.get_balance("A", 2026)
    assert excinfo.value.context["period_year"] == 2026
    assert "2026" in str(excinfo.value)


def test_register_balance_rejects_duplicates() -> None:
    store = _store()
    with pytest.raises(ValueError):
        store.register_balance(ComplianceBalance("A", 2025, 1.0))


def test_commit_updates_balance_banked_and_history() -> None:
    store = _store()
    transaction = store.commit(
        "A", 400.0, PendingTransaction(TransactionKind.BANK, 100.0, balance_before=500.0)
    )

    assert transaction.transaction_id == "txn_0001"
    assert transaction.timestamp == FIXED_TIME
    assert (transaction.balance_before, transaction.balance_after) == (500.0, 400.0)
    assert store.get_balance("A").value_gco2eq == 400.0
    assert store.get_banked_amount("A") == 100.0
    assert store.get_transaction_history("A") == [transaction]
    assert store.get_transaction_history("B") == []


def test_history_is_chronological_and_restartable() -> None:
    store = _store()
    store.commit("A", 400.0, PendingTransaction(TransactionKind.BANK, 100.0, 500.0))
    store.commit("A", 350.0, PendingTransaction(TransactionKind.BANK, 50.0, 400.0))

    first_read = store.get_transaction_history("A")
    second_read = store.get_transaction_history("A")
    assert [t.transaction_id for t in first_read] == ["txn_0001", "txn_0002"]
    assert first_read == second_read
    first_read.clear()
    assert len(store.get_transaction_history()) == 2


def test_stale_balance_rejects_without_mutation() -> None:
    store = _store()
    with pytest.raises(StaleBalance):
        store.commit("A", 0.0, PendingTransaction(TransactionKind.BANK, 10.0, balance_before=499.0))
    assert store.get_balance("A").value_gco2eq == 500.0
    assert store.get_transaction_history() == []


def test_commit_refuses_negative_banked_amount() -> None:
    store = _store()
    with pytest.raises(LedgerIntegrityError):
        store.commit("B", -100.0, PendingTransaction(TransactionKind.APPLY, 100.0, -200.0))
    assert store.get_banked_amount("B") == 0.0
    assert store.get_balance("B").value_gco2eq == -200.0


def test_commit_many_is_atomic() -> None:
    """A failing entry late in the batch must not leave earlier entries applied."""

    store = _store()
    with pytest.raises(StaleBalance):
        store.commit_many(
            [
                ("A", 300.0, PendingTransaction(TransactionKind.POOL, 200.0, 500.0)),
                ("B", 0.0, PendingTransaction(TransactionKind.POOL, 200.0, -999.0)),
            ]
        )
    assert store.get_balance("A").value_gco2eq == 500.0
    assert store.get_balance("B").value_gco2eq == -200.0
    assert store.get_transaction_history() == []

    committed = store.commit_many(
        [
            ("A", 300.0, PendingTransaction(TransactionKind.POOL, 200.0, 500.0)),
            ("B", 0.0, PendingTransaction(TransactionKind.POOL, 200.0, -200.0)),
        ]
    )
    assert [t.ship_id for t in committed] == ["A", "B"]
    assert store.get_banked_amount("A") == 0.0


def test_commit_many_rejects_repeated_ship_and_empty_batch() -> None:
    store = _store()
    with pytest.raises(LedgerIntegrityError):
        store.commit_many(
            [
                ("A", 450.0, PendingTransaction(TransactionKind.POOL, 50.0, 500.0)),
                ("A", 400.0, PendingTransaction(TransactionKind.POOL, 50.0, 500.0)),
            ]
        )
    with pytest.raises(LedgerIntegrityError):
        store.commit_many([])
    assert store.get_transaction_history() == []


def test_transaction_export_is_serialisable() -> None:
    store = _store()
    transaction = store.commit("A", 400.0, PendingTransaction(TransactionKind.BANK, 100.0, 500.0))
    exported = transaction.as_dict()
    assert exported["kind"] == "bank"
    assert exported["timestamp"] == FIXED_TIME.isoformat()
    assert TransactionKind.from_str(" Apply ") is TransactionKind.APPLY
    with pytest.raises(ValueError):
        TransactionKind.from_str("transfer")

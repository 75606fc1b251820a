"""Mini README: In-memory ledger holding compliance balances and history.

Structure:
    * LedgerStore - owns the live balance per ship, the banked reserve
      counters and the append-only transaction log.

Commits are atomic. ``commit_many`` validates every entry against the
current state before writing anything, so a rejected batch leaves balances,
banked counters and history exactly as they were. History is kept in
chronological commit order; display code reverses it when it wants the most
recent entries first.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from .errors import LedgerIntegrityError, StaleBalance, UnknownShip
from .models import ComplianceBalance, PendingTransaction, Transaction, TransactionKind

LOGGER = get_logger(__name__)

DEMO_PERIOD_YEAR = 2025

CommitEntry = Tuple[str, float, PendingTransaction]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LedgerStore:
    """Own compliance balances, banked reserves and the transaction log."""

    def __init__(
        self,
        balances: Optional[Iterable[ComplianceBalance]] = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        demo_period_year: int = DEMO_PERIOD_YEAR,
    ) -> None:
        self._balances: Dict[str, ComplianceBalance] = {}
        self._banked: Dict[str, float] = {}
        self._history: List[Transaction] = []
        self._sequence = 0
        self._clock = clock
        if balances is None:
            balances = self._build_demo_balances(demo_period_year)
        for balance in balances:
            self.register_balance(balance)
        LOGGER.debug("LedgerStore initialised with %s ships", len(self._balances))

    @staticmethod
    def _build_demo_balances(period_year: int) -> List[ComplianceBalance]:
        """Create deterministic demo balances for dashboard previews."""

        return [
            ComplianceBalance("SHIP001", period_year, 263_082_240.0),
            ComplianceBalance("SHIP002", period_year, -341_640_000.0),
            ComplianceBalance("SHIP003", period_year, 127_545_600.0),
            ComplianceBalance("SHIP004", period_year, -64_800_000.0),
            ComplianceBalance("SHIP005", period_year, 58_320_000.0),
        ]

    def _next_id(self) -> str:
        self._sequence += 1
        return f"txn_{self._sequence:04d}"

    def register_balance(self, balance: ComplianceBalance) -> None:
        """Seed a ship's balance from an external regulatory calculation."""

        if balance.ship_id in self._balances:
            raise ValueError(f"Ship {balance.ship_id} already registered.")
        if not math.isfinite(balance.value_gco2eq):
            raise ValueError(f"Ship {balance.ship_id} has a non-finite balance.")
        self._balances[balance.ship_id] = balance
        self._banked[balance.ship_id] = 0.0

    def open_period(self, balance: ComplianceBalance) -> ComplianceBalance:
        """Replace a ship's live balance with a later period's seeded value.

        The banked reserve carries over; that is what banking is for.
        """

        current = self.get_balance(balance.ship_id)
        if balance.period_year <= current.period_year:
            raise ValueError(
                f"Period {balance.period_year} for {balance.ship_id} must follow {current.period_year}."
            )
        if not math.isfinite(balance.value_gco2eq):
            raise ValueError(f"Ship {balance.ship_id} has a non-finite balance.")
        self._balances[balance.ship_id] = balance
        LOGGER.info(
            "Opened period %s for %s with balance %.2f (banked %.2f carried over)",
            balance.period_year,
            balance.ship_id,
            balance.value_gco2eq,
            self._banked[balance.ship_id],
        )
        return balance

    def list_ship_ids(self) -> List[str]:
        """Return ship identifiers in registration order."""

        return list(self._balances)

    def list_balances(self) -> List[ComplianceBalance]:
        """Return live balances in registration order."""

        return list(self._balances.values())

    def get_balance(self, ship_id: str, period_year: Optional[int] = None) -> ComplianceBalance:
        """Return the live balance, optionally asserting the reporting period."""

        balance = self._balances.get(ship_id)
        if balance is None:
            raise UnknownShip(ship_id)
        if period_year is not None and balance.period_year != period_year:
            raise UnknownShip(ship_id, period_year)
        return balance

    def get_banked_amount(self, ship_id: str) -> float:
        """Return the ship's banked reserve (never negative)."""

        if ship_id not in self._banked:
            raise UnknownShip(ship_id)
        return self._banked[ship_id]

    def get_transaction_history(self, ship_id: Optional[str] = None) -> List[Transaction]:
        """Return transactions in commit order, for one ship or globally."""

        if ship_id is None:
            return list(self._history)
        if ship_id not in self._balances:
            raise UnknownShip(ship_id)
        return [transaction for transaction in self._history if transaction.ship_id == ship_id]

    def commit(self, ship_id: str, new_value: float, pending: PendingTransaction) -> Transaction:
        """Atomically update one ship's balance and append its transaction."""

        return self.commit_many([(ship_id, new_value, pending)])[0]

    def commit_many(self, entries: Sequence[CommitEntry]) -> List[Transaction]:
        """Atomically apply a batch of balance updates, one per ship."""

        if not entries:
            raise LedgerIntegrityError("A commit needs at least one entry.")

        staged_banked: Dict[str, float] = {}
        for ship_id, new_value, pending in entries:
            if ship_id in staged_banked:
                raise LedgerIntegrityError(
                    f"Ship {ship_id} appears more than once in a single commit.",
                    ship_id=ship_id,
                )
            current = self.get_balance(ship_id)
            if current.value_gco2eq != pending.balance_before:
                raise StaleBalance(ship_id, pending.balance_before, current.value_gco2eq)
            if not math.isfinite(new_value):
                raise LedgerIntegrityError(
                    f"Refusing non-finite balance for {ship_id}.", ship_id=ship_id
                )
            if not math.isfinite(pending.amount) or pending.amount < 0:
                raise LedgerIntegrityError(
                    f"Transaction amounts must be finite and non-negative, got {pending.amount!r}.",
                    ship_id=ship_id,
                )
            if pending.kind is not TransactionKind.POOL and pending.amount == 0:
                raise LedgerIntegrityError(
                    f"{pending.kind.value} transactions must move a positive amount.",
                    ship_id=ship_id,
                )
            banked_after = self._banked[ship_id] + pending.kind.banked_delta_sign * pending.amount
            if banked_after < 0:
                raise LedgerIntegrityError(
                    f"Commit would leave {ship_id} with a negative banked amount.",
                    ship_id=ship_id,
                    banked=self._banked[ship_id],
                    requested=pending.amount,
                )
            staged_banked[ship_id] = banked_after

        timestamp = self._clock()
        committed: List[Transaction] = []
        for ship_id, new_value, pending in entries:
            transaction = Transaction(
                transaction_id=self._next_id(),
                ship_id=ship_id,
                kind=pending.kind,
                amount=pending.amount,
                timestamp=timestamp,
                balance_before=pending.balance_before,
                balance_after=new_value,
            )
            self._balances[ship_id] = self._balances[ship_id].with_value(new_value)
            self._banked[ship_id] = staged_banked[ship_id]
            self._history.append(transaction)
            committed.append(transaction)
        LOGGER.info(
            "Committed %s transaction(s): %s",
            len(committed),
            ", ".join(f"{t.transaction_id}={t.ship_id}:{t.kind.value}" for t in committed),
        )
        return committed

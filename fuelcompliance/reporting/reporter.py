"""Mini README: Read-only compliance projections for the dashboard.

Structure:
    * BalanceStatus - surplus / deficit / compliant classification.
    * ShipSnapshot - one ship's balance, status and banked reserve.
    * ComplianceReporter - aggregates committed ledger state for display.

The reporter never mutates the ledger. It reads committed balances and the
transaction log and reshapes them for tables, badges and summary cards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..ledger import LedgerStore, Transaction, TransactionKind
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class BalanceStatus(str, Enum):
    SURPLUS = "surplus"
    DEFICIT = "deficit"
    COMPLIANT = "compliant"


@dataclass(frozen=True, slots=True)
class ShipSnapshot:
    """Display row describing one ship's committed state."""

    ship_id: str
    period_year: int
    balance_gco2eq: float
    status: BalanceStatus
    banked_gco2eq: float

    def as_dict(self) -> Dict[str, object]:
        return {
            "ship_id": self.ship_id,
            "period_year": self.period_year,
            "balance_gco2eq": self.balance_gco2eq,
            "status": self.status.value,
            "banked_gco2eq": self.banked_gco2eq,
        }


class ComplianceReporter:
    """Summarise ledger state without mutating it."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    @staticmethod
    def classify(value_gco2eq: float) -> BalanceStatus:
        if value_gco2eq > 0:
            return BalanceStatus.SURPLUS
        if value_gco2eq < 0:
            return BalanceStatus.DEFICIT
        return BalanceStatus.COMPLIANT

    def ship_snapshots(self) -> List[ShipSnapshot]:
        """Return one snapshot per registered ship in registration order."""

        return [
            ShipSnapshot(
                ship_id=balance.ship_id,
                period_year=balance.period_year,
                balance_gco2eq=balance.value_gco2eq,
                status=self.classify(balance.value_gco2eq),
                banked_gco2eq=self._store.get_banked_amount(balance.ship_id),
            )
            for balance in self._store.list_balances()
        ]

    def recent_transactions(self, ship_id: str, kind: Optional[str] = None) -> List[Transaction]:
        """Return a ship's history with the most recent entry first.

        ``kind`` narrows the result to ``bank``, ``apply`` or ``pool`` entries.
        """

        history = self._store.get_transaction_history(ship_id)
        if kind is not None:
            wanted = TransactionKind.from_str(kind)
            history = [transaction for transaction in history if transaction.kind is wanted]
        return list(reversed(history))

    def summarise_metrics(self) -> Dict[str, object]:
        """Aggregate fleet-level totals for dashboard cards."""

        snapshots = self.ship_snapshots()
        surplus = [s.balance_gco2eq for s in snapshots if s.status is BalanceStatus.SURPLUS]
        deficit = [s.balance_gco2eq for s in snapshots if s.status is BalanceStatus.DEFICIT]
        metrics = {
            "ship_count": len(snapshots),
            "surplus_ships": len(surplus),
            "deficit_ships": len(deficit),
            "compliant_ships": len(snapshots) - len(surplus) - len(deficit),
            "total_surplus_gco2eq": sum(surplus),
            "total_deficit_gco2eq": sum(deficit),
            "net_balance_gco2eq": sum(s.balance_gco2eq for s in snapshots),
            "total_banked_gco2eq": sum(s.banked_gco2eq for s in snapshots),
        }
        LOGGER.debug("Compliance metrics: %s", metrics)
        return metrics

    def export_snapshot(self) -> Dict[str, List[Dict[str, object]]]:
        """Export ships and the global history for JSON responses."""

        return {
            "ships": [snapshot.as_dict() for snapshot in self.ship_snapshots()],
            "transactions": [
                transaction.as_dict() for transaction in self._store.get_transaction_history()
            ],
        }

"""Mini README: Value types shared by the ledger, banking and pooling engines.

Structure:
    * TransactionKind - enum of bank, apply and pool ledger entries.
    * ComplianceBalance - live compliance balance for a ship and period.
    * PendingTransaction - engine-side request that the store turns into a
      Transaction once the commit succeeds.
    * Transaction - immutable, append-only ledger record.

Amounts are expressed in gCO2eq. Positive balances are surplus, negative
balances are deficit and zero means exactly compliant.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict


class TransactionKind(str, Enum):
    """Enumerate the ledger entry categories."""

    BANK = "bank"
    APPLY = "apply"
    POOL = "pool"

    @classmethod
    def from_str(cls, value: str) -> "TransactionKind":
        """Coerce arbitrary casing into a valid transaction kind."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported transaction kind: {value}") from error

    @property
    def banked_delta_sign(self) -> int:
        """Direction in which this kind moves the ship's banked reserve."""

        if self is TransactionKind.BANK:
            return 1
        if self is TransactionKind.APPLY:
            return -1
        return 0


@dataclass(frozen=True, slots=True)
class ComplianceBalance:
    """Compliance balance for one ship in one reporting period."""

    ship_id: str
    period_year: int
    value_gco2eq: float

    def with_value(self, value_gco2eq: float) -> "ComplianceBalance":
        return ComplianceBalance(self.ship_id, self.period_year, value_gco2eq)

    def as_dict(self) -> Dict[str, object]:
        return {
            "ship_id": self.ship_id,
            "period_year": self.period_year,
            "value_gco2eq": self.value_gco2eq,
        }


@dataclass(frozen=True, slots=True)
class PendingTransaction:
    """A transaction the engines want written, before id and timestamp exist.

    ``balance_before`` is the value the engine validated against; the store
    refuses the commit if the live balance no longer matches it.
    """

    kind: TransactionKind
    amount: float
    balance_before: float


@dataclass(frozen=True, slots=True)
class Transaction:
    """Immutable ledger record capturing a before/after balance snapshot."""

    transaction_id: str
    ship_id: str
    kind: TransactionKind
    amount: float
    timestamp: datetime
    balance_before: float
    balance_after: float

    @property
    def signed_banked_amount(self) -> float:
        """Contribution of this record to the ship's banked reserve."""

        return self.kind.banked_delta_sign * self.amount

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        return {
            "transaction_id": self.transaction_id,
            "ship_id": self.ship_id,
            "kind": self.kind.value,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
            "balance_before": self.balance_before,
            "balance_after": self.balance_after,
        }

"""Mini README: Banking of surplus compliance balance (FuelEU Article 20).

Structure:
    * validate_amount - coerce and check operator supplied amounts.
    * ApplyResult - outcome of applying banked surplus, including any clamp.
    * BankingEngine - validates and commits bank / apply-from-bank requests.

Banking moves realised surplus out of a ship's live balance into its banked
reserve. Applying moves banked reserve back onto a deficit, never more than
the deficit needs. All checks run against the store before anything is
committed; a rejected request raises and leaves the ledger untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Dict, Optional

from ..ledger import (
    InsufficientBalance,
    InsufficientBankedAmount,
    InvalidAmount,
    LedgerStore,
    NoSurplusToBank,
    NotInDeficit,
    PendingTransaction,
    Transaction,
    TransactionKind,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def validate_amount(amount: object) -> float:
    """Return ``amount`` as a float if it is a finite positive number."""

    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise InvalidAmount(amount)
    try:
        value = float(amount)
    except OverflowError as error:
        raise InvalidAmount(amount) from error
    if not math.isfinite(value) or value <= 0:
        raise InvalidAmount(amount)
    return value


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of an apply-from-bank request."""

    transaction: Transaction
    actual_amount_applied: float
    requested_amount: float

    @property
    def was_adjusted(self) -> bool:
        return self.actual_amount_applied < self.requested_amount

    @property
    def warning(self) -> Optional[str]:
        """Operator-facing note when the request was capped to the deficit."""

        if not self.was_adjusted:
            return None
        return (
            f"Applied {self.actual_amount_applied:,.2f} gCO2eq instead of "
            f"{self.requested_amount:,.2f} gCO2eq (maximum needed)"
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "transaction": self.transaction.as_dict(),
            "actual_amount_applied": self.actual_amount_applied,
            "requested_amount": self.requested_amount,
            "warning": self.warning,
        }


class BankingEngine:
    """Validate and apply banking operations against a ledger store."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def bank(self, ship_id: str, amount: object) -> Transaction:
        """Move ``amount`` of surplus from the live balance into the bank."""

        balance = self._store.get_balance(ship_id).value_gco2eq
        if balance <= 0:
            LOGGER.warning("Bank rejected for %s: balance %.2f is not a surplus", ship_id, balance)
            raise NoSurplusToBank(ship_id, balance)
        value = validate_amount(amount)
        if value > balance:
            LOGGER.warning(
                "Bank rejected for %s: requested %.2f exceeds surplus %.2f",
                ship_id,
                value,
                balance,
            )
            raise InsufficientBalance(ship_id, available=balance, requested=value)

        transaction = self._store.commit(
            ship_id,
            balance - value,
            PendingTransaction(kind=TransactionKind.BANK, amount=value, balance_before=balance),
        )
        LOGGER.info("Banked %.2f gCO2eq from %s", value, ship_id)
        return transaction

    def apply_from_bank(self, ship_id: str, amount: object) -> ApplyResult:
        """Apply banked surplus to a deficit, capped at what the deficit needs."""

        balance = self._store.get_balance(ship_id).value_gco2eq
        if balance >= 0:
            LOGGER.warning("Apply rejected for %s: balance %.2f is not a deficit", ship_id, balance)
            raise NotInDeficit(ship_id, balance)
        banked = self._store.get_banked_amount(ship_id)
        if banked <= 0:
            LOGGER.warning("Apply rejected for %s: nothing banked", ship_id)
            raise InsufficientBankedAmount(ship_id, available=banked, requested=amount)
        value = validate_amount(amount)
        # Requests beyond the deficit are capped, so only the useful part must be covered.
        if min(value, abs(balance)) > banked:
            LOGGER.warning(
                "Apply rejected for %s: requested %.2f exceeds banked %.2f",
                ship_id,
                value,
                banked,
            )
            raise InsufficientBankedAmount(ship_id, available=banked, requested=value)

        actual = min(value, banked, abs(balance))
        transaction = self._store.commit(
            ship_id,
            balance + actual,
            PendingTransaction(kind=TransactionKind.APPLY, amount=actual, balance_before=balance),
        )
        result = ApplyResult(
            transaction=transaction,
            actual_amount_applied=actual,
            requested_amount=value,
        )
        if result.was_adjusted:
            LOGGER.warning("Apply for %s adjusted: %s", ship_id, result.warning)
        LOGGER.info("Applied %.2f gCO2eq of banked surplus to %s", actual, ship_id)
        return result

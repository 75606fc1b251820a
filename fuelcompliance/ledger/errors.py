"""Mini README: Error taxonomy for banking, pooling and ledger commits.

Structure:
    * ComplianceError - base class carrying a stable ``kind`` code, a human
      readable message and numeric context for operator correction.
    * Banking errors - InvalidAmount, InsufficientBalance, NoSurplusToBank,
      NotInDeficit, InsufficientBankedAmount.
    * Pooling errors - InsufficientMembers, DuplicatePoolMember, PoolDeficit,
      PoolRuleViolation.
    * Store errors - UnknownShip, StaleBalance, LedgerIntegrityError.

Every error is raised before the ledger is touched, so catching one always
means the ledger is exactly as it was before the call.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional


def _json_safe(value: object) -> object:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


class ComplianceError(Exception):
    """Base class for recoverable ledger, banking and pooling failures."""

    kind = "compliance_error"

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, object] = context

    def __str__(self) -> str:
        return self.message

    def as_dict(self) -> Dict[str, object]:
        """Export the error for JSON responses."""

        context = {key: _json_safe(value) for key, value in self.context.items()}
        return {"error": self.kind, "message": self.message, "context": context}


class InvalidAmount(ComplianceError, ValueError):
    kind = "invalid_amount"

    def __init__(self, amount: object) -> None:
        super().__init__(
            f"Amount must be a finite positive number, got {amount!r}",
            requested=amount,
        )


class InsufficientBalance(ComplianceError, ValueError):
    kind = "insufficient_balance"

    def __init__(self, ship_id: str, available: float, requested: float) -> None:
        super().__init__(
            f"Cannot bank {requested:,.2f} gCO2eq from {ship_id}: "
            f"only {available:,.2f} gCO2eq surplus available",
            ship_id=ship_id,
            available=available,
            requested=requested,
        )


class NoSurplusToBank(ComplianceError, ValueError):
    kind = "no_surplus_to_bank"

    def __init__(self, ship_id: str, balance: float) -> None:
        super().__init__(
            f"Ship {ship_id} has no surplus to bank (balance {balance:,.2f} gCO2eq)",
            ship_id=ship_id,
            balance=balance,
        )


class NotInDeficit(ComplianceError, ValueError):
    kind = "not_in_deficit"

    def __init__(self, ship_id: str, balance: float) -> None:
        super().__init__(
            f"Ship {ship_id} is not in deficit (balance {balance:,.2f} gCO2eq); "
            "banked surplus can only be applied to a deficit",
            ship_id=ship_id,
            balance=balance,
        )


class InsufficientBankedAmount(ComplianceError, ValueError):
    kind = "insufficient_banked_amount"

    def __init__(self, ship_id: str, available: float, requested: object) -> None:
        super().__init__(
            f"Ship {ship_id} has {available:,.2f} gCO2eq banked; "
            f"cannot apply {requested}",
            ship_id=ship_id,
            available=available,
            requested=requested,
        )


class InsufficientMembers(ComplianceError, ValueError):
    kind = "insufficient_members"

    def __init__(self, member_count: int) -> None:
        super().__init__(
            f"A pool needs at least 2 members, got {member_count}",
            member_count=member_count,
        )


class DuplicatePoolMember(ComplianceError, ValueError):
    kind = "duplicate_pool_member"

    def __init__(self, ship_ids: Iterable[str]) -> None:
        duplicates = sorted(set(ship_ids))
        super().__init__(
            f"Ships may only appear once in a pool: {', '.join(duplicates)}",
            ship_ids=duplicates,
        )


class PoolDeficit(ComplianceError, ValueError):
    kind = "pool_deficit"

    def __init__(self, total: float) -> None:
        super().__init__(
            f"Pool total compliance balance is {total:,.2f} gCO2eq (must be >= 0)",
            total=total,
        )


class PoolRuleViolation(ComplianceError, ValueError):
    kind = "pool_rule_violation"

    def __init__(self, violations: Dict[str, str]) -> None:
        self.ship_ids: List[str] = list(violations)
        self.reasons: Dict[str, str] = dict(violations)
        details = "; ".join(f"{ship_id}: {reason}" for ship_id, reason in violations.items())
        super().__init__(
            f"Pool allocation violates pooling rules ({details})",
            ship_ids=list(self.ship_ids),
            reasons=dict(self.reasons),
        )


class UnknownShip(ComplianceError, KeyError):
    kind = "unknown_ship"

    def __init__(self, ship_id: str, period_year: Optional[int] = None) -> None:
        if period_year is None:
            message = f"Ship {ship_id} is not registered"
        else:
            message = f"Ship {ship_id} has no compliance balance for {period_year}"
        super().__init__(message, ship_id=ship_id, period_year=period_year)


class StaleBalance(ComplianceError):
    kind = "stale_balance"

    def __init__(self, ship_id: str, expected: float, actual: float) -> None:
        super().__init__(
            f"Balance of {ship_id} changed from {expected:,.2f} to {actual:,.2f} "
            "gCO2eq; refresh and retry",
            ship_id=ship_id,
            expected=expected,
            actual=actual,
        )


class LedgerIntegrityError(ComplianceError):
    kind = "ledger_integrity"

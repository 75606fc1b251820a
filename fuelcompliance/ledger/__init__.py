"""Mini README: Ledger core holding compliance balances and history.

``models`` defines the value types, ``errors`` the failure taxonomy shared
with the banking and pooling engines, and ``store`` the owned in-memory
``LedgerStore`` that every mutation goes through.
"""

from .errors import (
    ComplianceError,
    DuplicatePoolMember,
    InsufficientBalance,
    InsufficientBankedAmount,
    InsufficientMembers,
    InvalidAmount,
    LedgerIntegrityError,
    NoSurplusToBank,
    NotInDeficit,
    PoolDeficit,
    PoolRuleViolation,
    StaleBalance,
    UnknownShip,
)
from .models import ComplianceBalance, PendingTransaction, Transaction, TransactionKind
from .store import LedgerStore

__all__ = [
    "ComplianceBalance",
    "ComplianceError",
    "DuplicatePoolMember",
    "InsufficientBalance",
    "InsufficientBankedAmount",
    "InsufficientMembers",
    "InvalidAmount",
    "LedgerIntegrityError",
    "LedgerStore",
    "NoSurplusToBank",
    "NotInDeficit",
    "PendingTransaction",
    "PoolDeficit",
    "PoolRuleViolation",
    "StaleBalance",
    "Transaction",
    "TransactionKind",
    "UnknownShip",
]

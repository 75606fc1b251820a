"""Mini README: Facade exposing the compliance core to interfaces.

Structure:
    * ComplianceService - owns one LedgerStore and wires the banking engine,
      pooling engine, reporter and route registry around it.

The service is the only object the web layer talks to. Mutating calls are
serialised through a single lock because the engines themselves provide no
concurrency control; read-only calls go straight to the store.
"""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional

from .banking import ApplyResult, BankingEngine
from .configuration import ComplianceSettings, get_settings
from .ledger import ComplianceBalance, LedgerStore, Transaction
from .logging_utils import get_logger
from .pooling import AllocationStrategy, PoolAllocation, PoolAllocationEngine, PoolProposal, greedy_allocation
from .reporting import ComplianceReporter
from .routes import RouteRegistry

LOGGER = get_logger(__name__)


class ComplianceService:
    """Single entry point for banking, pooling and reporting operations."""

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        *,
        routes: Optional[RouteRegistry] = None,
        settings: Optional[ComplianceSettings] = None,
        strategy: AllocationStrategy = greedy_allocation,
    ) -> None:
        settings = settings or get_settings()
        if store is None:
            store = LedgerStore(
                None if settings.seed_demo_data else [],
                demo_period_year=settings.reporting_year,
            )
        if routes is None:
            routes = RouteRegistry(
                None if settings.seed_demo_data else [],
                target_intensity=settings.target_intensity,
            )
        self.store = store
        self.banking = BankingEngine(store)
        self.pooling = PoolAllocationEngine(store, strategy=strategy)
        self.reporter = ComplianceReporter(store)
        self.routes = routes
        self._lock = threading.Lock()
        LOGGER.debug(
            "ComplianceService ready with %s ships and %s routes",
            len(store.list_ship_ids()),
            len(routes.list_routes()),
        )

    def get_balance(self, ship_id: str, period_year: Optional[int] = None) -> ComplianceBalance:
        return self.store.get_balance(ship_id, period_year)

    def get_banked_amount(self, ship_id: str) -> float:
        return self.store.get_banked_amount(ship_id)

    def get_transaction_history(self, ship_id: str) -> List[Transaction]:
        return self.store.get_transaction_history(ship_id)

    def open_period(self, balance: ComplianceBalance) -> ComplianceBalance:
        with self._lock:
            return self.store.open_period(balance)

    def bank(self, ship_id: str, amount: object) -> Transaction:
        with self._lock:
            return self.banking.bank(ship_id, amount)

    def apply_from_bank(self, ship_id: str, amount: object) -> ApplyResult:
        with self._lock:
            return self.banking.apply_from_bank(ship_id, amount)

    def propose_pool(self, ship_ids: Iterable[str]) -> PoolProposal:
        return self.pooling.propose_pool(ship_ids)

    def allocate_pool(self, proposal: PoolProposal) -> List[PoolAllocation]:
        with self._lock:
            return self.pooling.allocate_pool(proposal)

    def reset_pool(self, proposal: PoolProposal) -> PoolProposal:
        return self.pooling.reset_pool(proposal)

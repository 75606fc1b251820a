"""Mini README: Read-only reporting helpers consumed by the dashboard.

Projections here classify balances, total banked reserves and flip history
into display order. Nothing in this package writes to the ledger.
"""

from .reporter import BalanceStatus, ComplianceReporter, ShipSnapshot

__all__ = ["BalanceStatus", "ComplianceReporter", "ShipSnapshot"]

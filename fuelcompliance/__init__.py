"""Mini README: Core package initializer for the FuelEU compliance dashboard.

The package is split into an in-memory ledger core (``ledger``, ``banking``,
``pooling``), read-only projections (``reporting``, ``routes``) and the
browser-facing ``interface``. ``ComplianceService`` wires the core together
and is the entry point most callers need.
"""

from .logging_utils import get_logger
from .service import ComplianceService

__all__ = ["ComplianceService", "get_logger"]

"""Mini README: Banking engine for saving and applying surplus balance."""

from .engine import ApplyResult, BankingEngine, validate_amount

__all__ = ["ApplyResult", "BankingEngine", "validate_amount"]

"""Mini README: Pooling engine redistributing balance across ships."""

from .engine import (
    AllocationStrategy,
    PoolAllocation,
    PoolAllocationEngine,
    PoolMember,
    PoolProposal,
    find_rule_violations,
    greedy_allocation,
)

__all__ = [
    "AllocationStrategy",
    "PoolAllocation",
    "PoolAllocationEngine",
    "PoolMember",
    "PoolProposal",
    "find_rule_violations",
    "greedy_allocation",
]

"""Mini README: Compliance pooling across ships (FuelEU Article 21).

Structure:
    * PoolMember - working row of a proposal (balance before and after).
    * PoolProposal - ephemeral, mutable selection of ships to pool.
    * PoolAllocation - committed result for one member.
    * greedy_allocation - default redistribution strategy.
    * find_rule_violations - post-allocation pooling rule check.
    * PoolAllocationEngine - validates, allocates and commits pools.

A pool may only be formed when its members' balances sum to zero or more.
The greedy strategy walks donors from the largest surplus down and, for each
donor, covers deficits starting from the most negative one. It is a single
pass and makes no attempt at a fair split, so the canonical ordering matters:
ties keep the order in which ships were proposed. Any allocation, greedy or
injected, is checked against the pooling rules before the whole pool is
written to the ledger in one atomic commit.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Sequence

from ..ledger import (
    DuplicatePoolMember,
    InsufficientMembers,
    LedgerStore,
    PendingTransaction,
    PoolDeficit,
    PoolRuleViolation,
    StaleBalance,
    TransactionKind,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

MIN_POOL_MEMBERS = 2


@dataclass(slots=True)
class PoolMember:
    """Ship participating in a pool proposal."""

    ship_id: str
    balance_before: float
    balance_after: float

    @property
    def change(self) -> float:
        return self.balance_after - self.balance_before

    def as_dict(self) -> Dict[str, object]:
        return {
            "ship_id": self.ship_id,
            "balance_before": self.balance_before,
            "balance_after": self.balance_after,
            "change": self.change,
        }


@dataclass(slots=True)
class PoolProposal:
    """Ephemeral selection of ships with their working balances."""

    members: List[PoolMember] = field(default_factory=list)

    @property
    def ship_ids(self) -> List[str]:
        return [member.ship_id for member in self.members]

    @property
    def total_balance(self) -> float:
        return sum(member.balance_before for member in self.members)

    @property
    def is_valid(self) -> bool:
        """Whether the proposal passes the pre-allocation checks."""

        return (
            len(self.members) >= MIN_POOL_MEMBERS
            and len(set(self.ship_ids)) == len(self.members)
            and self.total_balance >= 0
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "members": [member.as_dict() for member in self.members],
            "total_balance": self.total_balance,
            "is_valid": self.is_valid,
        }


@dataclass(frozen=True, slots=True)
class PoolAllocation:
    """Committed balance for one pool member."""

    ship_id: str
    balance_before: float
    balance_after: float

    def as_dict(self) -> Dict[str, object]:
        return {
            "ship_id": self.ship_id,
            "balance_before": self.balance_before,
            "balance_after": self.balance_after,
        }


AllocationStrategy = Callable[[Sequence[PoolMember]], Dict[str, float]]


def greedy_allocation(members: Sequence[PoolMember]) -> Dict[str, float]:
    """Redistribute surplus to deficits and return ``balance_after`` per ship.

    Members are sorted by ``balance_before`` descending (``sorted`` is stable,
    so ties keep proposal order). Each donor in that order hands surplus to
    deficit members scanned from the end of the sorted list backwards.
    """

    ordered = sorted(members, key=lambda member: member.balance_before, reverse=True)
    after = [member.balance_before for member in ordered]

    for i in range(len(ordered)):
        if after[i] <= 0:
            continue
        for j in range(len(ordered) - 1, -1, -1):
            if after[i] <= 0:
                break
            if after[j] < 0:
                transfer = min(after[i], abs(after[j]))
                after[i] -= transfer
                after[j] += transfer

    return {member.ship_id: value for member, value in zip(ordered, after)}


def find_rule_violations(members: Iterable[PoolMember]) -> Dict[str, str]:
    """Return ``{ship_id: reason}`` for members breaking the pooling rules."""

    violations: Dict[str, str] = {}
    for member in members:
        if member.balance_before < 0 and member.balance_after < member.balance_before:
            violations[member.ship_id] = "deficit cannot worsen"
        elif member.balance_before > 0 and member.balance_after < 0:
            violations[member.ship_id] = "surplus cannot go negative"
    return violations


class PoolAllocationEngine:
    """Build, allocate and commit compliance pools against a ledger store."""

    def __init__(
        self,
        store: LedgerStore,
        *,
        strategy: AllocationStrategy = greedy_allocation,
    ) -> None:
        self._store = store
        self._strategy = strategy

    def propose_pool(self, ship_ids: Iterable[str]) -> PoolProposal:
        """Snapshot the live balances of ``ship_ids`` into a new proposal."""

        members = []
        for ship_id in ship_ids:
            value = self._store.get_balance(ship_id).value_gco2eq
            members.append(PoolMember(ship_id=ship_id, balance_before=value, balance_after=value))
        LOGGER.debug("Proposed pool with members %s", [member.ship_id for member in members])
        return PoolProposal(members=members)

    @staticmethod
    def reset_pool(proposal: PoolProposal) -> PoolProposal:
        """Restore working balances to their pre-allocation values."""

        for member in proposal.members:
            member.balance_after = member.balance_before
        return proposal

    def allocate_pool(self, proposal: PoolProposal) -> List[PoolAllocation]:
        """Allocate and commit ``proposal`` or raise without touching the ledger."""

        members = proposal.members
        if len(members) < MIN_POOL_MEMBERS:
            LOGGER.warning("Pool rejected: %s member(s)", len(members))
            raise InsufficientMembers(len(members))
        duplicates = [ship_id for ship_id, count in Counter(proposal.ship_ids).items() if count > 1]
        if duplicates:
            raise DuplicatePoolMember(duplicates)
        for member in members:
            live = self._store.get_balance(member.ship_id).value_gco2eq
            if live != member.balance_before:
                raise StaleBalance(member.ship_id, member.balance_before, live)
        total = proposal.total_balance
        if total < 0:
            LOGGER.warning("Pool rejected: total balance %.2f is negative", total)
            raise PoolDeficit(total)

        allocated = self._strategy(members)
        candidates = [
            PoolMember(
                ship_id=member.ship_id,
                balance_before=member.balance_before,
                balance_after=allocated[member.ship_id],
            )
            for member in members
        ]
        violations = find_rule_violations(candidates)
        if violations:
            LOGGER.warning("Pool rejected: rule violations %s", violations)
            raise PoolRuleViolation(violations)

        self._store.commit_many(
            [
                (
                    candidate.ship_id,
                    candidate.balance_after,
                    PendingTransaction(
                        kind=TransactionKind.POOL,
                        amount=abs(candidate.change),
                        balance_before=candidate.balance_before,
                    ),
                )
                for candidate in candidates
            ]
        )
        for member, candidate in zip(members, candidates):
            member.balance_after = candidate.balance_after

        improved = sum(1 for candidate in candidates if candidate.balance_after > candidate.balance_before)
        LOGGER.info(
            "Pool committed for %s ships; %s ship(s) improved compliance balance",
            len(candidates),
            improved,
        )
        return [
            PoolAllocation(
                ship_id=candidate.ship_id,
                balance_before=candidate.balance_before,
                balance_after=candidate.balance_after,
            )
            for candidate in candidates
        ]

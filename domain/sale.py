"""
Domain: Sale records and their status lifecycle.

Contract excerpts relevant here:
- A Sale starts at version 1.
- Status moves one way only: pending -> approved or pending -> rejected.
- Every accepted transition increments version by exactly 1 and moves
  updated_at strictly forward.

Records are immutable; a transition yields a new record. Persistence and
concurrency control live with storage and the sales service.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .errors import InvalidStatusError, InvalidTransitionError
from .time import require_utc_timestamp, strictly_after


class SaleStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: str) -> "SaleStatus":
        """Resolve a raw status string, raising InvalidStatusError when unknown."""

        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(f"invalid status value: {value!r}") from None

    def is_terminal(self) -> bool:
        return self is not SaleStatus.PENDING


# Statuses a sale may be moved into.
TERMINAL_STATUSES: frozenset[SaleStatus] = frozenset(
    {SaleStatus.APPROVED, SaleStatus.REJECTED}
)


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable snapshot of a sale.

    - id / user_id / amount / created_at are fixed at creation.
    - status changes at most once, from pending to a terminal status.
    - version is 1 + number of accepted transitions.

    All timestamps must be passed explicitly and be UTC.
    """

    id: str
    user_id: str
    amount: Decimal
    status: SaleStatus
    created_at: datetime
    updated_at: datetime
    version: int = 1

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        require_utc_timestamp("updated_at", self.updated_at)
        if self.version < 1:
            raise ValueError("version must be >= 1")
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not precede created_at")

    def transition_to(self, new_status: SaleStatus, at: datetime) -> "Sale":
        """
        Return the record after moving to `new_status` at time `at`.

        Raises:
            InvalidStatusError: new_status is not approved/rejected
            InvalidTransitionError: this sale is no longer pending
        """

        if new_status not in TERMINAL_STATUSES:
            raise InvalidStatusError(f"cannot transition a sale to {new_status.value!r}")
        if self.status is not SaleStatus.PENDING:
            raise InvalidTransitionError(
                f"sale {self.id} is already {self.status.value}; "
                f"cannot move to {new_status.value}"
            )

        return replace(
            self,
            status=new_status,
            updated_at=strictly_after(at, self.updated_at),
            version=self.version + 1,
        )

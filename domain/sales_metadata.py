"""
Domain: aggregate over a filtered set of sales.

Recomputed on every search; never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from .sale import Sale, SaleStatus


@dataclass(slots=True)
class SalesMetadata:
    quantity: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0
    total_amount: Decimal = field(default_factory=lambda: Decimal("0"))

    def add(self, sale: Sale) -> None:
        """Count `sale` once in the totals and in its status counter."""

        self.quantity += 1
        self.total_amount += sale.amount
        if sale.status is SaleStatus.APPROVED:
            self.approved += 1
        elif sale.status is SaleStatus.REJECTED:
            self.rejected += 1
        else:
            self.pending += 1

"""
Sale storage (persistence contract).

This module provides *only* persistence operations for the Sale domain
entity. It does not enforce business rules (create vs update, status
transitions); it only stores and fetches sale records keyed by id.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Protocol

from domain.errors import EmptyIdentifierError, SaleNotFoundError
from domain.sale import Sale


class SaleStorage(Protocol):
    """Key-value store for sales. Implementations must be safe to share across threads."""

    def set(self, sale: Sale) -> None:
        """Insert or fully replace the record keyed by `sale.id`."""
        ...

    def read(self, sale_id: str) -> Sale:
        """Return the record for `sale_id` or raise SaleNotFoundError."""
        ...

    def get_all(self) -> List[Sale]:
        """Return every stored record, in no particular order."""
        ...


class InMemorySaleStorage:
    """
    Reference storage backed by a dict.

    All operations are serialized through a single lock. Records are
    immutable, so handing them out without copying is safe.
    """

    def __init__(self) -> None:
        self._sales: Dict[str, Sale] = {}
        self._lock = threading.Lock()

    def set(self, sale: Sale) -> None:
        if not sale.id:
            raise EmptyIdentifierError("sale id must not be empty")
        with self._lock:
            self._sales[sale.id] = sale

    def read(self, sale_id: str) -> Sale:
        with self._lock:
            sale = self._sales.get(sale_id)
        if sale is None:
            raise SaleNotFoundError(f"sale not found: {sale_id}")
        return sale

    def get_all(self) -> List[Sale]:
        with self._lock:
            return list(self._sales.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sales)


__all__ = ["SaleStorage", "InMemorySaleStorage"]

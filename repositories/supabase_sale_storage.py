"""
Supabase-backed sale storage.

Drop-in replacement for InMemorySaleStorage that keeps sales in a Supabase
table. Only persistence lives here; lifecycle rules stay in the service.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Mapping

from domain.errors import EmptyIdentifierError, PersistenceError, SaleNotFoundError
from domain.sale import Sale, SaleStatus
from domain.time import require_utc_timestamp

# Supabase table name for sale records.
# Keep this aligned with your database schema.
_SALES_TABLE: str = "sales"


def _to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _row_to_sale(row: Mapping[str, Any]) -> Sale:
    """Convert a Supabase row into a Sale."""

    return Sale(
        id=str(row["sale_id"]),
        user_id=str(row["user_id"]),
        amount=Decimal(str(row["amount"])),
        status=SaleStatus(str(row["status"])),
        created_at=_parse_utc_datetime(row["created_at_utc"]),
        updated_at=_parse_utc_datetime(row["updated_at_utc"]),
        version=int(row["version"]),
    )


def _sale_to_row(sale: Sale) -> dict[str, Any]:
    return {
        "sale_id": sale.id,
        "user_id": sale.user_id,
        "amount": str(sale.amount),
        "status": sale.status.value,
        "created_at_utc": _to_iso_utc(sale.created_at, name="created_at"),
        "updated_at_utc": _to_iso_utc(sale.updated_at, name="updated_at"),
        "version": sale.version,
    }


class SupabaseSaleStorage:
    """
    Sale storage over a Supabase table.

    `set` upserts on `sale_id`, so it has the same insert-or-replace
    semantics as the in-memory store. Any client exception or response
    error is reported as PersistenceError.
    """

    def __init__(self, client: Any, table: str = _SALES_TABLE) -> None:
        self._client = client
        self._table = table

    def _execute(self, query: Any, action: str) -> list[Mapping[str, Any]]:
        try:
            response = query.execute()
        except Exception as exc:
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

        error = getattr(response, "error", None)
        if error:
            raise PersistenceError(f"Failed to {action}: {error}")

        return getattr(response, "data", None) or []

    def set(self, sale: Sale) -> None:
        if not sale.id:
            raise EmptyIdentifierError("sale id must not be empty")

        query = self._client.table(self._table).upsert(_sale_to_row(sale), on_conflict="sale_id")
        self._execute(query, "save sale")

    def read(self, sale_id: str) -> Sale:
        query = (
            self._client.table(self._table)
            .select("*")
            .eq("sale_id", sale_id)
            .limit(1)
        )
        rows = self._execute(query, "get sale")

        if not rows:
            raise SaleNotFoundError(f"sale not found: {sale_id}")

        return _row_to_sale(rows[0])

    def get_all(self) -> List[Sale]:
        rows = self._execute(self._client.table(self._table).select("*"), "list sales")
        return [_row_to_sale(row) for row in rows]


__all__ = ["SupabaseSaleStorage"]

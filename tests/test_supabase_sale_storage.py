"""
Tests for `repositories/supabase_sale_storage.py`.

The Supabase client is replaced by a MagicMock; these tests check row
mapping and error translation, not the database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from domain.errors import EmptyIdentifierError, PersistenceError, SaleNotFoundError
from domain.sale import Sale, SaleStatus
from repositories.supabase_sale_storage import SupabaseSaleStorage

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

ROW = {
    "sale_id": "sale-1",
    "user_id": "u1",
    "amount": "150.75",
    "status": "approved",
    "created_at_utc": "2025-01-01T12:00:00Z",
    "updated_at_utc": "2025-01-01T12:05:00+00:00",
    "version": 2,
}


def _client(data=None, error=None) -> MagicMock:
    """MagicMock whose every query chain ends in a response with `data`/`error`."""
    client = MagicMock()
    response = SimpleNamespace(data=data, error=error)
    table = client.table.return_value
    table.upsert.return_value.execute.return_value = response
    table.select.return_value.execute.return_value = response
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value = response
    return client


def test_set_upserts_row() -> None:
    client = _client(data=[ROW])
    storage = SupabaseSaleStorage(client)
    sale = Sale(
        id="sale-1",
        user_id="u1",
        amount=Decimal("150.75"),
        status=SaleStatus.PENDING,
        created_at=T0,
        updated_at=T0,
    )

    storage.set(sale)

    client.table.assert_called_with("sales")
    payload = client.table.return_value.upsert.call_args.args[0]
    assert payload["sale_id"] == "sale-1"
    assert payload["amount"] == "150.75"
    assert payload["status"] == "pending"
    assert payload["version"] == 1
    assert payload["created_at_utc"] == "2025-01-01T12:00:00+00:00"


def test_set_rejects_empty_id() -> None:
    client = _client()
    storage = SupabaseSaleStorage(client)
    sale = Sale(
        id="",
        user_id="u1",
        amount=Decimal("1"),
        status=SaleStatus.PENDING,
        created_at=T0,
        updated_at=T0,
    )

    with pytest.raises(EmptyIdentifierError):
        storage.set(sale)

    client.table.return_value.upsert.assert_not_called()


def test_read_maps_row_to_sale() -> None:
    storage = SupabaseSaleStorage(_client(data=[ROW]))

    sale = storage.read("sale-1")

    assert sale.id == "sale-1"
    assert sale.amount == Decimal("150.75")
    assert sale.status is SaleStatus.APPROVED
    assert sale.created_at == T0
    assert sale.updated_at.tzinfo is not None
    assert sale.version == 2


def test_read_missing_raises_not_found() -> None:
    storage = SupabaseSaleStorage(_client(data=[]))

    with pytest.raises(SaleNotFoundError):
        storage.read("nope")


def test_get_all_maps_every_row() -> None:
    second = dict(ROW, sale_id="sale-2", status="pending", version=1)
    storage = SupabaseSaleStorage(_client(data=[ROW, second]))

    sales = storage.get_all()

    assert [s.id for s in sales] == ["sale-1", "sale-2"]


def test_response_error_becomes_persistence_error() -> None:
    storage = SupabaseSaleStorage(_client(error="permission denied"))

    with pytest.raises(PersistenceError, match="permission denied"):
        storage.get_all()


def test_client_exception_becomes_persistence_error() -> None:
    client = _client()
    client.table.return_value.select.return_value.execute.side_effect = ConnectionError("down")
    storage = SupabaseSaleStorage(client)

    with pytest.raises(PersistenceError):
        storage.get_all()

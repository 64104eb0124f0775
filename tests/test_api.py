"""
HTTP tests for the sales API.

The application is built around an in-memory SalesService; the user
service is either the in-process fake or the mock user service app.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from api.settings import Settings
from domain.errors import PersistenceError, UserValidationError
from repositories.sale_storage import InMemorySaleStorage
from scripts.mock_user_service import create_mock_app
from services.sales_service import SalesService, pending_initial_status
from services.user_client import HttpUserClient


@pytest.fixture
def client(service: SalesService) -> TestClient:
    """Provide a TestClient for an app wired to the pinned service."""
    return TestClient(create_app(service=service, settings=Settings()))


def _create(client: TestClient, user_id: str = "user123", amount=150.75) -> dict:
    response = client.post("/sales", json={"user_id": user_id, "amount": amount})
    assert response.status_code == 201, response.text
    return response.json()


def test_ping_and_health(client: TestClient) -> None:
    assert client.get("/ping").json() == {"message": "pong"}
    assert client.get("/health").json()["status"] == "healthy"


def test_full_flow_against_mock_user_service() -> None:
    """POST -> PATCH -> GET through the real HTTP user client."""

    with TestClient(create_mock_app()) as users_http:
        service = SalesService(
            InMemorySaleStorage(),
            HttpUserClient("http://testserver/users", session=users_http),  # type: ignore[arg-type]
            initial_status_policy=pending_initial_status,
        )
        client = TestClient(create_app(service=service, settings=Settings()))

        created = _create(client)
        assert created["id"]
        assert created["user_id"] == "user123"
        assert Decimal(str(created["amount"])) == Decimal("150.75")
        assert created["status"] in {"pending", "approved", "rejected"}
        assert created["version"] == 1

        response = client.patch(f"/sales/{created['id']}", json={"status": "approved"})
        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == created["id"]
        assert updated["status"] == "approved"
        assert updated["version"] == 2
        assert datetime.fromisoformat(updated["updated_at"].replace("Z", "+00:00")) > datetime.fromisoformat(
            updated["created_at"].replace("Z", "+00:00")
        )

        response = client.get("/sales", params={"user_id": "user123"})
        assert response.status_code == 200
        body = response.json()
        assert [s["id"] for s in body["results"]] == [created["id"]]
        assert body["results"][0]["status"] == "approved"
        assert body["metadata"]["quantity"] == 1
        assert body["metadata"]["approved"] == 1
        assert body["metadata"]["pending"] == 0
        assert body["metadata"]["rejected"] == 0
        assert Decimal(str(body["metadata"]["total_amount"])) == Decimal("150.75")

        response = client.get("/sales", params={"status": "approved"})
        assert response.status_code == 200
        body = response.json()
        assert [s["id"] for s in body["results"]] == [created["id"]]
        assert body["metadata"]["approved"] == 1

        response = client.post("/sales", json={"user_id": "nobody", "amount": 10})
        assert response.status_code == 404


@pytest.mark.parametrize("amount", [0, -5])
def test_create_invalid_amount(client: TestClient, storage, amount) -> None:
    response = client.post("/sales", json={"user_id": "user123", "amount": amount})

    assert response.status_code == 400
    assert "amount" in response.json()["detail"]
    assert storage.get_all() == []


def test_create_malformed_body(client: TestClient) -> None:
    response = client.post("/sales", json={"user_id": "user123", "amount": "lots"})

    assert response.status_code == 422


def test_create_unknown_user(client: TestClient) -> None:
    response = client.post("/sales", json={"user_id": "ghost", "amount": 10})

    assert response.status_code == 404


def test_create_user_service_down(client: TestClient, users) -> None:
    users.error = UserValidationError("user service timed out")

    response = client.post("/sales", json={"user_id": "user123", "amount": 10})

    assert response.status_code == 502


def test_patch_errors(client: TestClient) -> None:
    sale = _create(client)

    assert client.patch("/sales/missing", json={"status": "approved"}).status_code == 404
    assert client.patch(f"/sales/{sale['id']}", json={"status": "pending"}).status_code == 400
    assert client.patch(f"/sales/{sale['id']}", json={"status": "bogus"}).status_code == 400
    assert client.patch(f"/sales/{sale['id']}", json={"status": "rejected"}).status_code == 200

    response = client.patch(f"/sales/{sale['id']}", json={"status": "approved"})
    assert response.status_code == 409
    assert client.get("/sales").json()["results"][0]["version"] == 2


def test_search_invalid_status(client: TestClient) -> None:
    _create(client)

    response = client.get("/sales", params={"status": "unknown"})

    assert response.status_code == 400


def test_search_unknown_user(client: TestClient) -> None:
    response = client.get("/sales", params={"user_id": "ghost"})

    assert response.status_code == 404


def test_search_empty(client: TestClient) -> None:
    body = client.get("/sales").json()

    assert body["results"] == []
    assert body["metadata"]["quantity"] == 0


def test_storage_failure_is_500(users) -> None:
    class BrokenStorage(InMemorySaleStorage):
        def get_all(self):
            raise PersistenceError("backend unavailable")

    service = SalesService(BrokenStorage(), users, initial_status_policy=pending_initial_status)
    client = TestClient(create_app(service=service, settings=Settings()))

    response = client.get("/sales")

    assert response.status_code == 500
    assert "backend unavailable" in response.json()["detail"]

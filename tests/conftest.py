"""
Pytest configuration and shared fixtures.

This file adds the parent directory to the Python path so that tests
can import from the domain, repositories, services and api modules.
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.errors import UserNotFoundError  # noqa: E402
from domain.user import User  # noqa: E402
from repositories.sale_storage import InMemorySaleStorage  # noqa: E402
from services.sales_service import SalesService, pending_initial_status  # noqa: E402


class FakeUserValidator:
    """
    In-process UserValidator.

    Known ids resolve to a User; unknown ids raise UserNotFoundError. Setting
    `error` makes every lookup raise it instead. Every call is recorded.
    """

    def __init__(self, known: Iterable[str] = ("u1", "u2", "user123")) -> None:
        self.known = set(known)
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    def resolve(self, user_id: str) -> User:
        self.calls.append(user_id)
        if self.error is not None:
            raise self.error
        if user_id not in self.known:
            raise UserNotFoundError(f"user not found: {user_id}")
        return User(id=user_id, name=f"User {user_id}")


@pytest.fixture
def storage() -> InMemorySaleStorage:
    return InMemorySaleStorage()


@pytest.fixture
def users() -> FakeUserValidator:
    return FakeUserValidator()


@pytest.fixture
def service(storage: InMemorySaleStorage, users: FakeUserValidator) -> SalesService:
    """SalesService whose new sales always start pending."""
    return SalesService(
        storage=storage,
        user_validator=users,
        initial_status_policy=pending_initial_status,
    )

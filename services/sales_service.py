"""
Sales service: the sale lifecycle engine.

Handles:
- Creating sales for users confirmed by the user service
- The one-way status transition (pending -> approved | rejected)
- Searching sales by user and/or status with aggregate metadata

The service is the only writer to storage. Transitions on the same sale are
serialized so at most one of several concurrent requests can succeed.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional, Union
from uuid import uuid4

from domain.errors import (
    EmptyIdentifierError,
    InvalidAmountError,
    InvalidStatusError,
    InvalidTransitionError,
    PersistenceError,
    UserNotFoundError,
    UserValidationError,
)
from domain.sale import Sale, SaleStatus
from domain.sales_metadata import SalesMetadata
from domain.time import utc_now
from repositories.sale_storage import SaleStorage
from services.user_client import UserValidator

InitialStatusPolicy = Callable[[], SaleStatus]
Clock = Callable[[], datetime]

# Transitions on sales hashing to the same stripe are serialized.
_LOCK_STRIPES = 64


def random_initial_status() -> SaleStatus:
    """Pick the status of a new sale uniformly at random."""

    return random.choice(list(SaleStatus))


def pending_initial_status() -> SaleStatus:
    """Every new sale starts pending."""

    return SaleStatus.PENDING


INITIAL_STATUS_POLICIES: Dict[str, InitialStatusPolicy] = {
    "random": random_initial_status,
    "pending": pending_initial_status,
}


@dataclass(frozen=True, slots=True)
class SalesSearchResult:
    """
    Result of a search.

    sales: matching sales, unordered
    metadata: counts and summed amount over `sales`
    """
    sales: List[Sale]
    metadata: SalesMetadata


def _to_amount(amount: Union[Decimal, int, float, str]) -> Decimal:
    """Coerce an amount to Decimal without float artefacts (150.75 stays 150.75)."""

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"invalid amount: {amount!r}") from exc

    if not value.is_finite():
        raise InvalidAmountError(f"invalid amount: {amount!r}")
    return value


class SalesService:
    """
    Owns every decision to create or mutate a sale.

    Args:
        storage: Where sales live (single source of truth for reads)
        user_validator: Confirms user ids against the user service
        logger: Sink for structured events; defaults to this module's logger
        initial_status_policy: Chooses the status of new sales
        clock: Source of UTC timestamps
    """

    def __init__(
        self,
        storage: SaleStorage,
        user_validator: UserValidator,
        logger: Optional[logging.Logger] = None,
        initial_status_policy: InitialStatusPolicy = random_initial_status,
        clock: Clock = utc_now,
    ) -> None:
        self.storage = storage
        self.user_validator = user_validator
        self.logger = logger or logging.getLogger(__name__)
        self.initial_status_policy = initial_status_policy
        self.clock = clock

        self._sale_locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]

    def _lock_for(self, sale_id: str) -> threading.Lock:
        return self._sale_locks[hash(sale_id) % _LOCK_STRIPES]

    def _validate_user(self, user_id: str) -> None:
        """Raise unless the user service confirms that `user_id` exists."""

        try:
            user = self.user_validator.resolve(user_id)
        except UserNotFoundError:
            self.logger.warning("user not found", extra={"user_id": user_id})
            raise
        except UserValidationError as exc:
            self.logger.error(
                "error validating user with the user service",
                extra={"user_id": user_id, "error": str(exc)},
            )
            raise

        self.logger.debug("user validated", extra={"user_id": user.id, "user_name": user.name})

    def create_sale(self, user_id: str, amount: Union[Decimal, int, float, str]) -> Sale:
        """
        Create a sale for an existing user.

        Process:
        1. Reject non-positive amounts
        2. Confirm the user exists
        3. Build the sale (new id, initial status from the policy, version 1)
        4. Persist it

        Raises:
            InvalidAmountError, UserNotFoundError, UserValidationError,
            PersistenceError
        """
        value = _to_amount(amount)
        if value <= 0:
            raise InvalidAmountError("amount must be greater than zero")

        if not user_id:
            raise UserNotFoundError("user id must not be empty")

        self._validate_user(user_id)

        now = self.clock()
        sale = Sale(
            id=str(uuid4()),
            user_id=user_id,
            amount=value,
            status=self.initial_status_policy(),
            created_at=now,
            updated_at=now,
            version=1,
        )

        try:
            self.storage.set(sale)
        except PersistenceError:
            self.logger.error("failed to save sale", extra={"sale_id": sale.id})
            raise
        except EmptyIdentifierError as exc:
            self.logger.error("failed to save sale", extra={"sale_id": sale.id})
            raise PersistenceError(f"failed to save sale: {exc}") from exc

        self.logger.info(
            "sale created",
            extra={
                "sale_id": sale.id,
                "user_id": sale.user_id,
                "amount": str(sale.amount),
                "status": sale.status.value,
            },
        )
        return sale

    def update_sale_status(self, sale_id: str, new_status: str) -> Sale:
        """
        Move a pending sale to approved or rejected.

        Raises:
            SaleNotFoundError: no sale with this id
            InvalidStatusError: new_status is not approved/rejected
            InvalidTransitionError: the sale is no longer pending
            PersistenceError: storage failed (surfaced as-is)
        """
        with self._lock_for(sale_id):
            sale = self.storage.read(sale_id)
            target = SaleStatus.parse(new_status)

            try:
                updated = sale.transition_to(target, self.clock())
            except InvalidTransitionError:
                self.logger.warning(
                    "invalid status transition",
                    extra={
                        "sale_id": sale_id,
                        "current_status": sale.status.value,
                        "requested_status": target.value,
                    },
                )
                raise

            try:
                self.storage.set(updated)
            except PersistenceError:
                self.logger.error("failed to update sale", extra={"sale_id": sale_id})
                raise

        self.logger.info(
            "sale status updated",
            extra={
                "sale_id": updated.id,
                "status": updated.status.value,
                "version": updated.version,
            },
        )
        return updated

    def search_sales(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> SalesSearchResult:
        """
        Filter sales by user and/or status and aggregate the matches.

        A user filter is checked against the user service first, so an
        unknown user is an error rather than an empty result. A status-only
        search never calls the user service.
        """
        if user_id:
            self._validate_user(user_id)

        status_filter: Optional[SaleStatus] = None
        if status:
            try:
                status_filter = SaleStatus.parse(status)
            except InvalidStatusError:
                self.logger.warning("invalid status filter", extra={"status_filter": status})
                raise

        try:
            all_sales = self.storage.get_all()
        except PersistenceError:
            self.logger.error("failed to get all sales from storage")
            raise

        matches: List[Sale] = []
        metadata = SalesMetadata()

        for sale in all_sales:
            if user_id and sale.user_id != user_id:
                continue
            if status_filter is not None and sale.status is not status_filter:
                continue

            matches.append(sale)
            metadata.add(sale)

        self.logger.info(
            "sales search completed",
            extra={
                "user_id_filter": user_id or "",
                "status_filter": status or "",
                "results_count": metadata.quantity,
                "total_amount": str(metadata.total_amount),
            },
        )
        return SalesSearchResult(sales=matches, metadata=metadata)


__all__ = [
    "SalesService",
    "SalesSearchResult",
    "INITIAL_STATUS_POLICIES",
    "random_initial_status",
    "pending_initial_status",
]

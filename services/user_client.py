"""
User service client.

Resolves user ids against the external user service so sales are only
created for (and searched by) users that exist.

Outcomes of a lookup:
- 200 with a JSON user body -> User
- 404 -> UserNotFoundError
- anything else (other status, connection error, timeout, bad body)
  -> UserValidationError. A failed lookup never counts as "user exists".
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol
from urllib.parse import quote

import requests

from domain.errors import UserNotFoundError, UserValidationError
from domain.user import User

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: float = 5.0


class UserValidator(Protocol):
    """Capability the sales service needs: confirm that a user exists."""

    def resolve(self, user_id: str) -> User:
        ...


class HttpUserClient:
    """
    UserValidator backed by `GET {base_url}/{user_id}`.

    Args:
        base_url: Users collection URL, e.g. http://localhost:8080/users
        timeout: Seconds to wait for the user service before giving up
        session: Optional requests.Session (shared connection pool, tests)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _user_url(self, user_id: str) -> str:
        return f"{self.base_url}/{quote(user_id, safe='')}"

    def resolve(self, user_id: str) -> User:
        url = self._user_url(user_id)

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as exc:
            logger.error(
                "user service timed out",
                extra={"user_id": user_id, "timeout": self.timeout},
            )
            raise UserValidationError(f"user service timed out after {self.timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            logger.error(
                "user service request failed",
                extra={"user_id": user_id, "error": str(exc)},
            )
            raise UserValidationError(f"error calling user service: {exc}") from exc

        if response.status_code == 404:
            raise UserNotFoundError(f"user not found: {user_id}")

        if response.status_code != 200:
            logger.error(
                "user service returned unexpected status",
                extra={
                    "user_id": user_id,
                    "status_code": response.status_code,
                    "body": response.text[:200],
                },
            )
            raise UserValidationError(
                f"user service returned unexpected status ({response.status_code})"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UserValidationError("user service returned a non-JSON body") from exc

        if not isinstance(payload, dict):
            raise UserValidationError("user service returned an unexpected body")

        return User(
            id=str(payload.get("id") or user_id),
            name=str(payload.get("name") or ""),
        )


__all__ = ["UserValidator", "HttpUserClient", "DEFAULT_TIMEOUT_SECONDS"]

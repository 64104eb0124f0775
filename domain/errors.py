"""
Domain errors for the sales lifecycle.

Every failure is raised to the immediate caller. The API layer maps each
kind to an HTTP status; nothing here is retried.
"""

from __future__ import annotations


class SalesError(Exception):
    """Base class for all sales lifecycle failures."""
    pass


class InvalidAmountError(SalesError):
    """Raised when a sale amount is zero or negative."""
    pass


class UserNotFoundError(SalesError):
    """Raised when the user service definitively reports the user absent."""
    pass


class UserValidationError(SalesError):
    """Raised when user existence could not be confirmed (transport, timeout, unexpected status)."""
    pass


class SaleNotFoundError(SalesError):
    """Raised when no sale exists for the requested id."""
    pass


class InvalidStatusError(SalesError):
    """Raised when a target or filter status is outside the allowed set."""
    pass


class InvalidTransitionError(SalesError):
    """Raised when a non-pending sale is asked to change status."""
    pass


class EmptyIdentifierError(SalesError):
    """Raised when storage is asked to write a sale without an id."""
    pass


class PersistenceError(SalesError):
    """Raised when the storage backend fails."""
    pass

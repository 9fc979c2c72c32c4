from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ConflictError(DomainError):
    """Raised when a write would break a business rule, e.g. a timetable clash."""

    def __init__(self, message: str, conflicts: Sequence[object] = ()):
        super().__init__(message)
        self.conflicts = list(conflicts)


class ConfirmationRequiredError(DomainError):
    """Raised when a destructive action needs explicit confirmation."""


class InvalidTransitionError(DomainError):
    """Raised when a request is moved out of a terminal state."""


class PersistenceError(DomainError):
    """Raised when the backing store fails for any reason."""

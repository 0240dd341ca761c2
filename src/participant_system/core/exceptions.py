from __future__ import annotations

from datetime import datetime


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AlreadyLiftedError(DomainError):
    """Raised when lifting a ban that is no longer active."""


class ActiveBanExistsError(DomainError):
    """Raised when a participant already has an enforced ban."""

    def __init__(self, message: str, *, banned_until: datetime):
        super().__init__(message)
        self.banned_until = banned_until


class BlacklistedError(DomainError):
    """Raised when a banned participant attempts to enroll."""

    def __init__(self, message: str, *, banned_until: datetime):
        super().__init__(message)
        self.banned_until = banned_until


class StorageError(Exception):
    """Wraps any failure of the underlying persistent store."""

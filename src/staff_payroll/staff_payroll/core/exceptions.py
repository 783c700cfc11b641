from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a staff member, leave request or salary record is missing."""


class ConflictError(DomainError):
    """Raised on an invalid lifecycle transition or a lost concurrent write."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class QuotaExceededError(DomainError):
    """Raised when a paid leave would exceed the annual paid-leave quota."""

    def __init__(self, *, remaining: int, requested: int):
        self.remaining = int(remaining)
        self.requested = int(requested)
        super().__init__(
            f"Insufficient paid leave quota. Available: {self.remaining} days, Requested: {self.requested} days"
        )

# core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str,*, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class InvalidTermsError(ValidationError):
    """Raised when commitment terms cannot produce a payment (principal, rate or term)."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., a payment with no owner)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update."""


class PersistenceError(DomainError):
    """Raised when the storage layer fails; the surrounding transaction is rolled back."""

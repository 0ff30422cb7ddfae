class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class NotFoundError(DomainError):
    """Unknown id, or an id that belongs to another tenant."""

    kind = "not_found"


class ConflictError(DomainError):
    """Raised for duplicate check-ins and double check-outs."""

    kind = "conflict"


class InvalidStateError(DomainError):
    """Raised when an operation is illegal for the current lifecycle state."""

    kind = "invalid_state"


class InsufficientBalanceError(DomainError):
    kind = "insufficient_balance"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class UnavailableError(DomainError):
    """Storage could not be reached. Callers may retry with backoff."""

    kind = "unavailable"

"""Domain errors raised by the ticketing services."""

from enum import Enum


class ErrorKind(str, Enum):
    """Domain error kinds."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_STATE = "INVALID_STATE"
    CONFLICT = "CONFLICT"
    PAYMENT_DECLINED = "PAYMENT_DECLINED"
    FORBIDDEN = "FORBIDDEN"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    LOCK_UNAVAILABLE = "LOCK_UNAVAILABLE"


class TicketingError(Exception):
    """Base domain error with a kind and a user-safe message."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT
    retriable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class NotFoundError(TicketingError):
    """Raised when an event, ticket, user or category does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, identifier: object | None = None) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.identifier = identifier


class InvalidInputError(TicketingError):
    """Raised for malformed or missing request fields."""

    kind = ErrorKind.INVALID_INPUT


class InvalidStateError(TicketingError):
    """Raised when an entity is not in a state that allows the operation."""

    kind = ErrorKind.INVALID_STATE


class ConflictError(TicketingError):
    """Raised when a write would violate the capacity invariant."""

    kind = ErrorKind.CONFLICT


class PaymentDeclinedError(TicketingError):
    """Raised when the payment gateway declines or times out."""

    kind = ErrorKind.PAYMENT_DECLINED
    retriable = True


class ForbiddenError(TicketingError):
    """Raised on cross-user access without the admin role."""

    kind = ErrorKind.FORBIDDEN


class AuthenticationError(TicketingError):
    """Raised when credentials are missing or invalid."""

    kind = ErrorKind.UNAUTHENTICATED


class LockUnavailableError(TicketingError):
    """Raised when the per-event critical section could not be entered."""

    kind = ErrorKind.LOCK_UNAVAILABLE
    retriable = True


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_STATE: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PAYMENT_DECLINED: 402,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.LOCK_UNAVAILABLE: 503,
}

"""
Domain errors raised by the reservation engine and its stores.

The API layer maps each ErrorCode to an HTTP status; nothing below the
handlers knows about HTTP.
"""

from enum import Enum


class ErrorCode(Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_STATE = "INVALID_STATE"
    STALE_STATE = "STALE_STATE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    ASSET_NOT_FOUND = "ASSET_NOT_FOUND"


class DomainError(Exception):
    """Base domain error with a code and a user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Malformed candidate: empty title, range < 1, end not after start, unknown asset."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidStateError(DomainError):
    """A transition was attempted on a reservation that is no longer PENDING."""

    code = ErrorCode.INVALID_STATE

    def __init__(self, reservation_id: int | None, status: str) -> None:
        super().__init__(f"Reservation #{reservation_id} is {status}, only PENDING reservations can change")
        self.reservation_id = reservation_id
        self.status = status


class StaleStateError(DomainError):
    """The caller's copy of a reservation no longer matches the store."""

    code = ErrorCode.STALE_STATE

    def __init__(self, reservation_id: int, expected_version: int | None, actual_version: int | None) -> None:
        super().__init__(
            f"Reservation #{reservation_id} was changed by someone else, reload it and try again"
        )
        self.reservation_id = reservation_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class StoreUnavailable(DomainError):
    """The backing store could not be read or written. Safe to retry with backoff."""

    code = ErrorCode.STORE_UNAVAILABLE

    def __init__(self, operation: str, detail: str = "") -> None:
        super().__init__(f"Reservation store unavailable during {operation}")
        self.operation = operation
        self.detail = detail


class ReservationNotFoundError(DomainError):
    code = ErrorCode.RESERVATION_NOT_FOUND

    def __init__(self, reservation_id: int) -> None:
        super().__init__(f"Reservation #{reservation_id} not found")
        self.reservation_id = reservation_id


class AssetNotFoundError(DomainError):
    code = ErrorCode.ASSET_NOT_FOUND

    def __init__(self, asset_id: int) -> None:
        super().__init__(f"Asset #{asset_id} not found")
        self.asset_id = asset_id

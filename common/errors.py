"""
Typed failures raised by the booking engine.

Every error carries a stable ``code`` and an HTTP status, so a transport
layer can translate it without knowing the individual classes.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BookingError(Exception):
    """Base class for every failure surfaced by the engine."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Booking operation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class NotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Forbidden(BookingError):
    """Caller has no booker or owner relationship with the resource."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Access denied"


class InvalidRange(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid booking time range"


class ItemNotAvailable(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Item is not available for booking"


class AlreadyDecided(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Booking has already been approved or rejected"


class UnknownState(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown state: {token}", details={"state": token})
        self.token = token


class SelfBookingNotAllowed(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Owners cannot book their own items"


class Unauthenticated(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Caller identity is missing or invalid"


class Conflict(BookingError):
    """A concurrent decision changed the booking between read and write."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Booking was decided by a concurrent request"

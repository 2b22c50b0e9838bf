"""
Error taxonomy for booking, deletion and feed operations.

Two layers:

* Exceptions (``HouseHuntAPIError`` and subclasses) are raised by the HTTP
  client at the transport seam.
* ``OperationError`` models are what services hand back to callers inside a
  ``Result``. Services never let an expected failure escape as an exception.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


GENERIC_TRANSPORT_MESSAGE = "Could not reach the HouseHunt service. Please try again."
GENERIC_PARSE_MESSAGE = "The HouseHunt service returned an unexpected response."


class ErrorCode(str, Enum):
    """Every failure a core operation can report."""
    UNAUTHENTICATED = "unauthenticated"
    OWNER_CANNOT_BOOK = "owner_cannot_book"
    NOT_OWNER = "not_owner"
    INVALID_DATE_RANGE = "invalid_date_range"
    ALREADY_BOOKED = "already_booked"
    INVALID_PRICE = "invalid_price"
    REMOTE_REJECTED = "remote_rejected"
    TRANSPORT_ERROR = "transport_error"
    PARSE_ERROR = "parse_error"


# User-facing messages for locally detected failures.
DEFAULT_MESSAGES = {
    ErrorCode.UNAUTHENTICATED: "Please log in to book a property",
    ErrorCode.OWNER_CANNOT_BOOK: "You cannot book your own property",
    ErrorCode.NOT_OWNER: "Only the owner can delete this property",
    ErrorCode.INVALID_DATE_RANGE: "Check-out date must be after check-in date",
    ErrorCode.ALREADY_BOOKED: "You already have a booking for this property",
    ErrorCode.INVALID_PRICE: "Invalid booking price",
    ErrorCode.TRANSPORT_ERROR: GENERIC_TRANSPORT_MESSAGE,
    ErrorCode.PARSE_ERROR: GENERIC_PARSE_MESSAGE,
}


# ---------------------------------------------------------------------------
# Transport-level exceptions
# ---------------------------------------------------------------------------

class HouseHuntAPIError(Exception):
    """Base class for failures talking to the remote service."""

    code: ErrorCode = ErrorCode.TRANSPORT_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteRejectedError(HouseHuntAPIError):
    """The service answered with a non-2xx status and an ``{error}`` body."""

    code = ErrorCode.REMOTE_REJECTED


class TransportFailure(HouseHuntAPIError):
    """Connection, protocol or timeout failure before a usable response."""

    code = ErrorCode.TRANSPORT_ERROR


class ResponseParseError(HouseHuntAPIError):
    """A 2xx response whose body is not the expected shape."""

    code = ErrorCode.PARSE_ERROR


# ---------------------------------------------------------------------------
# Result-level error models
# ---------------------------------------------------------------------------

class OperationError(BaseModel):
    """A typed failure returned to the caller."""
    code: ErrorCode
    message: str = ""
    status_code: Optional[int] = Field(default=None, description="HTTP status, when remote")

    def model_post_init(self, __context) -> None:
        if not self.message:
            self.message = DEFAULT_MESSAGES.get(self.code, self.code.value)

    @classmethod
    def from_exception(cls, exc: HouseHuntAPIError) -> "OperationError":
        """Map a client exception onto this error type.

        Remote rejections keep the server's message verbatim; transport and
        parse failures get the fixed generic text.
        """
        if exc.code == ErrorCode.REMOTE_REJECTED:
            return cls(code=exc.code, message=exc.message, status_code=exc.status_code)
        return cls(code=exc.code, status_code=exc.status_code)


class BookingError(OperationError):
    """Failure of ``BookingService.create_booking``."""


class DeleteError(OperationError):
    """Failure of ``BookingService.delete_property``."""


class FeedError(OperationError):
    """Failure of a feed fetch: only transport or parse problems."""

    @field_validator("code")
    @classmethod
    def transport_or_parse(cls, v: ErrorCode) -> ErrorCode:
        if v not in (ErrorCode.TRANSPORT_ERROR, ErrorCode.PARSE_ERROR):
            raise ValueError(f"FeedError cannot carry {v.value}")
        return v

    @classmethod
    def from_exception(cls, exc: HouseHuntAPIError) -> "FeedError":
        """Non-2xx feed responses are reported as transport errors with the server text."""
        if exc.code == ErrorCode.REMOTE_REJECTED:
            return cls(
                code=ErrorCode.TRANSPORT_ERROR,
                message=exc.message,
                status_code=exc.status_code,
            )
        return cls(code=exc.code, status_code=exc.status_code)

"""Standard error codes for booking and rental operations.

Every domain failure is raised as a BookingError carrying one of these
codes. The API layer converts it to an ErrorResponse with a status code
taken from camrent_api.exceptions.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes for the rental backend."""

    BOOKING_NOT_FOUND = "ERR_001"
    INVALID_DATE_RANGE = "ERR_002"
    BOOKING_CONFLICT = "ERR_003"
    NOT_POTENTIAL_BOOKING = "ERR_004"
    INVALID_TRANSITION = "ERR_005"
    INVALID_FILTER = "ERR_006"
    INVALID_MONTH = "ERR_007"
    STORAGE_ERROR = "ERR_008"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.INVALID_DATE_RANGE: "End date cannot be before start date",
    ErrorCode.BOOKING_CONFLICT: "The camera is already booked for part of this date range",
    ErrorCode.NOT_POTENTIAL_BOOKING: "Only potential bookings can be changed this way",
    ErrorCode.INVALID_TRANSITION: "This status change is not allowed from the current step",
    ErrorCode.INVALID_FILTER: "Unknown filter key",
    ErrorCode.INVALID_MONTH: "Invalid month, expected YYYY-MM",
    ErrorCode.STORAGE_ERROR: "The booking store is unavailable",
}

# Recovery suggestions shown to admins
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.BOOKING_NOT_FOUND: "Refresh the calendar and select the booking again",
    ErrorCode.INVALID_DATE_RANGE: "Pick an end date on or after the start date",
    ErrorCode.BOOKING_CONFLICT: "Choose other dates or resolve the conflicting bookings first",
    ErrorCode.NOT_POTENTIAL_BOOKING: "Use the rental status actions for confirmed rentals",
    ErrorCode.INVALID_TRANSITION: "Check the rental progress for the allowed next step",
    ErrorCode.INVALID_FILTER: "Use one of the listed filter keys",
    ErrorCode.INVALID_MONTH: "Send the month as YYYY-MM, e.g. 2024-06",
    ErrorCode.STORAGE_ERROR: "Try again in a moment",
}


class ErrorResponse(BaseModel):
    """Standard error body returned for domain failures."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by booking and rental operations."""

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)

"""API request/response models.

Domain models (Booking, CameraCalendar, ...) live in camrent.models and
are used directly in responses; these models only add HTTP envelopes.
"""

from .bookings import (
    AlternativesResponse,
    BatchConflictCheckRequest,
    BatchConflictCheckResponse,
    BookingListResponse,
    BookingWithConflictsResponse,
    ConflictReportResponse,
)
from .calendar import CalendarMonthResponse
from .common import SuccessMessage
from .rentals import (
    FilterCountsResponse,
    MonthOption,
    RentalListResponse,
    RentalProgressResponse,
    TransitionRequest,
)

__all__ = [
    # Common
    "SuccessMessage",
    # Calendar
    "CalendarMonthResponse",
    # Bookings
    "AlternativesResponse",
    "BatchConflictCheckRequest",
    "BatchConflictCheckResponse",
    "BookingListResponse",
    "BookingWithConflictsResponse",
    "ConflictReportResponse",
    # Rentals
    "FilterCountsResponse",
    "MonthOption",
    "RentalListResponse",
    "RentalProgressResponse",
    "TransitionRequest",
]

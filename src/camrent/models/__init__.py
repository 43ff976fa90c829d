"""Pydantic models for camera rental data entities."""

from .booking import Booking, BookingCreate, BookingUpdate
from .calendar import (
    AlternativeRange,
    CalendarCell,
    CameraCalendar,
    ConflictCheckResult,
    DateSelection,
    PotentialBookingConflict,
    UtilizationReport,
)
from .enums import (
    AdminAction,
    BookingType,
    DeliveryFilter,
    LifecycleStep,
    PaymentStatus,
    RentalStatus,
    ShippingStatus,
    StatusFilter,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BookingError,
    ErrorCode,
    ErrorResponse,
)

__all__ = [
    # Enums
    "AdminAction",
    "BookingType",
    "DeliveryFilter",
    "LifecycleStep",
    "PaymentStatus",
    "RentalStatus",
    "ShippingStatus",
    "StatusFilter",
    # Booking
    "Booking",
    "BookingCreate",
    "BookingUpdate",
    # Calendar
    "AlternativeRange",
    "CalendarCell",
    "CameraCalendar",
    "ConflictCheckResult",
    "DateSelection",
    "PotentialBookingConflict",
    "UtilizationReport",
    # Errors
    "BookingError",
    "ErrorCode",
    "ErrorResponse",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
]

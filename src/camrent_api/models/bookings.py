"""API models for potential bookings and conflict checks."""

from pydantic import BaseModel, ConfigDict, Field

from camrent.models import (
    AlternativeRange,
    Booking,
    ConflictCheckResult,
    PotentialBookingConflict,
)


class BookingListResponse(BaseModel):
    """List of bookings."""

    bookings: list[Booking] = Field(default_factory=list)
    total: int = Field(..., ge=0)


class BookingWithConflictsResponse(BaseModel):
    """A created or updated booking plus any overlap warnings."""

    booking: Booking
    conflicts: ConflictCheckResult


class ConflictReportResponse(BaseModel):
    """Potential bookings that overlap confirmed-or-later bookings."""

    conflicts: list[PotentialBookingConflict] = Field(default_factory=list)
    total: int = Field(..., ge=0)


class BatchConflictCheckRequest(BaseModel):
    """Potential bookings to flag. Omit booking_ids to check all of them."""

    model_config = ConfigDict(strict=True)

    booking_ids: list[str] | None = Field(
        default=None,
        description="Potential booking IDs to check",
        examples=[["BK-1A2B3C4D5E6F"]],
    )


class BatchConflictCheckResponse(BaseModel):
    """Conflict flag per potential booking."""

    results: dict[str, bool] = Field(
        default_factory=dict,
        description="Booking ID to whether it overlaps a confirmed booking",
    )
    conflicting: int = Field(..., ge=0, description="Number of flagged bookings")


class AlternativesResponse(BaseModel):
    """Conflict-free ranges near a requested one."""

    suggestions: list[AlternativeRange] = Field(default_factory=list)

"""API models for the booking calendar endpoint."""

from pydantic import BaseModel, Field

from camrent.models import CameraCalendar


class CalendarMonthResponse(BaseModel):
    """Month grids for one or more cameras."""

    month: str = Field(
        ...,
        description="Rendered month (YYYY-MM)",
        examples=["2024-06"],
    )
    previous_month: str = Field(..., description="Month before, for navigation")
    next_month: str = Field(..., description="Month after, for navigation")
    highlight_booking_id: str | None = Field(
        default=None,
        description="Booking whose days are highlighted",
    )
    cameras: list[CameraCalendar] = Field(
        default_factory=list,
        description="One Monday-first grid per camera",
    )

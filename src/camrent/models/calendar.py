"""Models produced by the booking calendar and conflict checker."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from .booking import Booking


class ConflictCheckResult(BaseModel):
    """Outcome of checking one date range against existing bookings."""

    model_config = ConfigDict(frozen=True)

    has_conflicts: bool
    conflicting_bookings: list[Booking] = Field(default_factory=list)


class PotentialBookingConflict(BaseModel):
    """A potential booking together with the confirmed bookings it overlaps."""

    model_config = ConfigDict(frozen=True)

    potential_booking: Booking
    conflicts: list[Booking]


class AlternativeRange(BaseModel):
    """Conflict-free date range suggested instead of a requested one."""

    model_config = ConfigDict(frozen=True)

    start_date: dt.date
    end_date: dt.date
    offset_days: int = Field(
        ...,
        description="Days shifted from the requested start (negative=earlier)",
    )


class UtilizationReport(BaseModel):
    """How much of a period a camera was booked."""

    model_config = ConfigDict(frozen=True)

    camera_id: str
    total_booked_days: int = Field(..., ge=0)
    total_period_days: int = Field(..., ge=0)
    utilization_percentage: float = Field(..., ge=0)


class DateSelection(BaseModel):
    """Inclusive date range picked on the calendar for one camera."""

    model_config = ConfigDict(frozen=True)

    camera_id: str
    start_date: dt.date
    end_date: dt.date


class CalendarCell(BaseModel):
    """One slot of a camera's month grid.

    Padding slots outside the month have date None and no bookings.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date | None
    bookings: list[Booking] = Field(default_factory=list)
    highlighted: bool = False
    has_conflicts: bool = False


class CameraCalendar(BaseModel):
    """Month grid for a single camera, Monday-first, whole weeks."""

    model_config = ConfigDict(frozen=True)

    camera_id: str
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    cells: list[CalendarCell]

    @property
    def weeks(self) -> list[list[CalendarCell]]:
        """Cells split into rows of seven."""
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]

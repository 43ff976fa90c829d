"""Booking calendar endpoints.

Provides REST endpoints for:
- Monthly calendar grids per camera with highlight/conflict flags
- Camera utilization over a date range

All dates are in YYYY-MM-DD format, months in YYYY-MM.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from camrent.models import BookingError, ErrorCode, UtilizationReport
from camrent.services.booking import BookingService
from camrent.services.calendar import build_calendar_month
from camrent.services.calendar_grid import month_bounds, month_string, parse_month, shift_month
from camrent_api.dependencies import get_booking_service
from camrent_api.models.calendar import CalendarMonthResponse

router = APIRouter(tags=["calendar"])


def parse_month_or_error(month: str) -> dt.date:
    """Parse a YYYY-MM path or query value.

    Raises:
        BookingError: INVALID_MONTH for malformed values
    """
    try:
        return parse_month(month)
    except ValueError as e:
        raise BookingError(
            code=ErrorCode.INVALID_MONTH,
            details={"month": month},
        ) from e


@router.get(
    "/calendar/{month}",
    summary="Get booking calendar",
    description="""
Get month grids of confirmed, active and completed bookings per camera.

Passing highlight_booking_id highlights that booking's days on its
camera; highlighted days already taken by another blocking booking
are flagged with has_conflicts.

**Notes:**
- Month format: YYYY-MM (e.g., 2024-06)
- Grids are Monday-first and padded with null dates to whole weeks
- Pending, cancelled and rejected bookings are not painted
""",
    response_description="Calendar grids with cell flags",
    response_model=CalendarMonthResponse,
    responses={
        400: {"description": "Invalid month format (expected YYYY-MM)"},
        404: {"description": "Highlighted booking not found"},
    },
)
async def get_calendar(
    month: str,
    camera_id: str | None = Query(default=None, description="Only this camera"),
    highlight_booking_id: str | None = Query(
        default=None,
        description="Booking to highlight, usually a selected potential booking",
    ),
    service: BookingService = Depends(get_booking_service),
) -> CalendarMonthResponse:
    """Get the calendar for one month."""
    first_day = parse_month_or_error(month)
    start, end = month_bounds(first_day)

    highlighted = service.get_booking(highlight_booking_id) if highlight_booking_id else None
    camera_ids = [camera_id] if camera_id else service.list_camera_ids()

    cameras = build_calendar_month(
        camera_ids,
        first_day,
        service.list_bookings(start, end),
        selected_potential=highlighted,
    )

    return CalendarMonthResponse(
        month=month_string(first_day),
        previous_month=month_string(shift_month(first_day, -1)),
        next_month=month_string(shift_month(first_day, 1)),
        highlight_booking_id=highlight_booking_id,
        cameras=cameras,
    )


@router.get(
    "/cameras/{camera_id}/utilization",
    summary="Get camera utilization",
    description="""
Booked days of a camera within an inclusive date range.

Only confirmed and active bookings count as booked time.
""",
    response_model=UtilizationReport,
    responses={400: {"description": "end_date before start_date"}},
)
async def get_utilization(
    camera_id: str,
    start_date: dt.date = Query(..., description="First day (YYYY-MM-DD)"),
    end_date: dt.date = Query(..., description="Last day, inclusive (YYYY-MM-DD)"),
    service: BookingService = Depends(get_booking_service),
) -> UtilizationReport:
    """Get utilization for one camera."""
    return service.utilization(camera_id, start_date, end_date)

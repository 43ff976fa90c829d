"""Potential booking and conflict endpoints.

Provides REST endpoints for:
- Creating admin quick bookings (pending bookings warn on overlap)
- Editing, deleting and confirming potential bookings
- Range checks, conflict reports and batch conflict flags
- Alternative date suggestions

A potential booking is a temporary booking still pending review.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from camrent.models import Booking, BookingCreate, BookingUpdate, ConflictCheckResult
from camrent.services.booking import BookingService
from camrent_api.dependencies import get_booking_service
from camrent_api.models.bookings import (
    AlternativesResponse,
    BatchConflictCheckRequest,
    BatchConflictCheckResponse,
    BookingListResponse,
    BookingWithConflictsResponse,
    ConflictReportResponse,
)
from camrent_api.models.common import SuccessMessage

router = APIRouter(tags=["bookings"])


@router.get(
    "/bookings/potential",
    summary="List potential bookings",
    response_model=BookingListResponse,
)
async def list_potential_bookings(
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    """List potential bookings, earliest first."""
    bookings = service.list_potential_bookings()
    return BookingListResponse(bookings=bookings, total=len(bookings))


@router.post(
    "/bookings",
    summary="Create quick booking",
    description="""
Create an admin quick booking.

**Notes:**
- rental_status pending creates a potential booking; overlaps with
  confirmed bookings are returned as warnings and do not block creation
- rental_status confirmed or completed blocks the camera; overlaps are
  refused with 409
""",
    response_model=BookingWithConflictsResponse,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "end_date before start_date"},
        409: {"description": "Blocking booking overlaps a confirmed booking"},
    },
)
async def create_booking(
    body: BookingCreate,
    service: BookingService = Depends(get_booking_service),
) -> BookingWithConflictsResponse:
    """Create a booking and report overlaps."""
    booking, conflicts = service.create_booking(body)
    return BookingWithConflictsResponse(booking=booking, conflicts=conflicts)


@router.get(
    "/bookings/conflicts",
    summary="Conflict report",
    description="Potential bookings paired with the confirmed-or-later bookings they overlap.",
    response_model=ConflictReportResponse,
)
async def get_conflict_report(
    service: BookingService = Depends(get_booking_service),
) -> ConflictReportResponse:
    """List conflicting potential bookings."""
    report = service.conflict_report()
    return ConflictReportResponse(conflicts=report, total=len(report))


@router.post(
    "/bookings/conflicts/check",
    summary="Flag potential bookings",
    description="""
Check potential bookings for conflicts, each independently.

A booking whose check fails is reported as not conflicting rather than
failing the request.
""",
    response_model=BatchConflictCheckResponse,
)
async def check_potential_conflicts(
    body: BatchConflictCheckRequest,
    service: BookingService = Depends(get_booking_service),
) -> BatchConflictCheckResponse:
    """Return a conflict flag per potential booking."""
    potential = service.list_potential_bookings()
    if body.booking_ids is not None:
        wanted = set(body.booking_ids)
        potential = [b for b in potential if b.id in wanted]

    results = await service.check_potential_conflicts(potential)
    return BatchConflictCheckResponse(
        results=results,
        conflicting=sum(1 for flagged in results.values() if flagged),
    )


@router.get(
    "/bookings/availability",
    summary="Check a date range",
    description="Check one camera and inclusive date range against confirmed-or-later bookings.",
    response_model=ConflictCheckResult,
    responses={400: {"description": "end_date before start_date"}},
)
async def check_range(
    camera_id: str = Query(..., min_length=1),
    start_date: dt.date = Query(..., description="First day (YYYY-MM-DD)"),
    end_date: dt.date = Query(..., description="Last day, inclusive (YYYY-MM-DD)"),
    exclude_booking_id: str | None = Query(
        default=None,
        description="Booking being edited, excluded from its own conflicts",
    ),
    service: BookingService = Depends(get_booking_service),
) -> ConflictCheckResult:
    """Check a range for conflicts."""
    return service.check_conflicts(camera_id, start_date, end_date, exclude_booking_id)


@router.get(
    "/bookings/alternatives",
    summary="Suggest alternative dates",
    description="""
Suggest conflict-free ranges of the same length within two weeks of the
requested start. At most five suggestions are returned.
""",
    response_model=AlternativesResponse,
    responses={400: {"description": "end_date before start_date"}},
)
async def suggest_alternatives(
    camera_id: str = Query(..., min_length=1),
    start_date: dt.date = Query(...),
    end_date: dt.date = Query(...),
    exclude_booking_id: str | None = Query(default=None),
    service: BookingService = Depends(get_booking_service),
) -> AlternativesResponse:
    """Suggest alternative date ranges."""
    suggestions = service.suggest_alternatives(
        camera_id, start_date, end_date, exclude_booking_id
    )
    return AlternativesResponse(suggestions=suggestions)


@router.patch(
    "/bookings/{booking_id}",
    summary="Edit potential booking",
    response_model=BookingWithConflictsResponse,
    responses={
        404: {"description": "Booking not found"},
        409: {"description": "Booking is not a potential booking"},
    },
)
async def update_potential_booking(
    booking_id: str,
    body: BookingUpdate,
    service: BookingService = Depends(get_booking_service),
) -> BookingWithConflictsResponse:
    """Edit a potential booking and report overlaps of its new range."""
    booking, conflicts = service.update_potential_booking(booking_id, body)
    return BookingWithConflictsResponse(booking=booking, conflicts=conflicts)


@router.delete(
    "/bookings/{booking_id}",
    summary="Delete potential booking",
    response_model=SuccessMessage,
    responses={
        404: {"description": "Booking not found"},
        409: {"description": "Customer rentals cannot be deleted here"},
    },
)
async def delete_potential_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> SuccessMessage:
    """Delete an admin-created booking."""
    service.delete_potential_booking(booking_id)
    return SuccessMessage(message=f"Booking {booking_id} deleted")


@router.post(
    "/bookings/{booking_id}/confirm",
    summary="Confirm potential booking",
    response_model=Booking,
    responses={
        404: {"description": "Booking not found"},
        409: {"description": "Not a potential booking, or dates conflict"},
    },
)
async def confirm_potential_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    """Confirm a potential booking if its dates are still free."""
    return service.convert_potential_to_confirmed(booking_id)

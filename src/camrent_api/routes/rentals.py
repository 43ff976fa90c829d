"""Rental list and lifecycle endpoints.

Provides REST endpoints for:
- Listing rentals by status bucket, delivery bucket, search term and month
- Bucket counts for both filter taxonomies
- Stepper progress and lifecycle transitions of one rental

Filter keys are plain strings; unknown keys are rejected with 400.
"""

from fastapi import APIRouter, Depends, Query

from camrent.models import Booking, DeliveryFilter, StatusFilter
from camrent.services import filters
from camrent.services.booking import BookingService
from camrent.services.calendar_grid import month_options
from camrent_api.dependencies import get_booking_service
from camrent_api.models.rentals import (
    FilterCountsResponse,
    MonthOption,
    RentalListResponse,
    RentalProgressResponse,
    TransitionRequest,
)
from camrent_api.routes.calendar import parse_month_or_error

router = APIRouter(tags=["rentals"])


@router.get(
    "/rentals",
    summary="List rentals",
    description="""
List rentals filtered by bucket, search term and month.

**Notes:**
- status uses the status taxonomy (needs_action, pending, confirmed,
  payment_pending, active, completed, cancelled)
- filter uses the delivery taxonomy (needs_action, outbound, delivered,
  returns, returned, none)
- search matches customer name, email and camera name
- highlight_id keeps that rental in the result; if the selected bucket
  hides it, the response names the bucket it belongs to
""",
    response_model=RentalListResponse,
    responses={400: {"description": "Unknown filter key or invalid month"}},
)
async def list_rentals(
    status: str | None = Query(default=None, description="Status bucket"),
    filter: str | None = Query(default=None, description="Delivery bucket"),
    search: str | None = Query(default=None, description="Search term"),
    month: str | None = Query(default=None, description="YYYY-MM, empty for all"),
    highlight_id: str | None = Query(default=None, description="Rental to keep visible"),
    service: BookingService = Depends(get_booking_service),
) -> RentalListResponse:
    """List rentals for the admin views."""
    status_key = filters.parse_filter(status, StatusFilter) if status else None
    delivery_key = filters.parse_filter(filter, DeliveryFilter) if filter else None
    if month:
        parse_month_or_error(month)

    rentals = service.list_bookings()
    shown = filters.filter_rentals(
        rentals,
        status=status_key,
        delivery_filter=delivery_key,
        search_term=search,
        month=month,
    )

    selected_status = status_key.value if status_key else None
    selected_filter = delivery_key.value if delivery_key else None
    if delivery_key is not None:
        shown, selected_filter = filters.resolve_highlight(
            rentals,
            shown,
            highlight_id,
            delivery_key.value,
            lambda rental: filters.derive_filter_key(rental).value,
            lambda key: filters.filter_rentals(
                rentals,
                status=status_key,
                delivery_filter=key,
                search_term=search,
                month=month,
            ),
        )
    else:
        shown, derived = filters.resolve_highlight(
            rentals,
            shown,
            highlight_id,
            selected_status or "",
            filters.derive_status_filter,
            lambda key: filters.filter_rentals(
                rentals,
                status=key,
                search_term=search,
                month=month,
            ),
        )
        selected_status = derived or None

    return RentalListResponse(
        rentals=shown,
        total=len(shown),
        status=selected_status,
        filter=selected_filter,
        highlight_id=highlight_id,
    )


@router.get(
    "/rentals/filters",
    summary="Filter bucket counts",
    description="""
Count rentals per bucket of both filter taxonomies.

Buckets are independent predicates, so one rental can be counted in
several buckets. Also returns the month picker options.
""",
    response_model=FilterCountsResponse,
    responses={400: {"description": "Invalid month"}},
)
async def get_filter_counts(
    month: str | None = Query(default=None, description="YYYY-MM, empty for all"),
    service: BookingService = Depends(get_booking_service),
) -> FilterCountsResponse:
    """Get bucket counts for the filter tabs."""
    if month:
        parse_month_or_error(month)

    rentals: list[Booking] = service.list_bookings()
    status_counts = filters.status_filter_counts(rentals, month)
    delivery_counts = filters.delivery_filter_counts(rentals, month)

    return FilterCountsResponse(
        month=month or None,
        status={key.value: count for key, count in status_counts.items()},
        delivery={key.value: count for key, count in delivery_counts.items()},
        status_labels={key.value: label for key, label in filters.STATUS_FILTER_LABELS.items()},
        delivery_labels={
            key.value: label for key, label in filters.DELIVERY_FILTER_LABELS.items()
        },
        months=[MonthOption(**option) for option in month_options()],
    )


@router.get(
    "/rentals/{booking_id}/progress",
    summary="Rental progress",
    response_model=RentalProgressResponse,
    responses={404: {"description": "Rental not found"}},
)
async def get_rental_progress(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> RentalProgressResponse:
    """Get stepper position and next admin actions."""
    progress = service.rental_progress(booking_id)
    return RentalProgressResponse(booking_id=booking_id, **progress)


@router.post(
    "/rentals/{booking_id}/transition",
    summary="Advance rental",
    description="""
Move a rental to its next lifecycle step, by target step or admin action.

Confirming a rental fails with 409 if its dates overlap a confirmed
booking of the same camera.
""",
    response_model=Booking,
    responses={
        404: {"description": "Rental not found"},
        409: {"description": "Dates conflict with a confirmed booking"},
        422: {"description": "Transition not allowed from the current step"},
    },
)
async def transition_rental(
    booking_id: str,
    body: TransitionRequest,
    service: BookingService = Depends(get_booking_service),
) -> Booking:
    """Apply a lifecycle transition."""
    if body.action is not None:
        return service.apply_action(booking_id, body.action)
    return service.transition(booking_id, body.target)  # type: ignore[arg-type]

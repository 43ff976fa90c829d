"""Booking overlap checks.

A candidate range conflicts with an existing booking when both are for
the same camera, the existing booking is confirmed or later, and the
inclusive ranges share at least one day:

    s1 <= e2 and s2 <= e1

Pending, cancelled and rejected bookings never block. Nothing here
raises on missing data; an empty booking list simply has no conflicts.
"""

import asyncio
import datetime as dt
from collections.abc import Callable, Iterable

from camrent.models import (
    AlternativeRange,
    Booking,
    ConflictCheckResult,
    PotentialBookingConflict,
    RentalStatus,
    UtilizationReport,
)
from camrent.services.calendar_grid import DateLike, booking_duration, inclusive_days
from camrent.utils.dates import to_local_date
from camrent.utils.logging import get_logger

logger = get_logger(__name__)

BLOCKING_STATUSES: frozenset[RentalStatus] = frozenset(
    {RentalStatus.CONFIRMED, RentalStatus.ACTIVE, RentalStatus.COMPLETED}
)

# Statuses counted as booked time in utilization reports
UTILIZATION_STATUSES: frozenset[RentalStatus] = frozenset(
    {RentalStatus.CONFIRMED, RentalStatus.ACTIVE}
)


def ranges_overlap(
    start_a: DateLike,
    end_a: DateLike,
    start_b: DateLike,
    end_b: DateLike,
) -> bool:
    """Check whether two inclusive date ranges share a day."""
    return to_local_date(start_a) <= to_local_date(end_b) and to_local_date(
        start_b
    ) <= to_local_date(end_a)


def is_blocking(booking: Booking) -> bool:
    """Whether a booking occupies its camera for conflict purposes."""
    return booking.rental_status in BLOCKING_STATUSES


def find_conflicts(
    camera_id: str,
    start_date: DateLike,
    end_date: DateLike,
    candidate_booking_id: str | None,
    existing_bookings: Iterable[Booking] | None,
) -> list[Booking]:
    """List existing bookings that block a candidate range.

    Args:
        camera_id: Camera the candidate range is for
        start_date: Candidate first day (inclusive)
        end_date: Candidate last day (inclusive)
        candidate_booking_id: ID of the booking being edited, excluded from
            its own conflict set. None for a new booking.
        existing_bookings: Snapshot of bookings to check against

    Returns:
        Conflicting bookings in input order
    """
    if not existing_bookings:
        return []

    return [
        booking
        for booking in existing_bookings
        if booking.camera_id == camera_id
        and (candidate_booking_id is None or booking.id != candidate_booking_id)
        and is_blocking(booking)
        and ranges_overlap(start_date, end_date, booking.start_date, booking.end_date)
    ]


def has_conflict(
    camera_id: str,
    start_date: DateLike,
    end_date: DateLike,
    candidate_booking_id: str | None,
    existing_bookings: Iterable[Booking] | None,
) -> bool:
    """Fast boolean gate: does the candidate range hit a blocking booking?"""
    return bool(
        find_conflicts(
            camera_id, start_date, end_date, candidate_booking_id, existing_bookings
        )
    )


def check_conflicts(
    camera_id: str,
    start_date: DateLike,
    end_date: DateLike,
    candidate_booking_id: str | None,
    existing_bookings: Iterable[Booking] | None,
) -> ConflictCheckResult:
    """Detailed conflict check for summary views."""
    conflicts = find_conflicts(
        camera_id, start_date, end_date, candidate_booking_id, existing_bookings
    )
    return ConflictCheckResult(
        has_conflicts=bool(conflicts),
        conflicting_bookings=conflicts,
    )


def check_booking(booking: Booking, existing_bookings: Iterable[Booking] | None) -> ConflictCheckResult:
    """Check an existing booking against the others, excluding itself."""
    return check_conflicts(
        booking.camera_id,
        booking.start_date,
        booking.end_date,
        booking.id,
        existing_bookings,
    )


async def check_potential_bookings(
    potential_bookings: Iterable[Booking],
    lookup: Callable[[Booking], Iterable[Booking]],
) -> dict[str, bool]:
    """Check many potential bookings concurrently.

    Each booking is checked on its own against the snapshot returned by
    lookup(booking). A failure for one booking is logged and counts as
    "no conflict"; it never fails the batch.

    Args:
        potential_bookings: Bookings to check
        lookup: Returns the existing bookings to check one booking against.
            May perform blocking I/O; it runs in a worker thread.

    Returns:
        Mapping of booking ID to whether it has conflicts
    """

    def _check_one(booking: Booking) -> bool:
        return check_booking(booking, lookup(booking)).has_conflicts

    async def _guarded(booking: Booking) -> tuple[str, bool]:
        try:
            return booking.id, await asyncio.to_thread(_check_one, booking)
        except Exception:
            logger.exception(
                "Conflict check failed for booking %s, treating as no conflict",
                booking.id,
            )
            return booking.id, False

    results = await asyncio.gather(*(_guarded(b) for b in potential_bookings))
    return dict(results)


def collect_conflict_report(
    potential_bookings: Iterable[Booking],
    existing_bookings: Iterable[Booking],
) -> list[PotentialBookingConflict]:
    """Pair each conflicting potential booking with what it overlaps.

    Potential bookings without conflicts are left out.
    """
    existing = list(existing_bookings)
    report = []
    for booking in potential_bookings:
        result = check_booking(booking, existing)
        if result.has_conflicts:
            report.append(
                PotentialBookingConflict(
                    potential_booking=booking,
                    conflicts=result.conflicting_bookings,
                )
            )
    return report


def suggest_alternative_dates(
    camera_id: str,
    start_date: DateLike,
    end_date: DateLike,
    existing_bookings: Iterable[Booking],
    window_days: int = 14,
    max_suggestions: int = 5,
    exclude_booking_id: str | None = None,
) -> list[AlternativeRange]:
    """Find conflict-free ranges of the same length near a requested one.

    The request is shifted in steps of its own inclusive length across
    window_days before and after the requested start.

    Raises:
        ValueError: If end_date is before start_date
    """
    existing = list(existing_bookings)
    rental_days = booking_duration(start_date, end_date)
    base = to_local_date(start_date)

    suggestions: list[AlternativeRange] = []
    offset = -window_days
    while offset <= window_days and len(suggestions) < max_suggestions:
        if offset != 0:
            alt_start = base + dt.timedelta(days=offset)
            alt_end = alt_start + dt.timedelta(days=rental_days - 1)
            if not has_conflict(camera_id, alt_start, alt_end, exclude_booking_id, existing):
                suggestions.append(
                    AlternativeRange(
                        start_date=alt_start,
                        end_date=alt_end,
                        offset_days=offset,
                    )
                )
        offset += rental_days

    return suggestions


def utilization_report(
    camera_id: str,
    report_start: DateLike,
    report_end: DateLike,
    existing_bookings: Iterable[Booking],
) -> UtilizationReport:
    """Booked days of a camera within an inclusive reporting period."""
    start = to_local_date(report_start)
    end = to_local_date(report_end)

    booked_days = 0
    for booking in existing_bookings:
        if booking.camera_id != camera_id or booking.rental_status not in UTILIZATION_STATUSES:
            continue
        overlap_start = max(booking.start_date, start)
        overlap_end = min(booking.end_date, end)
        booked_days += inclusive_days(overlap_start, overlap_end)

    period_days = inclusive_days(start, end)
    percentage = (booked_days / period_days) * 100 if period_days > 0 else 0.0

    return UtilizationReport(
        camera_id=camera_id,
        total_booked_days=booked_days,
        total_period_days=period_days,
        utilization_percentage=round(percentage, 2),
    )

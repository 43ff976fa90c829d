"""Admin booking calendar: one month grid per camera.

Only confirmed, active and completed bookings are painted on the grid.
Selecting a potential booking highlights its days on its camera; a
highlighted day that a painted booking also covers is flagged as a
conflict.
"""

import datetime as dt
from collections import defaultdict
from collections.abc import Collection, Iterable

from camrent.models import Booking, CalendarCell, CameraCalendar, DateSelection
from camrent.services.calendar_grid import (
    DateLike,
    build_month_grid,
    is_date_within_booking,
    iter_booking_dates,
    month_string,
)
from camrent.services.conflicts import is_blocking
from camrent.utils.dates import to_local_date

HighlightKey = tuple[str, dt.date]


def group_bookings_by_camera(bookings: Iterable[Booking]) -> dict[str, list[Booking]]:
    """Group bookings by camera_id, keeping input order within a camera."""
    grouped: dict[str, list[Booking]] = defaultdict(list)
    for booking in bookings:
        grouped[booking.camera_id].append(booking)
    return dict(grouped)


def highlight_dates_for(booking: Booking | None) -> set[HighlightKey]:
    """(camera_id, date) pairs covered by a selected potential booking."""
    if booking is None:
        return set()
    return {(booking.camera_id, day) for day in iter_booking_dates(booking)}


def normalize_selection(camera_id: str, start: DateLike, end: DateLike) -> DateSelection:
    """Turn a drag from start to end into an ordered inclusive range.

    Dragging backwards (end before start) selects the same days.
    """
    first = to_local_date(start)
    last = to_local_date(end)
    if last < first:
        first, last = last, first
    return DateSelection(camera_id=camera_id, start_date=first, end_date=last)


def build_camera_calendar(
    camera_id: str,
    month_date: DateLike,
    bookings: Iterable[Booking],
    highlighted: Collection[HighlightKey] = (),
    highlighted_booking_id: str | None = None,
) -> CameraCalendar:
    """Build the month grid for one camera.

    Args:
        camera_id: Camera to render
        month_date: Any day in the month to render
        bookings: Bookings to paint; other cameras and non-blocking
            statuses are ignored
        highlighted: (camera_id, date) pairs to highlight
        highlighted_booking_id: Booking the highlight belongs to; it never
            conflicts with itself

    Returns:
        CameraCalendar whose cells carry bookings and highlight/conflict flags
    """
    display = [b for b in bookings if b.camera_id == camera_id and is_blocking(b)]

    cells = []
    for day in build_month_grid(month_date):
        if day is None:
            cells.append(CalendarCell(date=None))
            continue

        day_bookings = [b for b in display if is_date_within_booking(day, b)]
        is_highlighted = (camera_id, day) in highlighted
        cells.append(
            CalendarCell(
                date=day,
                bookings=day_bookings,
                highlighted=is_highlighted,
                has_conflicts=is_highlighted
                and any(b.id != highlighted_booking_id for b in day_bookings),
            )
        )

    return CameraCalendar(
        camera_id=camera_id,
        month=month_string(month_date),
        cells=cells,
    )


def build_calendar_month(
    camera_ids: Iterable[str],
    month_date: DateLike,
    bookings: Iterable[Booking],
    selected_potential: Booking | None = None,
) -> list[CameraCalendar]:
    """Build grids for several cameras, highlighting a selected potential booking."""
    by_camera = group_bookings_by_camera(bookings)
    highlighted = highlight_dates_for(selected_potential)
    return [
        build_camera_calendar(
            camera_id,
            month_date,
            by_camera.get(camera_id, []),
            highlighted,
            selected_potential.id if selected_potential else None,
        )
        for camera_id in camera_ids
    ]

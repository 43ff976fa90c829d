"""Date and month-grid helpers for the booking calendar.

All functions are pure. Dates are compared as calendar dates after
to_local_date normalisation, so a time-of-day component never leaks
into a range check.
"""

import calendar
import datetime as dt
import re
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from camrent.utils.dates import to_local_date

if TYPE_CHECKING:
    from camrent.models import Booking

DateLike = dt.date | dt.datetime | str

MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def build_month_grid(month_date: DateLike) -> list[dt.date | None]:
    """Build a Monday-first grid for the month containing month_date.

    Days outside the month are padded with None so the grid is made of
    whole weeks.

    Args:
        month_date: Any day of the wanted month

    Returns:
        List whose length is a multiple of 7
    """
    day = to_local_date(month_date)
    first = day.replace(day=1)
    _, days_in_month = calendar.monthrange(first.year, first.month)

    # isoweekday() is Monday=1..Sunday=7; % 7 gives the Sunday=0 convention
    sunday_based = first.isoweekday() % 7
    offset = (sunday_based + 6) % 7

    cells: list[dt.date | None] = [None] * offset
    cells.extend(first.replace(day=n) for n in range(1, days_in_month + 1))
    while len(cells) % 7 != 0:
        cells.append(None)
    return cells


def is_date_within_booking(day: DateLike | None, booking: "Booking | None") -> bool:
    """Check whether a date falls inside a booking's inclusive range."""
    if day is None or booking is None:
        return False
    probe = to_local_date(day)
    return to_local_date(booking.start_date) <= probe <= to_local_date(booking.end_date)


def iter_booking_dates(booking: "Booking") -> Iterator[dt.date]:
    """Yield every calendar date covered by a booking."""
    current = to_local_date(booking.start_date)
    end = to_local_date(booking.end_date)
    while current <= end:
        yield current
        current += dt.timedelta(days=1)


def inclusive_days(start: DateLike | None, end: DateLike | None) -> int:
    """Count days between two dates, counting both ends.

    Returns 0 when either date is missing or the range is reversed.
    """
    if start is None or end is None:
        return 0
    diff = (to_local_date(end) - to_local_date(start)).days
    return diff + 1 if diff >= 0 else 0


def booking_duration(start: DateLike, end: DateLike) -> int:
    """Inclusive rental length in days.

    Raises:
        ValueError: If end is before start
    """
    start_day = to_local_date(start)
    end_day = to_local_date(end)
    if end_day < start_day:
        raise ValueError("End date cannot be before start date")
    return (end_day - start_day).days + 1


def parse_month(month: str) -> dt.date:
    """Parse a YYYY-MM string into the first day of that month.

    Raises:
        ValueError: If the string is malformed or the month is out of range
    """
    if not MONTH_PATTERN.match(month):
        raise ValueError(f"Invalid month format: {month!r}")
    year, month_num = map(int, month.split("-"))
    if month_num < 1 or month_num > 12:
        raise ValueError("Month must be between 01 and 12")
    return dt.date(year, month_num, 1)


def month_string(day: DateLike) -> str:
    """Format a date's month as YYYY-MM."""
    value = to_local_date(day)
    return f"{value.year:04d}-{value.month:02d}"


def month_bounds(month_date: DateLike) -> tuple[dt.date, dt.date]:
    """First and last day of the month containing month_date."""
    first = to_local_date(month_date).replace(day=1)
    _, last_day = calendar.monthrange(first.year, first.month)
    return first, first.replace(day=last_day)


def shift_month(month_date: DateLike, delta: int) -> dt.date:
    """First day of the month delta months away (negative goes back)."""
    first = to_local_date(month_date).replace(day=1)
    index = first.year * 12 + (first.month - 1) + delta
    return dt.date(index // 12, index % 12 + 1, 1)


def month_options(
    today: dt.date | None = None,
    past: int = 6,
    future: int = 12,
) -> list[dict[str, str]]:
    """Month picker options around today, preceded by an "All Months" entry.

    Args:
        today: Reference date (defaults to today)
        past: Months before the current one
        future: Months after the current one

    Returns:
        List of {"value": "YYYY-MM", "label": "June 2024"} dicts
    """
    reference = today or dt.date.today()
    options = [{"value": "", "label": "All Months"}]
    for offset in range(-past, future + 1):
        first = shift_month(reference, offset)
        options.append(
            {
                "value": month_string(first),
                "label": f"{calendar.month_name[first.month]} {first.year}",
            }
        )
    return options


def booking_overlaps_month(booking: "Booking", month: str | None) -> bool:
    """Whether a booking touches any day of a YYYY-MM month.

    An empty month means no month filter.
    """
    if not month:
        return True
    first, last = month_bounds(parse_month(month))
    return (
        to_local_date(booking.start_date) <= last
        and to_local_date(booking.end_date) >= first
    )


def filter_bookings_by_month(
    bookings: Iterable["Booking"],
    month: str | None,
) -> list["Booking"]:
    """Keep the bookings that overlap a YYYY-MM month (all when month is empty)."""
    if not month:
        return list(bookings)
    return [b for b in bookings if booking_overlaps_month(b, month)]

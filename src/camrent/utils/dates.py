"""Calendar-date normalisation.

Booking dates carry no time-of-day meaning. Anything that reaches date
math goes through to_local_date first so a stray time component can never
shift a comparison by a day.
"""

import datetime as dt


def to_local_date(value: dt.date | dt.datetime | str) -> dt.date:
    """Normalise a date-like value to a local calendar date.

    Args:
        value: date, datetime (naive or aware) or ISO 8601 string

    Returns:
        The calendar date at local midnight.

    Raises:
        ValueError: If a string is not ISO 8601
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return dt.date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = dt.datetime.fromisoformat(text)

    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()

    return value

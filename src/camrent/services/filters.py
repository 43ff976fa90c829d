"""Filter buckets for the admin rental and delivery views.

Two taxonomies exist side by side:

- DeliveryFilter buckets rentals by logistics work (ship it, receive it).
- StatusFilter buckets rentals by booking state.

They answer different questions, so a rental can sit in a bucket of each.
derive_filter_key is a first-match-wins rule list; its order is the
behaviour, so keep it as written.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from camrent.models import (
    Booking,
    BookingError,
    DeliveryFilter,
    ErrorCode,
    PaymentStatus,
    RentalStatus,
    ShippingStatus,
    StatusFilter,
)
from camrent.services.calendar_grid import filter_bookings_by_month

FilterT = TypeVar("FilterT", DeliveryFilter, StatusFilter)

DELIVERY_FILTER_LABELS: dict[DeliveryFilter, str] = {
    DeliveryFilter.NEEDS_ACTION: "Needs Action",
    DeliveryFilter.OUTBOUND: "Outbound",
    DeliveryFilter.DELIVERED: "Delivered",
    DeliveryFilter.RETURNS: "Returns",
    DeliveryFilter.RETURNED: "Returned",
    DeliveryFilter.NONE: "No Shipping",
}

STATUS_FILTER_LABELS: dict[StatusFilter, str] = {
    StatusFilter.NEEDS_ACTION: "Needs Action",
    StatusFilter.PENDING: "Pending",
    StatusFilter.CONFIRMED: "Confirmed",
    StatusFilter.PAYMENT_PENDING: "Payment Pending",
    StatusFilter.ACTIVE: "Active",
    StatusFilter.COMPLETED: "Completed",
    StatusFilter.CANCELLED: "Cancelled",
}

DEFAULT_DELIVERY_FILTER = DeliveryFilter.NEEDS_ACTION
DEFAULT_STATUS_FILTER = StatusFilter.NEEDS_ACTION

OUTBOUND_SHIPPING = frozenset(
    {ShippingStatus.READY_TO_SHIP, ShippingStatus.IN_TRANSIT_TO_USER}
)
RETURN_SHIPPING = frozenset(
    {ShippingStatus.RETURN_SCHEDULED, ShippingStatus.IN_TRANSIT_TO_OWNER}
)


# =========================================================================
# Delivery taxonomy
# =========================================================================


def needs_admin_delivery_action(rental: Booking) -> bool:
    """Admin must ship the camera out or receive it back."""
    awaiting_dispatch = rental.rental_status == RentalStatus.CONFIRMED and (
        rental.shipping_status is None
        or rental.shipping_status == ShippingStatus.READY_TO_SHIP
    )
    return awaiting_dispatch or rental.shipping_status == ShippingStatus.IN_TRANSIT_TO_OWNER


def derive_filter_key(rental: Booking) -> DeliveryFilter:
    """The delivery bucket a rental is listed under. First match wins."""
    if needs_admin_delivery_action(rental):
        return DeliveryFilter.NEEDS_ACTION
    if rental.shipping_status in OUTBOUND_SHIPPING:
        return DeliveryFilter.OUTBOUND
    if rental.shipping_status in RETURN_SHIPPING:
        return DeliveryFilter.RETURNS
    if rental.shipping_status == ShippingStatus.DELIVERED:
        return DeliveryFilter.DELIVERED
    if rental.shipping_status == ShippingStatus.RETURNED:
        return DeliveryFilter.RETURNED
    return DeliveryFilter.NONE


def include_by_delivery_filter(rental: Booking, filter_key: DeliveryFilter | str | None) -> bool:
    """Bucket membership test used for listing and counting.

    Unlike derive_filter_key these predicates are independent, so one
    rental can match several buckets (e.g. needs_action and returns).
    An unknown key includes everything.
    """
    try:
        key = DeliveryFilter(filter_key) if filter_key else None
    except ValueError:
        return True

    if key == DeliveryFilter.NEEDS_ACTION:
        return needs_admin_delivery_action(rental)
    if key == DeliveryFilter.OUTBOUND:
        return rental.shipping_status in OUTBOUND_SHIPPING
    if key == DeliveryFilter.RETURNS:
        return rental.shipping_status in RETURN_SHIPPING
    if key == DeliveryFilter.DELIVERED:
        return rental.shipping_status == ShippingStatus.DELIVERED
    if key == DeliveryFilter.RETURNED:
        return rental.shipping_status == ShippingStatus.RETURNED
    if key == DeliveryFilter.NONE:
        return rental.shipping_status is None
    return True


def delivery_filter_counts(
    rentals: Iterable[Booking],
    month: str | None = None,
) -> dict[DeliveryFilter, int]:
    """Count rentals per delivery bucket, optionally within a YYYY-MM month."""
    base = filter_bookings_by_month(rentals, month)
    return {
        key: sum(1 for rental in base if include_by_delivery_filter(rental, key))
        for key in DeliveryFilter
    }


# =========================================================================
# Status taxonomy
# =========================================================================


def needs_admin_action(rental: Booking) -> bool:
    """Dashboard predicate: an application to review or a return to receive."""
    return rental.rental_status == RentalStatus.PENDING or (
        rental.rental_status == RentalStatus.CONFIRMED
        and rental.shipping_status == ShippingStatus.IN_TRANSIT_TO_OWNER
    )


def is_payment_pending(rental: Booking) -> bool:
    """Confirmed rental whose payment receipt awaits verification."""
    return (
        rental.rental_status == RentalStatus.CONFIRMED
        and rental.payment_status == PaymentStatus.SUBMITTED
    )


def include_by_status(rental: Booking, status: StatusFilter | str) -> bool:
    """Status bucket membership test."""
    key = status.value if isinstance(status, StatusFilter) else status
    if key == StatusFilter.NEEDS_ACTION.value:
        return needs_admin_action(rental)
    if key == StatusFilter.PAYMENT_PENDING.value:
        return is_payment_pending(rental)
    return rental.rental_status.value == key


def derive_status_filter(rental: Booking) -> str:
    """The status bucket a rental is shown under.

    Falls back to the raw rental status, which is not always a listed
    bucket (rejected rentals have none).
    """
    if needs_admin_action(rental):
        return StatusFilter.NEEDS_ACTION.value
    if is_payment_pending(rental):
        return StatusFilter.PAYMENT_PENDING.value
    return rental.rental_status.value


def status_filter_counts(
    rentals: Iterable[Booking],
    month: str | None = None,
) -> dict[StatusFilter, int]:
    """Count rentals per status bucket, optionally within a YYYY-MM month."""
    base = filter_bookings_by_month(rentals, month)
    return {
        key: sum(1 for rental in base if include_by_status(rental, key))
        for key in StatusFilter
    }


# =========================================================================
# Listing
# =========================================================================


def parse_filter(value: str, taxonomy: type[FilterT]) -> FilterT:
    """Parse a filter query parameter.

    Raises:
        BookingError: INVALID_FILTER for unknown keys
    """
    try:
        return taxonomy(value)
    except ValueError as e:
        raise BookingError(
            code=ErrorCode.INVALID_FILTER,
            details={
                "filter": value,
                "allowed": ", ".join(member.value for member in taxonomy),
            },
        ) from e


def matches_search_term(rental: Booking, term: str | None) -> bool:
    """Case-insensitive match on customer name, email or camera name."""
    if not term:
        return True
    needle = term.lower()
    haystacks = (rental.display_name, rental.customer_email, rental.camera_name)
    return any(needle in value.lower() for value in haystacks if value)


def filter_rentals(
    rentals: Iterable[Booking],
    *,
    status: StatusFilter | str | None = None,
    delivery_filter: DeliveryFilter | str | None = None,
    search_term: str | None = None,
    month: str | None = None,
) -> list[Booking]:
    """Apply bucket, search and month filters together."""
    return [
        rental
        for rental in filter_bookings_by_month(rentals, month)
        if (status is None or include_by_status(rental, status))
        and (delivery_filter is None or include_by_delivery_filter(rental, delivery_filter))
        and matches_search_term(rental, search_term)
    ]


def resolve_highlight(
    all_rentals: Sequence[Booking],
    filtered: list[Booking],
    highlight_id: str | None,
    selected: str,
    derive: Callable[[Booking], str],
    refilter: Callable[[str], list[Booking]],
) -> tuple[list[Booking], str]:
    """Keep a highlighted rental visible.

    When the highlighted rental is hidden by the selected filter, the
    filter switches to the bucket the rental belongs to, the list is
    rebuilt for that bucket and the rental is put at its head.

    Args:
        all_rentals: Unfiltered collection
        filtered: Result of the current filters
        highlight_id: ID of the rental to highlight, if any
        selected: Currently selected filter key
        derive: Maps a rental to its bucket key
        refilter: Applies the other filters again with a new bucket key

    Returns:
        Tuple of (rentals to show, filter key to select)
    """
    if not highlight_id:
        return filtered, selected

    target = next((r for r in all_rentals if str(r.id) == str(highlight_id)), None)
    if target is None:
        return filtered, selected

    if any(str(r.id) == str(target.id) for r in filtered):
        return filtered, selected

    next_filter = derive(target)
    rebuilt = refilter(next_filter)
    merged = [target] + [r for r in rebuilt if str(r.id) != str(target.id)]
    return merged, next_filter

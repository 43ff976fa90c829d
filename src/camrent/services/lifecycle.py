"""Rental lifecycle: stepper position and admin transitions.

A rental's progress is stored as two independent fields, rental_status
and shipping_status. Two views are derived from them:

- current_step_key() places any pair on the ten-step progress bar. It
  checks the most advanced states first so a stale rental_status never
  drags a finished rental back to "pending". Every pair maps to a step.

- lifecycle_state() resolves the pair onto the closed LifecycleStep set
  used for transitions. Known pairs are looked up exactly; legacy pairs
  fall back to the stepper position.

Transitions only go through advance(), which writes the canonical pair
for the target step back into the two persisted fields.
"""

from typing import NamedTuple

from camrent.models import (
    AdminAction,
    Booking,
    BookingError,
    ErrorCode,
    LifecycleStep,
    RentalStatus,
    ShippingStatus,
)


class Step(NamedTuple):
    """Progress bar entry."""

    key: LifecycleStep
    label: str


STEPS: tuple[Step, ...] = (
    Step(LifecycleStep.PENDING, "Application"),
    Step(LifecycleStep.CONFIRMED, "Confirmed"),
    Step(LifecycleStep.READY_TO_SHIP, "Ready"),
    Step(LifecycleStep.IN_TRANSIT_TO_USER, "To User"),
    Step(LifecycleStep.DELIVERED, "Delivered"),
    Step(LifecycleStep.ACTIVE, "Active"),
    Step(LifecycleStep.RETURN_SCHEDULED, "Return"),
    Step(LifecycleStep.IN_TRANSIT_TO_OWNER, "To Owner"),
    Step(LifecycleStep.RETURNED, "Returned"),
    Step(LifecycleStep.COMPLETED, "Completed"),
)

STEP_ORDER: tuple[LifecycleStep, ...] = tuple(step.key for step in STEPS)

TERMINAL_STEPS = frozenset(
    {LifecycleStep.COMPLETED, LifecycleStep.CANCELLED, LifecycleStep.REJECTED}
)

# Canonical persisted pair for each step
STATUS_PAIRS: dict[LifecycleStep, tuple[RentalStatus, ShippingStatus | None]] = {
    LifecycleStep.PENDING: (RentalStatus.PENDING, None),
    LifecycleStep.CONFIRMED: (RentalStatus.CONFIRMED, None),
    LifecycleStep.READY_TO_SHIP: (RentalStatus.CONFIRMED, ShippingStatus.READY_TO_SHIP),
    LifecycleStep.IN_TRANSIT_TO_USER: (RentalStatus.CONFIRMED, ShippingStatus.IN_TRANSIT_TO_USER),
    LifecycleStep.DELIVERED: (RentalStatus.CONFIRMED, ShippingStatus.DELIVERED),
    LifecycleStep.ACTIVE: (RentalStatus.ACTIVE, ShippingStatus.DELIVERED),
    LifecycleStep.RETURN_SCHEDULED: (RentalStatus.ACTIVE, ShippingStatus.RETURN_SCHEDULED),
    LifecycleStep.IN_TRANSIT_TO_OWNER: (RentalStatus.ACTIVE, ShippingStatus.IN_TRANSIT_TO_OWNER),
    LifecycleStep.RETURNED: (RentalStatus.ACTIVE, ShippingStatus.RETURNED),
    LifecycleStep.COMPLETED: (RentalStatus.COMPLETED, ShippingStatus.RETURNED),
    LifecycleStep.CANCELLED: (RentalStatus.CANCELLED, None),
    LifecycleStep.REJECTED: (RentalStatus.REJECTED, None),
}

_STEP_BY_PAIR = {pair: step for step, pair in STATUS_PAIRS.items()}

TRANSITIONS: dict[LifecycleStep, frozenset[LifecycleStep]] = {
    LifecycleStep.PENDING: frozenset(
        {LifecycleStep.CONFIRMED, LifecycleStep.REJECTED, LifecycleStep.CANCELLED}
    ),
    # DELIVERED directly covers hand-over in person
    LifecycleStep.CONFIRMED: frozenset(
        {LifecycleStep.READY_TO_SHIP, LifecycleStep.DELIVERED, LifecycleStep.CANCELLED}
    ),
    LifecycleStep.READY_TO_SHIP: frozenset({LifecycleStep.IN_TRANSIT_TO_USER}),
    LifecycleStep.IN_TRANSIT_TO_USER: frozenset({LifecycleStep.DELIVERED}),
    LifecycleStep.DELIVERED: frozenset({LifecycleStep.ACTIVE}),
    LifecycleStep.ACTIVE: frozenset({LifecycleStep.RETURN_SCHEDULED}),
    LifecycleStep.RETURN_SCHEDULED: frozenset({LifecycleStep.IN_TRANSIT_TO_OWNER}),
    LifecycleStep.IN_TRANSIT_TO_OWNER: frozenset({LifecycleStep.RETURNED}),
    LifecycleStep.RETURNED: frozenset({LifecycleStep.COMPLETED}),
    LifecycleStep.COMPLETED: frozenset(),
    LifecycleStep.CANCELLED: frozenset(),
    LifecycleStep.REJECTED: frozenset(),
}

ACTION_TARGETS: dict[AdminAction, LifecycleStep] = {
    AdminAction.APPROVE: LifecycleStep.CONFIRMED,
    AdminAction.REJECT: LifecycleStep.REJECTED,
    AdminAction.CANCEL: LifecycleStep.CANCELLED,
    AdminAction.MARK_READY_TO_SHIP: LifecycleStep.READY_TO_SHIP,
    AdminAction.MARK_IN_TRANSIT_TO_USER: LifecycleStep.IN_TRANSIT_TO_USER,
    AdminAction.MARK_DELIVERED: LifecycleStep.DELIVERED,
    AdminAction.CONFIRM_RECEIVED: LifecycleStep.ACTIVE,
    AdminAction.SCHEDULE_RETURN: LifecycleStep.RETURN_SCHEDULED,
    AdminAction.MARK_IN_TRANSIT_TO_OWNER: LifecycleStep.IN_TRANSIT_TO_OWNER,
    AdminAction.MARK_RETURNED: LifecycleStep.RETURNED,
    AdminAction.COMPLETE: LifecycleStep.COMPLETED,
}

# Equipment is physically away from the shop in these shipping states
_OUT_OF_SHOP = frozenset(
    {
        ShippingStatus.IN_TRANSIT_TO_USER,
        ShippingStatus.DELIVERED,
        ShippingStatus.RETURN_SCHEDULED,
        ShippingStatus.IN_TRANSIT_TO_OWNER,
    }
)


def current_step_key(rental: Booking) -> LifecycleStep:
    """Stepper position of a rental. Most advanced state checked first."""
    rental_status = rental.rental_status
    shipping_status = rental.shipping_status

    if rental_status == RentalStatus.COMPLETED or shipping_status == ShippingStatus.RETURNED:
        return LifecycleStep.COMPLETED
    if shipping_status == ShippingStatus.IN_TRANSIT_TO_OWNER:
        return LifecycleStep.IN_TRANSIT_TO_OWNER
    if shipping_status == ShippingStatus.RETURN_SCHEDULED:
        return LifecycleStep.RETURN_SCHEDULED
    if rental_status == RentalStatus.ACTIVE:
        return LifecycleStep.ACTIVE
    if shipping_status == ShippingStatus.DELIVERED:
        return LifecycleStep.DELIVERED
    if shipping_status == ShippingStatus.IN_TRANSIT_TO_USER:
        return LifecycleStep.IN_TRANSIT_TO_USER
    if shipping_status == ShippingStatus.READY_TO_SHIP:
        return LifecycleStep.READY_TO_SHIP
    if rental_status == RentalStatus.CONFIRMED:
        return LifecycleStep.CONFIRMED
    if rental_status == RentalStatus.PENDING:
        return LifecycleStep.PENDING
    return LifecycleStep.PENDING


def step_index(rental: Booking) -> int:
    """Zero-based stepper position, 0..9."""
    return STEP_ORDER.index(current_step_key(rental))


def next_step_label(index: int) -> str | None:
    """Label of the step after index, None at the end."""
    if 0 <= index + 1 < len(STEPS):
        return STEPS[index + 1].label
    return None


def step_progress(rental: Booking) -> dict[str, object]:
    """Everything the progress bar needs for one rental."""
    index = step_index(rental)
    return {
        "index": index,
        "key": STEPS[index].key,
        "label": STEPS[index].label,
        "next_label": next_step_label(index),
        "total": len(STEPS),
    }


def status_pair_for(step: LifecycleStep) -> tuple[RentalStatus, ShippingStatus | None]:
    """Persisted (rental_status, shipping_status) for a lifecycle step."""
    return STATUS_PAIRS[step]


def lifecycle_state(rental: Booking) -> LifecycleStep:
    """Closed lifecycle state of a rental for transition purposes."""
    if rental.rental_status == RentalStatus.CANCELLED:
        return LifecycleStep.CANCELLED
    if rental.rental_status == RentalStatus.REJECTED:
        return LifecycleStep.REJECTED

    exact = _STEP_BY_PAIR.get((rental.rental_status, rental.shipping_status))
    if exact is not None:
        return exact
    return current_step_key(rental)


def is_anomalous(rental: Booking) -> bool:
    """Flag status pairs that upstream code should never have produced.

    Covers shipping activity on an unreviewed application and equipment
    still out on a cancelled or rejected rental. Derivation accepts these
    pairs anyway; this is only for alerting.
    """
    if rental.rental_status == RentalStatus.PENDING:
        return rental.shipping_status is not None
    if rental.rental_status in (RentalStatus.CANCELLED, RentalStatus.REJECTED):
        return rental.shipping_status in _OUT_OF_SHOP
    return False


def allowed_transitions(rental: Booking) -> list[LifecycleStep]:
    """Steps the rental may move to next, in lifecycle order."""
    targets = TRANSITIONS[lifecycle_state(rental)]
    return [step for step in LifecycleStep if step in targets]


def allowed_actions(rental: Booking) -> list[AdminAction]:
    """Admin actions valid for the rental's current state."""
    targets = TRANSITIONS[lifecycle_state(rental)]
    return [action for action, target in ACTION_TARGETS.items() if target in targets]


def advance(rental: Booking, target: LifecycleStep) -> Booking:
    """Move a rental to a target step.

    Returns:
        A copy of the rental carrying the target step's status pair

    Raises:
        BookingError: INVALID_TRANSITION if target is not reachable
    """
    current = lifecycle_state(rental)
    if target not in TRANSITIONS[current]:
        raise BookingError(
            code=ErrorCode.INVALID_TRANSITION,
            details={
                "booking_id": rental.id,
                "from": current.value,
                "to": target.value,
            },
        )

    rental_status, shipping_status = status_pair_for(target)
    return rental.model_copy(
        update={"rental_status": rental_status, "shipping_status": shipping_status}
    )


def apply_action(rental: Booking, action: AdminAction) -> Booking:
    """Perform an admin action, see advance()."""
    return advance(rental, ACTION_TARGETS[action])

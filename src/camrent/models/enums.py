"""Enumeration types for camera rental data models."""

from enum import Enum


class RentalStatus(str, Enum):
    """Booking-level status of a rental."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class ShippingStatus(str, Enum):
    """Logistics status of a rental, independent of RentalStatus."""

    READY_TO_SHIP = "ready_to_ship"
    IN_TRANSIT_TO_USER = "in_transit_to_user"
    DELIVERED = "delivered"
    RETURN_SCHEDULED = "return_scheduled"
    IN_TRANSIT_TO_OWNER = "in_transit_to_owner"
    RETURNED = "returned"


class BookingType(str, Enum):
    """Origin of a booking record."""

    TEMPORARY = "temporary"  # Admin-created quick booking
    REGULAR = "regular"  # Customer application


class PaymentStatus(str, Enum):
    """Verification status of the customer's payment receipt."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    REJECTED = "rejected"


class LifecycleStep(str, Enum):
    """Ordered steps of the rental lifecycle.

    Declaration order is the progress order shown by the stepper.
    CANCELLED and REJECTED are terminal side exits and have no position.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    READY_TO_SHIP = "ready_to_ship"
    IN_TRANSIT_TO_USER = "in_transit_to_user"
    DELIVERED = "delivered"
    ACTIVE = "active"
    RETURN_SCHEDULED = "return_scheduled"
    IN_TRANSIT_TO_OWNER = "in_transit_to_owner"
    RETURNED = "returned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class DeliveryFilter(str, Enum):
    """Delivery-focused filter buckets (logistics view)."""

    NEEDS_ACTION = "needs_action"
    OUTBOUND = "outbound"
    DELIVERED = "delivered"
    RETURNS = "returns"
    RETURNED = "returned"
    NONE = "none"


class StatusFilter(str, Enum):
    """Status-focused filter buckets (rentals view)."""

    NEEDS_ACTION = "needs_action"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PAYMENT_PENDING = "payment_pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AdminAction(str, Enum):
    """Admin actions that move a rental to its next lifecycle step."""

    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    MARK_READY_TO_SHIP = "mark_ready_to_ship"
    MARK_IN_TRANSIT_TO_USER = "mark_in_transit_to_user"
    MARK_DELIVERED = "mark_delivered"
    CONFIRM_RECEIVED = "confirm_received"
    SCHEDULE_RETURN = "schedule_return"
    MARK_IN_TRANSIT_TO_OWNER = "mark_in_transit_to_owner"
    MARK_RETURNED = "mark_returned"
    COMPLETE = "complete"

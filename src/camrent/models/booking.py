"""Booking model for camera reservations.

A booking reserves one camera for an inclusive range of calendar dates.
Rentals created by customers and quick bookings created by admins share
this shape; they differ only in booking_type.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from camrent.utils.dates import to_local_date

from .enums import BookingType, PaymentStatus, RentalStatus, ShippingStatus

# Statuses an admin quick booking may be created with
CREATABLE_STATUSES = frozenset(
    {RentalStatus.PENDING, RentalStatus.CONFIRMED, RentalStatus.COMPLETED}
)


class Booking(BaseModel):
    """A reservation of one camera for an inclusive date range."""

    # strict=False: records come back from the store with ISO date strings
    model_config = ConfigDict(strict=False, frozen=True)

    id: str = Field(..., description="Unique booking ID")
    camera_id: str = Field(..., description="Reserved camera")
    start_date: dt.date = Field(..., description="First rental day (inclusive)")
    end_date: dt.date = Field(..., description="Last rental day (inclusive)")
    rental_status: RentalStatus = Field(default=RentalStatus.PENDING)
    shipping_status: ShippingStatus | None = Field(default=None)
    booking_type: BookingType = Field(default=BookingType.REGULAR)
    payment_status: PaymentStatus | None = Field(default=None)
    customer_name: str | None = Field(default=None)
    customer_first_name: str | None = Field(default=None)
    customer_last_name: str | None = Field(default=None)
    customer_contact: str | None = Field(default=None)
    customer_email: str | None = Field(default=None)
    camera_name: str | None = Field(default=None)
    created_at: dt.datetime | None = Field(default=None)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalise_date(cls, value: Any) -> Any:
        """Drop any time-of-day component before validation."""
        if isinstance(value, (dt.date, str)):
            return to_local_date(value)
        return value

    @field_validator("shipping_status", "payment_status", mode="before")
    @classmethod
    def empty_status_is_unset(cls, value: Any) -> Any:
        """Treat empty strings from the store as an unset status."""
        return value or None

    @model_validator(mode="after")
    def check_date_order(self) -> "Booking":
        """Reject ranges that end before they start."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

    @property
    def is_potential(self) -> bool:
        """Whether this is a tentative admin pre-block."""
        return (
            self.booking_type == BookingType.TEMPORARY
            and self.rental_status == RentalStatus.PENDING
        )

    @property
    def display_name(self) -> str:
        """Customer name as shown in lists and search."""
        full = f"{self.customer_first_name or ''} {self.customer_last_name or ''}".strip()
        return full or self.customer_name or ""

    def to_item(self) -> dict[str, Any]:
        """Serialise to a record store item (unset fields dropped)."""
        return self.model_dump(mode="json", exclude_none=True)


class BookingCreate(BaseModel):
    """Data required to create an admin quick booking.

    Quick bookings are always stored as temporary.
    """

    model_config = ConfigDict(strict=False)

    camera_id: str = Field(..., min_length=1)
    start_date: dt.date
    end_date: dt.date
    customer_name: str = Field(..., min_length=1)
    customer_contact: str = Field(..., min_length=1)
    customer_email: str | None = None
    rental_status: RentalStatus = Field(
        default=RentalStatus.PENDING,
        description="pending creates a potential booking; confirmed/completed block the camera",
    )

    @field_validator("rental_status")
    @classmethod
    def check_initial_status(cls, value: RentalStatus) -> RentalStatus:
        """Reject statuses a new booking cannot start in."""
        if value not in CREATABLE_STATUSES:
            raise ValueError(f"cannot create a booking with status {value.value}")
        return value


class BookingUpdate(BaseModel):
    """Partial update of a potential booking.

    Only include fields that should be changed.
    """

    model_config = ConfigDict(strict=False)

    camera_id: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    customer_name: str | None = None
    customer_contact: str | None = None
    customer_email: str | None = None

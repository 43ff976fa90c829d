"""Booking service for the admin calendar and rental workflow.

Loads bookings from the record store, runs them through the pure
calendar, conflict and lifecycle functions, and writes the results
back. Conflict checks read a snapshot and then write; there is no
transaction between the two.
"""

import datetime as dt
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from camrent.models import (
    AdminAction,
    AlternativeRange,
    Booking,
    BookingCreate,
    BookingError,
    BookingType,
    BookingUpdate,
    ConflictCheckResult,
    ErrorCode,
    LifecycleStep,
    PotentialBookingConflict,
    RentalStatus,
    UtilizationReport,
)
from camrent.services import conflicts, lifecycle
from camrent.services.calendar_grid import DateLike
from camrent.utils.dates import to_local_date
from camrent.utils.logging import get_logger, log_booking_operation

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Re-raise record store failures as STORAGE_ERROR."""
    try:
        yield
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        log_booking_operation(logger, operation, error=code)
        raise BookingError(
            code=ErrorCode.STORAGE_ERROR,
            details={"operation": operation, "reason": code},
        ) from e


class BookingService:
    """Service for booking calendar and rental lifecycle operations."""

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize booking service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    def _generate_booking_id(self) -> str:
        """Generate a unique booking ID like BK-ABC123DEF456."""
        return f"BK-{uuid.uuid4().hex[:12].upper()}"

    # =========================================================================
    # Reads
    # =========================================================================

    def get_booking(self, booking_id: str) -> Booking:
        """Get a booking by ID.

        Raises:
            BookingError: BOOKING_NOT_FOUND if there is no such booking
        """
        with _store_errors("get_booking"):
            item = self.db.get_rental(booking_id)
        if not item:
            raise BookingError(
                code=ErrorCode.BOOKING_NOT_FOUND,
                details={"booking_id": booking_id},
            )
        return Booking.model_validate(item)

    def list_bookings(
        self,
        start_date: DateLike | None = None,
        end_date: DateLike | None = None,
    ) -> list[Booking]:
        """List bookings, optionally only those touching an inclusive range."""
        with _store_errors("list_bookings"):
            if start_date is not None and end_date is not None:
                items = self.db.list_rentals_in_range(
                    to_local_date(start_date).isoformat(),
                    to_local_date(end_date).isoformat(),
                )
            else:
                items = self.db.list_rentals()
        return sorted(
            (Booking.model_validate(item) for item in items),
            key=lambda b: (b.start_date, b.id),
        )

    def bookings_for_camera(self, camera_id: str) -> list[Booking]:
        """All bookings of one camera."""
        with _store_errors("bookings_for_camera"):
            items = self.db.get_rentals_by_camera(camera_id)
        return [Booking.model_validate(item) for item in items]

    def list_potential_bookings(self) -> list[Booking]:
        """Temporary pending bookings, earliest first."""
        return [b for b in self.list_bookings() if b.is_potential]

    def list_camera_ids(self) -> list[str]:
        """IDs of all cameras, falling back to cameras seen in bookings."""
        with _store_errors("list_cameras"):
            cameras = self.db.list_cameras()
        if cameras:
            return sorted(str(camera["id"]) for camera in cameras)
        return sorted({b.camera_id for b in self.list_bookings()})

    # =========================================================================
    # Conflicts
    # =========================================================================

    def check_conflicts(
        self,
        camera_id: str,
        start_date: DateLike,
        end_date: DateLike,
        exclude_booking_id: str | None = None,
    ) -> ConflictCheckResult:
        """Check a range against the camera's current bookings.

        Raises:
            BookingError: INVALID_DATE_RANGE if end is before start
        """
        self._check_range(start_date, end_date)
        return conflicts.check_conflicts(
            camera_id,
            start_date,
            end_date,
            exclude_booking_id,
            self.bookings_for_camera(camera_id),
        )

    def conflict_report(self) -> list[PotentialBookingConflict]:
        """Potential bookings that overlap confirmed-or-later bookings."""
        bookings = self.list_bookings()
        potential = [b for b in bookings if b.is_potential]
        report = conflicts.collect_conflict_report(potential, bookings)
        if report:
            log_booking_operation(
                logger,
                "conflict_report",
                conflicts=len(report),
                potential=len(potential),
            )
        return report

    async def check_potential_conflicts(
        self,
        potential: list[Booking] | None = None,
    ) -> dict[str, bool]:
        """Flag each potential booking as conflicting or not.

        Every booking is checked on its own against its camera's bookings;
        a booking whose check fails is reported as not conflicting.
        """
        if potential is None:
            potential = self.list_potential_bookings()
        return await conflicts.check_potential_bookings(
            potential,
            lambda booking: self.bookings_for_camera(booking.camera_id),
        )

    def suggest_alternatives(
        self,
        camera_id: str,
        start_date: DateLike,
        end_date: DateLike,
        exclude_booking_id: str | None = None,
    ) -> list[AlternativeRange]:
        """Conflict-free ranges of the same length near the requested one.

        Raises:
            BookingError: INVALID_DATE_RANGE if end is before start
        """
        self._check_range(start_date, end_date)
        return conflicts.suggest_alternative_dates(
            camera_id,
            start_date,
            end_date,
            self.bookings_for_camera(camera_id),
            exclude_booking_id=exclude_booking_id,
        )

    def utilization(
        self,
        camera_id: str,
        report_start: DateLike,
        report_end: DateLike,
    ) -> UtilizationReport:
        """Booked-day utilization of a camera over an inclusive period."""
        self._check_range(report_start, report_end)
        return conflicts.utilization_report(
            camera_id,
            report_start,
            report_end,
            self.bookings_for_camera(camera_id),
        )

    # =========================================================================
    # Potential bookings
    # =========================================================================

    def create_booking(self, data: BookingCreate) -> tuple[Booking, ConflictCheckResult]:
        """Create an admin quick booking.

        A pending booking is created even when it overlaps confirmed
        bookings; the overlap is returned as a warning. A confirmed or
        completed booking blocks its camera, so overlaps are refused.

        Args:
            data: Booking creation data

        Returns:
            Tuple of (created booking, conflict check result)

        Raises:
            BookingError: INVALID_DATE_RANGE or BOOKING_CONFLICT
        """
        check = self.check_conflicts(data.camera_id, data.start_date, data.end_date)
        if check.has_conflicts and data.rental_status != RentalStatus.PENDING:
            log_booking_operation(
                logger,
                "create_booking",
                camera_id=data.camera_id,
                status=data.rental_status.value,
                conflicts=len(check.conflicting_bookings),
                rejected=True,
            )
            raise BookingError(
                code=ErrorCode.BOOKING_CONFLICT,
                details=self._conflict_details(check),
            )

        booking = Booking(
            id=self._generate_booking_id(),
            camera_id=data.camera_id,
            start_date=data.start_date,
            end_date=data.end_date,
            rental_status=data.rental_status,
            booking_type=BookingType.TEMPORARY,
            customer_name=data.customer_name.strip(),
            customer_contact=data.customer_contact.strip(),
            customer_email=(data.customer_email or "").strip() or None,
            created_at=dt.datetime.now(dt.UTC),
        )

        with _store_errors("create_booking"):
            created = self.db.create_rental(booking.to_item())
        if not created:
            # ID collision, practically impossible with uuid4
            raise BookingError(
                code=ErrorCode.STORAGE_ERROR,
                details={"operation": "create_booking", "reason": "duplicate id"},
            )

        log_booking_operation(
            logger,
            "create_booking",
            booking_id=booking.id,
            camera_id=booking.camera_id,
            status=booking.rental_status.value,
            conflicts=len(check.conflicting_bookings),
        )
        return booking, check

    def update_potential_booking(
        self,
        booking_id: str,
        updates: BookingUpdate,
    ) -> tuple[Booking, ConflictCheckResult]:
        """Change camera, dates or customer details of a potential booking.

        Returns:
            Tuple of (updated booking, conflict check for the new range)

        Raises:
            BookingError: BOOKING_NOT_FOUND, NOT_POTENTIAL_BOOKING or
                INVALID_DATE_RANGE
        """
        existing = self._get_potential(booking_id)

        changes: dict[str, Any] = {}
        if updates.camera_id:
            changes["camera_id"] = updates.camera_id
        if updates.start_date:
            changes["start_date"] = updates.start_date
        if updates.end_date:
            changes["end_date"] = updates.end_date
        if updates.customer_name:
            changes["customer_name"] = updates.customer_name.strip()
        if updates.customer_contact:
            changes["customer_contact"] = updates.customer_contact.strip()
        if "customer_email" in updates.model_fields_set:
            changes["customer_email"] = (updates.customer_email or "").strip() or None

        start = changes.get("start_date", existing.start_date)
        end = changes.get("end_date", existing.end_date)
        self._check_range(start, end)

        booking = existing.model_copy(update=changes)
        check = self.check_conflicts(booking.camera_id, start, end, booking.id)

        with _store_errors("update_potential_booking"):
            replaced = self.db.replace_rental(booking.to_item())
        if not replaced:
            raise BookingError(
                code=ErrorCode.BOOKING_NOT_FOUND,
                details={"booking_id": booking_id},
            )

        log_booking_operation(
            logger,
            "update_potential_booking",
            booking_id=booking.id,
            camera_id=booking.camera_id,
            conflicts=len(check.conflicting_bookings),
        )
        return booking, check

    def delete_potential_booking(self, booking_id: str) -> None:
        """Delete an admin-created booking.

        Raises:
            BookingError: BOOKING_NOT_FOUND, or NOT_POTENTIAL_BOOKING for
                customer rentals
        """
        existing = self.get_booking(booking_id)
        if existing.booking_type != BookingType.TEMPORARY:
            raise BookingError(
                code=ErrorCode.NOT_POTENTIAL_BOOKING,
                details={"booking_id": booking_id},
            )

        with _store_errors("delete_potential_booking"):
            deleted = self.db.delete_rental(booking_id, booking_type=BookingType.TEMPORARY.value)
        if not deleted:
            # Replaced by a customer rental since it was read
            raise BookingError(
                code=ErrorCode.NOT_POTENTIAL_BOOKING,
                details={"booking_id": booking_id},
            )

        log_booking_operation(
            logger,
            "delete_potential_booking",
            booking_id=booking_id,
            camera_id=existing.camera_id,
        )

    def convert_potential_to_confirmed(self, booking_id: str) -> Booking:
        """Confirm a potential booking if its range is still free.

        Raises:
            BookingError: BOOKING_NOT_FOUND, NOT_POTENTIAL_BOOKING or
                BOOKING_CONFLICT
        """
        existing = self._get_potential(booking_id)

        check = self.check_conflicts(
            existing.camera_id, existing.start_date, existing.end_date, existing.id
        )
        if check.has_conflicts:
            log_booking_operation(
                logger,
                "convert_potential_to_confirmed",
                booking_id=booking_id,
                camera_id=existing.camera_id,
                conflicts=len(check.conflicting_bookings),
                rejected=True,
            )
            raise BookingError(
                code=ErrorCode.BOOKING_CONFLICT,
                details={"booking_id": booking_id, **self._conflict_details(check)},
            )

        return self._save_step(
            lifecycle.advance(existing, LifecycleStep.CONFIRMED),
            "convert_potential_to_confirmed",
        )

    # =========================================================================
    # Rental lifecycle
    # =========================================================================

    def rental_progress(self, booking_id: str) -> dict[str, Any]:
        """Stepper position and next admin actions of a rental."""
        rental = self.get_booking(booking_id)
        self._warn_if_anomalous(rental)
        progress = lifecycle.step_progress(rental)
        progress["state"] = lifecycle.lifecycle_state(rental)
        progress["allowed_actions"] = lifecycle.allowed_actions(rental)
        return progress

    def transition(self, booking_id: str, target: LifecycleStep) -> Booking:
        """Move a rental to a target lifecycle step.

        Confirming through this path applies the same conflict rule as
        convert_potential_to_confirmed.

        Raises:
            BookingError: BOOKING_NOT_FOUND, INVALID_TRANSITION or
                BOOKING_CONFLICT
        """
        rental = self.get_booking(booking_id)
        self._warn_if_anomalous(rental)
        updated = lifecycle.advance(rental, target)

        if target == LifecycleStep.CONFIRMED:
            check = self.check_conflicts(
                rental.camera_id, rental.start_date, rental.end_date, rental.id
            )
            if check.has_conflicts:
                raise BookingError(
                    code=ErrorCode.BOOKING_CONFLICT,
                    details={"booking_id": booking_id, **self._conflict_details(check)},
                )

        return self._save_step(updated, "transition")

    def apply_action(self, booking_id: str, action: AdminAction) -> Booking:
        """Perform an admin action on a rental, see transition()."""
        return self.transition(booking_id, lifecycle.ACTION_TARGETS[action])

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_potential(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if not booking.is_potential:
            raise BookingError(
                code=ErrorCode.NOT_POTENTIAL_BOOKING,
                details={
                    "booking_id": booking_id,
                    "booking_type": booking.booking_type.value,
                    "rental_status": booking.rental_status.value,
                },
            )
        return booking

    def _save_step(self, updated: Booking, operation: str) -> Booking:
        """Persist a rental already moved by lifecycle.advance."""
        with _store_errors(operation):
            replaced = self.db.replace_rental(updated.to_item())
        if not replaced:
            raise BookingError(
                code=ErrorCode.BOOKING_NOT_FOUND,
                details={"booking_id": updated.id},
            )

        log_booking_operation(
            logger,
            operation,
            booking_id=updated.id,
            camera_id=updated.camera_id,
            status=lifecycle.lifecycle_state(updated).value,
        )
        return updated

    def _warn_if_anomalous(self, rental: Booking) -> None:
        if lifecycle.is_anomalous(rental):
            logger.warning(
                "Inconsistent status pair on booking %s: rental_status=%s shipping_status=%s",
                rental.id,
                rental.rental_status.value,
                rental.shipping_status.value if rental.shipping_status else None,
            )

    @staticmethod
    def _check_range(start_date: DateLike, end_date: DateLike) -> None:
        if to_local_date(end_date) < to_local_date(start_date):
            raise BookingError(
                code=ErrorCode.INVALID_DATE_RANGE,
                details={
                    "start_date": str(start_date),
                    "end_date": str(end_date),
                },
            )

    @staticmethod
    def _conflict_details(check: ConflictCheckResult) -> dict[str, str]:
        return {
            "conflicting_booking_ids": ", ".join(b.id for b in check.conflicting_bookings),
        }

"""Integration tests for the DynamoDB record store.

Runs DynamoDBService and BookingService against moto tables created by
the create_tables fixture:
1. Conditional writes and deletes on the rentals table
2. Range scans and camera GSI queries
3. Quick booking, conflict report and confirmation end to end
"""

from typing import Any

import pytest

from camrent.models import (
    AdminAction,
    Booking,
    BookingCreate,
    BookingError,
    BookingUpdate,
    ErrorCode,
    RentalStatus,
    ShippingStatus,
)
from camrent.services.booking import BookingService
from camrent.services.dynamodb import DynamoDBService, get_dynamodb_service

pytestmark = pytest.mark.integration


@pytest.fixture
def db(create_tables: None) -> DynamoDBService:
    """DynamoDB service bound to the moto tables."""
    return get_dynamodb_service()


@pytest.fixture
def service(db: DynamoDBService) -> BookingService:
    return BookingService(db)


@pytest.fixture
def stored(db: DynamoDBService, confirmed_booking: Booking, potential_booking: Booking) -> None:
    db.create_rental(confirmed_booking.to_item())
    db.create_rental(potential_booking.to_item())


class TestRentalRecords:
    """Tests for rental CRUD on DynamoDBService."""

    def test_create_and_get(self, db: DynamoDBService, confirmed_booking: Booking) -> None:
        assert db.create_rental(confirmed_booking.to_item()) is True

        item = db.get_rental("bk-confirmed")
        assert item is not None
        assert Booking.model_validate(item) == confirmed_booking

    def test_create_refuses_existing_id(self, db: DynamoDBService, confirmed_booking: Booking) -> None:
        db.create_rental(confirmed_booking.to_item())

        assert db.create_rental(confirmed_booking.to_item()) is False

    def test_replace_requires_existing(self, db: DynamoDBService, confirmed_booking: Booking) -> None:
        assert db.replace_rental(confirmed_booking.to_item()) is False
        assert db.get_rental("bk-confirmed") is None

    def test_delete_by_booking_type(
        self,
        db: DynamoDBService,
        stored: None,
    ) -> None:
        assert db.delete_rental("bk-confirmed", booking_type="temporary") is False
        assert db.get_rental("bk-confirmed") is not None

        assert db.delete_rental("bk-potential", booking_type="temporary") is True
        assert db.get_rental("bk-potential") is None

    def test_missing_item(self, db: DynamoDBService) -> None:
        assert db.get_rental("bk-missing") is None


class TestRentalQueries:
    """Tests for scans and GSI queries."""

    @pytest.fixture(autouse=True)
    def stock(self, db: DynamoDBService, sample_rentals: list[Booking]) -> None:
        for rental in sample_rentals:
            db.create_rental(rental.to_item())

    def test_range_scan(self, db: DynamoDBService) -> None:
        items = db.list_rentals_in_range("2024-06-25", "2024-07-01")

        assert sorted(item["id"] for item in items) == ["r-active", "r-cancelled", "r-return"]

    def test_camera_index(self, db: DynamoDBService) -> None:
        items = db.get_rentals_by_camera("cam-3")

        assert sorted(item["id"] for item in items) == ["r-completed", "r-return"]

    def test_list_all(self, db: DynamoDBService) -> None:
        assert len(db.list_rentals()) == 7

    def test_camera_ids_fall_back_to_bookings(self, service: BookingService) -> None:
        assert service.list_camera_ids() == ["cam-1", "cam-2", "cam-3"]

    def test_camera_table(self, db: DynamoDBService, service: BookingService) -> None:
        db.put_item("cameras", {"id": "cam-9", "name": "Leica Q2"})

        assert service.list_camera_ids() == ["cam-9"]


class TestBookingFlow:
    """End-to-end admin booking flow against the store."""

    def test_quick_booking_to_confirmed(self, service: BookingService, stored: None) -> None:
        created, check = service.create_booking(
            BookingCreate(
                camera_id="cam-1",
                start_date="2024-06-15",
                end_date="2024-06-16",
                customer_name="Katherine Johnson",
                customer_contact="0917 111 2222",
            )
        )
        assert check.has_conflicts is True

        report = {c.potential_booking.id for c in service.conflict_report()}
        assert report == {"bk-potential", created.id}

        with pytest.raises(BookingError) as exc_info:
            service.convert_potential_to_confirmed(created.id)
        assert exc_info.value.code == ErrorCode.BOOKING_CONFLICT

        moved, check = service.update_potential_booking(
            created.id,
            BookingUpdate(start_date="2024-06-20", end_date="2024-06-21"),
        )
        assert check.has_conflicts is False

        confirmed = service.convert_potential_to_confirmed(moved.id)
        assert confirmed.rental_status == RentalStatus.CONFIRMED
        assert service.get_booking(moved.id).rental_status == RentalStatus.CONFIRMED

    def test_ship_and_return(self, service: BookingService, stored: None) -> None:
        actions = [
            AdminAction.MARK_READY_TO_SHIP,
            AdminAction.MARK_IN_TRANSIT_TO_USER,
            AdminAction.MARK_DELIVERED,
            AdminAction.CONFIRM_RECEIVED,
            AdminAction.SCHEDULE_RETURN,
            AdminAction.MARK_IN_TRANSIT_TO_OWNER,
            AdminAction.MARK_RETURNED,
            AdminAction.COMPLETE,
        ]
        for action in actions:
            service.apply_action("bk-confirmed", action)

        rental = service.get_booking("bk-confirmed")
        assert rental.rental_status == RentalStatus.COMPLETED
        assert rental.shipping_status == ShippingStatus.RETURNED
        assert service.rental_progress("bk-confirmed")["allowed_actions"] == []

    def test_delete_customer_rental_refused(self, service: BookingService, stored: None) -> None:
        with pytest.raises(BookingError) as exc_info:
            service.delete_potential_booking("bk-confirmed")

        assert exc_info.value.code == ErrorCode.NOT_POTENTIAL_BOOKING

    async def test_batch_conflict_check(self, service: BookingService, stored: None) -> None:
        results: dict[str, Any] = await service.check_potential_conflicts()

        assert results == {"bk-potential": True}

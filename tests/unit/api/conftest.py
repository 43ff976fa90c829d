"""Fixtures for API route tests.

Routes run against a real BookingService whose record store is a
MagicMock backed by an in-memory dict.
"""

from typing import Any, Callable, Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from camrent.models import Booking
from camrent.services.booking import BookingService
from camrent_api.dependencies import get_booking_service
from camrent_api.main import app


@pytest.fixture
def store() -> dict[str, dict[str, Any]]:
    """Rental items keyed by id."""
    return {}


@pytest.fixture
def mock_db(store: dict[str, dict[str, Any]]) -> MagicMock:
    """Mock DynamoDB service reading and writing the in-memory store."""
    db = MagicMock()
    db.get_rental.side_effect = store.get
    db.list_rentals.side_effect = lambda *args: list(store.values())
    db.list_rentals_in_range.side_effect = lambda start, end: [
        item for item in store.values() if item["start_date"] <= end and item["end_date"] >= start
    ]
    db.get_rentals_by_camera.side_effect = lambda camera_id: [
        item for item in store.values() if item["camera_id"] == camera_id
    ]
    db.list_cameras.return_value = [{"id": "cam-1"}, {"id": "cam-2"}]

    def create(item: dict[str, Any]) -> bool:
        if item["id"] in store:
            return False
        store[item["id"]] = item
        return True

    def replace(item: dict[str, Any]) -> bool:
        if item["id"] not in store:
            return False
        store[item["id"]] = item
        return True

    def delete(rental_id: str, booking_type: str | None = None) -> bool:
        store.pop(rental_id, None)
        return True

    db.create_rental.side_effect = create
    db.replace_rental.side_effect = replace
    db.delete_rental.side_effect = delete
    return db


@pytest.fixture
def seed(store: dict[str, dict[str, Any]]) -> Callable[..., None]:
    """Put bookings into the store."""

    def _seed(*bookings: Booking) -> None:
        for booking in bookings:
            store[booking.id] = booking.to_item()

    return _seed


@pytest.fixture
def client(mock_db: MagicMock) -> Generator[TestClient, None, None]:
    """Create test client with the booking service wired to the mock store."""
    app.dependency_overrides[get_booking_service] = lambda: BookingService(mock_db)
    yield TestClient(app)
    app.dependency_overrides.clear()

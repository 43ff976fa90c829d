"""Unit tests for potential booking and conflict API routes."""

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
)

from camrent.models import Booking


@pytest.fixture(autouse=True)
def seeded(seed: Callable[..., None], confirmed_booking: Booking, potential_booking: Booking) -> None:
    seed(confirmed_booking, potential_booking)


def _quick_booking(**overrides: Any) -> dict[str, Any]:
    body = {
        "camera_id": "cam-1",
        "start_date": "2024-06-12",
        "end_date": "2024-06-13",
        "customer_name": "Katherine Johnson",
        "customer_contact": "0917 111 2222",
    }
    body.update(overrides)
    return body


class TestCreateBooking:
    """Tests for POST /api/bookings."""

    def test_potential_booking_warns_on_overlap(
        self,
        client: TestClient,
        store: dict[str, dict[str, Any]],
    ) -> None:
        response = client.post("/api/bookings", json=_quick_booking())

        assert response.status_code == HTTP_201_CREATED
        data = response.json()
        assert data["booking"]["rental_status"] == "pending"
        assert data["booking"]["booking_type"] == "temporary"
        assert data["conflicts"]["has_conflicts"] is True
        assert [b["id"] for b in data["conflicts"]["conflicting_bookings"]] == ["bk-confirmed"]
        assert data["booking"]["id"] in store

    def test_confirmed_booking_refused_on_overlap(self, client: TestClient) -> None:
        response = client.post("/api/bookings", json=_quick_booking(rental_status="confirmed"))

        assert response.status_code == HTTP_409_CONFLICT
        assert response.json()["error_code"] == "ERR_003"

    def test_confirmed_booking_on_free_dates(self, client: TestClient) -> None:
        response = client.post(
            "/api/bookings",
            json=_quick_booking(rental_status="confirmed", start_date="2024-06-20", end_date="2024-06-22"),
        )

        assert response.status_code == HTTP_201_CREATED
        assert response.json()["conflicts"]["has_conflicts"] is False

    def test_quick_booking_is_always_temporary(
        self,
        client: TestClient,
        store: dict[str, dict[str, Any]],
    ) -> None:
        response = client.post(
            "/api/bookings",
            json=_quick_booking(booking_type="regular", start_date="2024-06-20", end_date="2024-06-22"),
        )

        assert response.status_code == HTTP_201_CREATED
        booking_id = response.json()["booking"]["id"]
        assert store[booking_id]["booking_type"] == "temporary"
        assert client.delete(f"/api/bookings/{booking_id}").status_code == HTTP_200_OK

    def test_invalid_initial_status(self, client: TestClient) -> None:
        response = client.post("/api/bookings", json=_quick_booking(rental_status="active"))

        assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY

    def test_reversed_range(self, client: TestClient) -> None:
        response = client.post(
            "/api/bookings",
            json=_quick_booking(start_date="2024-06-13", end_date="2024-06-12"),
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "ERR_002"


class TestPotentialBookings:
    """Tests for listing, editing, deleting and confirming potential bookings."""

    def test_list(self, client: TestClient) -> None:
        response = client.get("/api/bookings/potential")

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["bookings"][0]["id"] == "bk-potential"

    def test_edit_dates(self, client: TestClient) -> None:
        response = client.patch("/api/bookings/bk-potential", json={"start_date": "2024-06-16"})

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["booking"]["start_date"] == "2024-06-16"
        assert data["booking"]["end_date"] == "2024-06-18"
        assert data["conflicts"]["has_conflicts"] is False

    def test_edit_customer_rental_refused(self, client: TestClient) -> None:
        response = client.patch("/api/bookings/bk-confirmed", json={"customer_name": "X"})

        assert response.status_code == HTTP_409_CONFLICT
        assert response.json()["error_code"] == "ERR_004"

    def test_delete(self, client: TestClient, store: dict[str, dict[str, Any]]) -> None:
        response = client.delete("/api/bookings/bk-potential")

        assert response.status_code == HTTP_200_OK
        assert response.json()["success"] is True
        assert "bk-potential" not in store

    def test_delete_customer_rental_refused(self, client: TestClient) -> None:
        response = client.delete("/api/bookings/bk-confirmed")

        assert response.status_code == HTTP_409_CONFLICT

    def test_delete_missing(self, client: TestClient) -> None:
        response = client.delete("/api/bookings/bk-missing")

        assert response.status_code == HTTP_404_NOT_FOUND

    def test_confirm_refused_on_conflict(self, client: TestClient) -> None:
        response = client.post("/api/bookings/bk-potential/confirm")

        assert response.status_code == HTTP_409_CONFLICT
        assert response.json()["error_code"] == "ERR_003"

    def test_confirm_after_moving_dates(self, client: TestClient) -> None:
        client.patch("/api/bookings/bk-potential", json={"start_date": "2024-06-16"})

        response = client.post("/api/bookings/bk-potential/confirm")

        assert response.status_code == HTTP_200_OK
        assert response.json()["rental_status"] == "confirmed"


class TestConflicts:
    """Tests for conflict endpoints."""

    def test_report(self, client: TestClient) -> None:
        response = client.get("/api/bookings/conflicts")

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["conflicts"][0]["potential_booking"]["id"] == "bk-potential"
        assert data["conflicts"][0]["conflicts"][0]["id"] == "bk-confirmed"

    def test_batch_check_all(self, client: TestClient) -> None:
        response = client.post("/api/bookings/conflicts/check", json={})

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"results": {"bk-potential": True}, "conflicting": 1}

    def test_batch_check_selected(self, client: TestClient) -> None:
        response = client.post("/api/bookings/conflicts/check", json={"booking_ids": ["bk-other"]})

        assert response.json() == {"results": {}, "conflicting": 0}

    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            ("2024-06-15", "2024-06-20", True),
            ("2024-06-16", "2024-06-20", False),
        ],
    )
    def test_range_check(self, client: TestClient, start: str, end: str, expected: bool) -> None:
        response = client.get(
            "/api/bookings/availability",
            params={"camera_id": "cam-1", "start_date": start, "end_date": end},
        )

        assert response.status_code == HTTP_200_OK
        assert response.json()["has_conflicts"] is expected

    def test_range_check_excludes_booking(self, client: TestClient) -> None:
        response = client.get(
            "/api/bookings/availability",
            params={
                "camera_id": "cam-1",
                "start_date": "2024-06-10",
                "end_date": "2024-06-15",
                "exclude_booking_id": "bk-confirmed",
            },
        )

        assert response.json()["has_conflicts"] is False

    def test_alternatives(self, client: TestClient) -> None:
        response = client.get(
            "/api/bookings/alternatives",
            params={"camera_id": "cam-1", "start_date": "2024-06-12", "end_date": "2024-06-14"},
        )

        assert response.status_code == HTTP_200_OK
        offsets = [s["offset_days"] for s in response.json()["suggestions"]]
        assert offsets == [-14, -11, -8, -5, 4]

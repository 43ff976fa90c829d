"""Pytest configuration and fixtures for the camera rental backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Sample bookings covering the rental lifecycle
- A booking factory for building ad-hoc scenarios
"""

import os
from datetime import date
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-camrent")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from camrent.models import (  # noqa: E402
    Booking,
    BookingType,
    PaymentStatus,
    RentalStatus,
    ShippingStatus,
)


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_services_state() -> Generator[None, None, None]:
    """Reset cached services before and after each test.

    Tests using mock_aws then get a fresh DynamoDB service inside the
    mock context instead of one created by an earlier test.
    """
    from camrent_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create the rentals and cameras tables for testing."""
    dynamodb_client.create_table(
        TableName="test-camrent-rentals",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "camera_id", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "camera_id-index",
                "KeySchema": [{"AttributeName": "camera_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    dynamodb_client.create_table(
        TableName="test-camrent-cameras",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )


# === Booking Fixtures ===


@pytest.fixture
def make_booking() -> Callable[..., Booking]:
    """Factory for bookings with sensible defaults.

    Usage:
        booking = make_booking("bk-1", start="2024-06-10", end="2024-06-15")
    """

    def _make(
        booking_id: str = "bk-1",
        camera_id: str = "cam-1",
        start: str = "2024-06-10",
        end: str = "2024-06-15",
        **fields: Any,
    ) -> Booking:
        return Booking(
            id=booking_id,
            camera_id=camera_id,
            start_date=start,
            end_date=end,
            **fields,
        )

    return _make


@pytest.fixture
def confirmed_booking(make_booking: Callable[..., Booking]) -> Booking:
    """Confirmed booking on cam-1 for 2024-06-10..15."""
    return make_booking(
        "bk-confirmed",
        rental_status=RentalStatus.CONFIRMED,
        customer_name="Ada Lovelace",
        customer_email="ada@example.com",
        camera_name="Fujifilm X100V",
    )


@pytest.fixture
def potential_booking(make_booking: Callable[..., Booking]) -> Booking:
    """Temporary pending booking on cam-1 overlapping the confirmed one."""
    return make_booking(
        "bk-potential",
        start="2024-06-14",
        end="2024-06-18",
        booking_type=BookingType.TEMPORARY,
        customer_name="Grace Hopper",
        customer_contact="+63 917 000 0000",
    )


@pytest.fixture
def sample_rentals(make_booking: Callable[..., Booking]) -> list[Booking]:
    """One rental per interesting lifecycle position."""
    return [
        make_booking("r-pending", start="2024-06-01", end="2024-06-03"),
        make_booking(
            "r-confirmed",
            start="2024-06-05",
            end="2024-06-07",
            rental_status=RentalStatus.CONFIRMED,
            payment_status=PaymentStatus.SUBMITTED,
        ),
        make_booking(
            "r-outbound",
            camera_id="cam-2",
            start="2024-06-08",
            end="2024-06-12",
            rental_status=RentalStatus.CONFIRMED,
            shipping_status=ShippingStatus.IN_TRANSIT_TO_USER,
        ),
        make_booking(
            "r-active",
            camera_id="cam-2",
            start="2024-06-20",
            end="2024-06-25",
            rental_status=RentalStatus.ACTIVE,
            shipping_status=ShippingStatus.DELIVERED,
        ),
        make_booking(
            "r-return",
            camera_id="cam-3",
            start="2024-07-01",
            end="2024-07-04",
            rental_status=RentalStatus.ACTIVE,
            shipping_status=ShippingStatus.IN_TRANSIT_TO_OWNER,
        ),
        make_booking(
            "r-completed",
            camera_id="cam-3",
            start="2024-05-01",
            end="2024-05-05",
            rental_status=RentalStatus.COMPLETED,
            shipping_status=ShippingStatus.RETURNED,
        ),
        make_booking(
            "r-cancelled",
            start="2024-06-28",
            end="2024-07-02",
            rental_status=RentalStatus.CANCELLED,
        ),
    ]


@pytest.fixture
def sample_date() -> date:
    """Reference date inside the sample month."""
    return date(2024, 6, 15)

"""Backend services for the camera rental admin."""

from .booking import BookingService
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .navigation import BackHandlerStack

__all__ = [
    "BackHandlerStack",
    "BookingService",
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
]

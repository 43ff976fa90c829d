"""FastAPI dependency injection providers for shared services.

Services are lazily instantiated and cached with @lru_cache.

Usage in routes:
    from camrent_api.dependencies import get_booking_service

    @router.get("/bookings/potential")
    async def list_potential(
        service: BookingService = Depends(get_booking_service),
    ):
        ...

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        └── BookingService

Testing:
    Use reset_services() to clear cached instances between tests, or
    override get_booking_service via app.dependency_overrides.
"""

from functools import lru_cache

from camrent.services.booking import BookingService
from camrent.services.dynamodb import get_dynamodb_service


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService instance.

    Returns:
        BookingService configured with the DynamoDB singleton.
    """
    return BookingService(db=get_dynamodb_service())


def reset_services() -> None:
    """Clear all cached service instances.

    Also resets the underlying DynamoDB singleton.
    """
    from camrent.services.dynamodb import reset_dynamodb_service

    get_booking_service.cache_clear()
    reset_dynamodb_service()

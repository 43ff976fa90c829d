"""API routes package.

Routers are organized by domain:

- health: Health check endpoints
- calendar: Per-camera month grids and utilization
- bookings: Potential bookings and conflict checks
- rentals: Rental lists, filter counts and lifecycle actions

All routers are registered in main.py with /api prefix.
"""

from camrent_api.routes.bookings import router as bookings_router
from camrent_api.routes.calendar import router as calendar_router
from camrent_api.routes.health import router as health_router
from camrent_api.routes.rentals import router as rentals_router

__all__ = [
    "bookings_router",
    "calendar_router",
    "health_router",
    "rentals_router",
]

"""FastAPI application for the camera rental admin API.

This package provides REST endpoints for:
- Health checks
- The per-camera booking calendar
- Potential bookings and conflict checks
- Rental lists, filter counts and lifecycle transitions
"""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from camrent.utils.logging import configure_logging, get_logger
from camrent_api.exceptions import register_exception_handlers
from camrent_api.middleware.correlation import CorrelationIdMiddleware
from camrent_api.routes.bookings import router as bookings_router
from camrent_api.routes.calendar import router as calendar_router
from camrent_api.routes.health import router as health_router
from camrent_api.routes.rentals import router as rentals_router

configure_logging()
logger = get_logger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def get_cors_origins() -> list[str]:
    """Allowed CORS origins from the comma separated CORS_ORIGINS env var."""
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Camera Rental Admin API",
    description="REST API for the admin booking calendar and rental workflow",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.include_router(health_router, prefix="/api")
app.include_router(calendar_router, prefix="/api")
app.include_router(bookings_router, prefix="/api")
app.include_router(rentals_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "camrent-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    logger.info("Starting camrent API on %s:%d", host, port)
    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("camrent_api.main:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()

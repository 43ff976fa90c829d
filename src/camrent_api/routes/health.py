"""Health check endpoint."""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Health check",
    response_description="Service status",
)
async def health() -> dict[str, Any]:
    """Report service status and deployment environment."""
    return {
        "status": "healthy",
        "environment": os.getenv("ENVIRONMENT", "dev"),
        "timestamp": datetime.now(UTC).isoformat(),
    }

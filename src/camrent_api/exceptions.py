"""FastAPI exception handlers for converting BookingError to HTTP responses.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Malformed filters, months and date ranges
- 404 Not Found: Booking does not exist
- 409 Conflict: The request clashes with current booking state
- 422 Unprocessable Entity: Status change not allowed from the current step
- 503 Service Unavailable: Record store failure

Usage:
    from camrent_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from camrent.models.errors import BookingError, ErrorCode
from camrent.utils.logging import get_logger

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_DATE_RANGE: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_FILTER: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_MONTH: HTTP_400_BAD_REQUEST,
    ErrorCode.BOOKING_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_CONFLICT: HTTP_409_CONFLICT,
    ErrorCode.NOT_POTENTIAL_BOOKING: HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.STORAGE_ERROR: HTTP_503_SERVICE_UNAVAILABLE,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Handle BookingError exceptions and convert to JSON response.

    Args:
        request: The incoming request
        exc: The BookingError exception

    Returns:
        JSONResponse with an ErrorResponse body and mapped status code.
    """
    status_code = get_http_status_for_error(exc.code)
    logger.info(
        "%s %s failed with %s (%d)",
        request.method,
        request.url.path,
        exc.code.value,
        status_code,
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]

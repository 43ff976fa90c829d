"""Logging helpers for the rental backend.

Every log line carries the correlation ID of the API request that caused
it, so one admin action can be followed from the route down to the
record store:

    [3f2c...] 2024-06-01 10:00:00 WARNING camrent.services.booking - Booking operation: create_booking | ...

The ID lives in a ContextVar. CorrelationIdMiddleware sets it per request;
code outside a request logs with NO_CORRELATION_ID.
"""

import logging
import os
import uuid
from contextvars import ContextVar
from typing import Any

NO_CORRELATION_ID = "no-correlation-id"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Context fields of log_booking_operation, in message order
_OPERATION_FIELDS = ("booking_id", "camera_id", "status", "conflicts", "error")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current context, generating one if needed."""
    value = correlation_id or str(uuid.uuid4())
    _correlation_id.set(value)
    return value


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the current correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefix formatted records with "[correlation_id]"."""

    def format(self, record: logging.LogRecord) -> str:
        # Records from third-party loggers may not have passed the filter
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is None:
            correlation_id = get_correlation_id() or NO_CORRELATION_ID
            record.correlation_id = correlation_id
        return f"[{correlation_id}] {super().format(record)}"


def configure_logging(level: str | None = None) -> None:
    """Route all logging through one stderr handler.

    Args:
        level: Log level name; LOG_LEVEL, then INFO when omitted
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())


def get_logger(name: str) -> logging.Logger:
    """logging.getLogger with the correlation filter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def log_booking_operation(
    logger: logging.Logger,
    operation: str,
    *,
    booking_id: str | None = None,
    camera_id: str | None = None,
    status: str | None = None,
    conflicts: int | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one service operation as a single pipe-separated line.

    The context is also attached to the record as extra attributes. Level
    is ERROR when error is given, WARNING when conflicts were found and
    INFO otherwise.

    Args:
        logger: Logger of the calling module
        operation: Service method name, e.g. "create_booking"
        booking_id: Booking the operation acted on
        camera_id: Camera the operation acted on
        status: Resulting rental status
        conflicts: Number of conflicting bookings found
        error: Failure reason (store error code)
        **extra: Further context fields, appended after the known ones
    """
    given = {
        "booking_id": booking_id,
        "camera_id": camera_id,
        "status": status,
        "conflicts": conflicts,
        "error": error,
    }
    context: dict[str, Any] = {
        key: given[key]
        for key in _OPERATION_FIELDS
        if given[key] is not None and given[key] != ""
    }
    context.update(extra)

    message = " | ".join(
        [f"Booking operation: {operation}"] + [f"{key}={value}" for key, value in context.items()]
    )

    if error:
        level = logging.ERROR
    elif conflicts:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(level, message, extra={"operation": operation, **context})

"""Shared API response models."""

from pydantic import BaseModel, ConfigDict, Field

# Re-export the domain error body, the standard error format
from camrent.models.errors import ErrorCode, ErrorResponse

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "SuccessMessage",
]


class SuccessMessage(BaseModel):
    """Generic success response for operations without data payload.

    Used for endpoints that just need to acknowledge success,
    like DELETE operations.
    """

    model_config = ConfigDict(strict=True)

    success: bool = True
    message: str = Field(
        default="Operation completed successfully",
        description="Human-readable success message",
    )

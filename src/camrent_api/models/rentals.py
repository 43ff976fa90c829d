"""API models for rental lists, filter counts and lifecycle actions."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from camrent.models import AdminAction, Booking, LifecycleStep


class RentalListResponse(BaseModel):
    """Filtered rentals.

    status/filter echo the selected bucket keys. When a highlighted
    rental was hidden by the request's bucket, they name the bucket the
    rental belongs to instead.
    """

    rentals: list[Booking] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    status: str | None = Field(default=None, description="Selected status bucket")
    filter: str | None = Field(default=None, description="Selected delivery bucket")
    highlight_id: str | None = None


class MonthOption(BaseModel):
    """Month picker entry. Empty value means all months."""

    model_config = ConfigDict(strict=True)

    value: str = Field(..., examples=["2024-06"])
    label: str = Field(..., examples=["June 2024"])


class FilterCountsResponse(BaseModel):
    """Rental counts per bucket of both filter taxonomies."""

    month: str | None = None
    status: dict[str, int] = Field(default_factory=dict)
    delivery: dict[str, int] = Field(default_factory=dict)
    status_labels: dict[str, str] = Field(default_factory=dict)
    delivery_labels: dict[str, str] = Field(default_factory=dict)
    months: list[MonthOption] = Field(default_factory=list)


class RentalProgressResponse(BaseModel):
    """Stepper position and the admin actions available next."""

    booking_id: str
    index: int = Field(..., ge=0, description="Zero-based stepper position")
    key: LifecycleStep
    label: str
    next_label: str | None = None
    total: int
    state: LifecycleStep = Field(..., description="Lifecycle state used for transitions")
    allowed_actions: list[AdminAction] = Field(default_factory=list)


class TransitionRequest(BaseModel):
    """Move a rental by target step or by admin action, not both."""

    target: LifecycleStep | None = None
    action: AdminAction | None = None

    @model_validator(mode="after")
    def exactly_one(self) -> "TransitionRequest":
        """Require exactly one of target and action."""
        if (self.target is None) == (self.action is None):
            raise ValueError("provide exactly one of target or action")
        return self

"""Base Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with shared configuration.

    All schemas inherit from this class for consistent behaviour.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class ResourceSchema(BaseSchema):
    """Base for configuration entities exchanged with clients.

    Fields are snake_case in Python and camelCase on the wire. Every field is
    optional: ``None`` means "not set", which the validation rules
    distinguish from zero values.
    """

    model_config = ConfigDict(alias_generator=to_camel)

    id: int | None = Field(default=None, description="Identity, assigned on create")
    last_updated: datetime | None = Field(
        default=None,
        description="Set by the store, read-only",
    )


class Alert(BaseSchema):
    """A user-facing message attached to a response."""

    text: str
    level: Literal["success", "info", "warning", "error"] = "success"


T = TypeVar("T")


class ResourceResponse(BaseSchema, Generic[T]):
    """Envelope for resource payloads: ``{"response": ..., "alerts": [...]}``."""

    response: T
    alerts: list[Alert] = Field(default_factory=list)

    @classmethod
    def with_alert(cls, response: T, text: str) -> "ResourceResponse[T]":
        return cls(response=response, alerts=[Alert(text=text)])


class AlertsResponse(BaseSchema):
    """Envelope for operations without a payload (deletes)."""

    alerts: list[Alert] = Field(default_factory=list)


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str = Field(
        ...,
        description="Overall health status",
        examples=["healthy", "unhealthy"],
    )
    version: str | None = Field(
        default=None,
        description="Application version",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(),
        description="Time of the check",
    )
    dependencies: dict[str, str] | None = Field(
        default=None,
        description="Health of individual dependencies",
    )

    @property
    def is_healthy(self) -> bool:
        return self.status == "healthy"

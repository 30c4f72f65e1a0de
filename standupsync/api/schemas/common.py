"""Common API schemas shared across endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys.

    Input accepts both camelCase and snake_case field names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class ErrorResponse(CamelModel):
    """Standard error response.

    Args:
        error: Error type identifier (e.g., "validation_error", "not_found")
        message: Human-readable error description
        details: Optional additional error context
        request_id: Optional request ID for tracing
    """

    error: str
    message: str
    details: Optional[dict] = None
    request_id: Optional[str] = None


class MessageResponse(CamelModel):
    message: str


class ServiceStatus(BaseModel):
    """Service health status information.

    Args:
        status: Service status ("connected", "error")
        error: Optional error message if service is unhealthy
    """

    status: str
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response with service status."""

    status: str
    version: str = "0.1.0"
    services: dict[str, ServiceStatus] = Field(default_factory=dict)

"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # Wire format is camelCase, attributes stay snake_case
        alias_generator=to_camel,
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        extra="forbid"
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""

    model_config = ConfigDict(extra="ignore")


class ListRequestDTO(RequestDTO):
    """Base class for list request DTOs with pagination."""

    page: int = Field(default=1, ge=1, description="Page number")
    page_size: int = Field(default=50, ge=1, le=200, description="Items per page")
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$", description="Sort order")

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"


T = TypeVar("T")


class ListResponseDTO(ResponseDTO, Generic[T]):
    """Base class for paginated list responses."""

    items: List[T] = Field(description="List of items")
    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Items per page")
    total_pages: int = Field(description="Total number of pages")
    has_next: bool = Field(description="Whether there are more pages")
    has_prev: bool = Field(description="Whether there are previous pages")


class HealthCheckResponseDTO(ResponseDTO):
    """Health check response DTO."""

    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=_now, description="Check timestamp")
    version: Optional[str] = Field(default=None, description="Application version")
    environment: Optional[str] = Field(default=None, description="Deployment environment")


class ErrorResponseDTO(ResponseDTO):
    """Error response DTO."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error message")
    code: Optional[str] = Field(default=None, description="Machine readable error code")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_now, description="Error timestamp")
    request_id: Optional[str] = Field(default=None, description="Request ID for tracing")


class FieldErrorDTO(ResponseDTO):
    """A single field-level validation failure."""

    field: Optional[str] = None
    message: str
    allowed_values: Optional[List[str]] = None


class ValidationErrorResponseDTO(ErrorResponseDTO):
    """Validation error response DTO."""

    field_errors: List[FieldErrorDTO] = Field(description="Field-specific validation errors")


# Utility functions
def to_dict(obj: Any, exclude_none: bool = True) -> Dict[str, Any]:
    """Convert a DTO to a JSON-ready dictionary using the wire aliases."""
    return obj.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)
